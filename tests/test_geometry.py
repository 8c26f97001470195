import math

import pytest
from loguru import logger

from meetzone.exceptions import IntersectionError
from meetzone.geometry import (
    intersect,
    normalize_coordinates,
    planar_area,
    point_in_polygonal,
    point_in_ring,
    polygonal_area,
    ring_centroid,
    signed_area,
    to_shape,
)
from meetzone.models import MultiPolygonGeometry, PolygonGeometry

M2_PER_DEG2 = 111_000 * 111_000


class TestPointInRing:
    def test_inside_and_outside(self, square):
        logger.info("Testing ray casting on a 10x10 square")
        ring = square(0, 0, 10, 10)
        assert point_in_ring((5, 5), ring)
        assert not point_in_ring((15, 5), ring)
        assert not point_in_ring((-1, 5), ring)
        assert not point_in_ring((5, 11), ring)

    def test_open_ring(self):
        logger.info("Testing an implicitly closed ring")
        ring = [[0, 0], [0, 10], [10, 10], [10, 0]]
        assert point_in_ring((5, 5), ring)
        assert not point_in_ring((15, 5), ring)

    @pytest.mark.parametrize(
        "point", [(0, 5), (10, 5), (5, 0), (5, 10), (0, 0), (10, 10)]
    )
    def test_boundary_points_are_outside(self, square, point):
        assert not point_in_ring(point, square(0, 0, 10, 10))

    def test_short_ring_contains_nothing(self):
        logger.info("Testing rings with fewer than three positions")
        assert not point_in_ring((0, 0), [])
        assert not point_in_ring((0.5, 0.5), [[0, 0], [1, 1]])

    def test_concave_ring(self):
        logger.info("Testing an L-shaped ring")
        ring = [[0, 0], [10, 0], [10, 4], [4, 4], [4, 10], [0, 10], [0, 0]]
        assert point_in_ring((2, 8), ring)
        assert point_in_ring((8, 2), ring)
        assert not point_in_ring((8, 8), ring)

    def test_self_intersecting_ring_does_not_raise(self):
        bowtie = [[0, 0], [10, 10], [10, 0], [0, 10], [0, 0]]
        assert isinstance(point_in_ring((5, 2), bowtie), bool)


class TestPointInPolygonal:
    def test_multipolygon_is_a_union(self, square):
        logger.info("Testing membership across MultiPolygon parts")
        geometry = MultiPolygonGeometry(
            coordinates=[[square(0, 0, 1, 1)], [square(5, 5, 6, 6)]]
        )
        assert point_in_polygonal((0.5, 0.5), geometry)
        assert point_in_polygonal((5.5, 5.5), geometry)
        assert not point_in_polygonal((3, 3), geometry)

    def test_holes_are_ignored(self, square):
        logger.info("Testing that holes do not affect membership")
        geometry = PolygonGeometry(coordinates=[square(0, 0, 10, 10), square(4, 4, 6, 6)])
        assert point_in_polygonal((5, 5), geometry)

    def test_empty_geometry(self):
        assert not point_in_polygonal((0, 0), MultiPolygonGeometry.empty())


class TestArea:
    def test_unit_square(self, square):
        logger.info("Testing planar area of a one-degree square")
        assert planar_area(square(0, 0, 1, 1)) == pytest.approx(M2_PER_DEG2)

    def test_orientation(self, square):
        ring = square(0, 0, 2, 3)
        assert signed_area(ring) == pytest.approx(6)
        assert signed_area(list(reversed(ring))) == pytest.approx(-6)
        assert planar_area(list(reversed(ring))) == pytest.approx(6 * M2_PER_DEG2)

    def test_degenerate_rings(self):
        assert planar_area([]) == 0
        assert planar_area([[0, 0], [1, 1]]) == 0
        assert planar_area([[0, 0], [1, 1], [2, 2]]) == 0

    def test_polygonal_area_sums_outer_rings(self, square):
        geometry = MultiPolygonGeometry(
            coordinates=[[square(0, 0, 1, 1)], [square(5, 5, 7, 7), square(5.5, 5.5, 6, 6)]]
        )
        assert polygonal_area(geometry) == pytest.approx(5 * M2_PER_DEG2)

    def test_ring_centroid(self, square):
        assert ring_centroid(square(0, 0, 10, 10)) == pytest.approx((5, 5))
        assert ring_centroid([[0, 0], [3, 0], [0, 3]]) == pytest.approx((1, 1))
        with pytest.raises(ValueError):
            ring_centroid([])


class TestNormalize:
    @pytest.mark.parametrize("raw", [[], [[]], [[[]]], [[[], []]], None])
    def test_empty_signals(self, raw):
        logger.info(f"Testing empty signal {raw!r}")
        result = normalize_coordinates(raw)
        assert result.is_empty
        assert result == MultiPolygonGeometry.empty()

    def test_nesting_depths(self, square):
        ring = square(0, 0, 1, 1)
        assert len(normalize_coordinates(ring).coordinates) == 1
        assert len(normalize_coordinates([ring]).coordinates) == 1
        assert len(normalize_coordinates([[ring], [ring]]).coordinates) == 2
        assert normalize_coordinates(ring).coordinates[0][0] == ring

    def test_bare_position_is_rejected(self):
        with pytest.raises(IntersectionError):
            normalize_coordinates([1.0, 2.0])


class TestIntersect:
    def test_overlapping_squares(self, square_polygon):
        logger.info("Testing intersection of two overlapping squares")
        result = intersect(square_polygon(0, 0, 10, 10), square_polygon(5, 5, 15, 15))
        assert isinstance(result, MultiPolygonGeometry)
        assert not result.is_empty
        assert len(result.coordinates) == 1
        assert to_shape(result).bounds == pytest.approx((5, 5, 10, 10))
        assert polygonal_area(result) == pytest.approx(25 * M2_PER_DEG2)

    def test_symmetry(self, square_polygon):
        logger.info("Testing intersect(A, B) == intersect(B, A)")
        a = square_polygon(0, 0, 10, 10)
        b = PolygonGeometry(coordinates=[[[5, -5], [20, 5], [5, 15], [5, -5]]])
        ab = to_shape(intersect(a, b))
        ba = to_shape(intersect(b, a))
        assert ab.symmetric_difference(ba).area == pytest.approx(0, abs=1e-9)

    def test_multipolygon_input(self, square):
        logger.info("Testing a split region against a band crossing both parts")
        split = MultiPolygonGeometry(coordinates=[[square(0, 0, 2, 2)], [square(4, 0, 6, 2)]])
        band = PolygonGeometry(coordinates=[square(1, 0.5, 5, 1.5)])
        result = intersect(split, band)
        assert len(result.coordinates) == 2
        assert polygonal_area(result) == pytest.approx(2 * M2_PER_DEG2)

    def test_disjoint_squares(self, square_polygon):
        logger.info("Testing disjoint squares give the empty result")
        result = intersect(square_polygon(-0.5, -0.5, 0.5, 0.5), square_polygon(99.5, 79.5, 100.5, 80.5))
        assert result.is_empty
        assert result == MultiPolygonGeometry.empty()

    def test_shared_edge_is_empty(self, square_polygon):
        result = intersect(square_polygon(0, 0, 1, 1), square_polygon(1, 0, 2, 1))
        assert result.is_empty

    def test_short_ring_raises(self, square_polygon):
        logger.info("Testing that a two-point ring fails clipping")
        bad = PolygonGeometry(coordinates=[[[0, 0], [1, 1]]])
        good = square_polygon(0, 0, 1, 1)
        with pytest.raises(IntersectionError) as exc_info:
            intersect(bad, good)
        assert exc_info.value.geometries == [bad, good]

    def test_nan_coordinate_raises(self, square_polygon):
        bad = PolygonGeometry(coordinates=[[[0, 0], [1, math.nan], [1, 1], [0, 0]]])
        with pytest.raises(IntersectionError):
            intersect(square_polygon(0, 0, 1, 1), bad)
