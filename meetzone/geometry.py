"""
Polygon algebra over GeoJSON-shaped coordinates.

Containment and area are computed directly on the [lon, lat] arrays; boolean
intersection is delegated to shapely and its output normalized back into a
single `MultiPolygonGeometry` shape (empty when nothing overlaps).
"""

import math
from typing import Any, List, Sequence, Union

from loguru import logger
from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon, mapping
from shapely.geometry.base import BaseGeometry

from meetzone.constants import METERS_PER_DEGREE, MIN_RING_VERTICES
from meetzone.exceptions import IntersectionError
from meetzone.models import MultiPolygonGeometry, PolygonGeometry, Ring

Polygonal = Union[PolygonGeometry, MultiPolygonGeometry]

_EDGE_TOLERANCE = 1e-12


# ---------- CONTAINMENT ----------
def _on_segment(x: float, y: float, a: Sequence[float], b: Sequence[float]) -> bool:
    (xa, ya), (xb, yb) = a[:2], b[:2]
    cross = (xb - xa) * (y - ya) - (yb - ya) * (x - xa)
    if abs(cross) > _EDGE_TOLERANCE * max(1.0, abs(xb - xa), abs(yb - ya)):
        return False
    return min(xa, xb) <= x <= max(xa, xb) and min(ya, yb) <= y <= max(ya, yb)


def point_in_ring(point: Sequence[float], ring: Ring) -> bool:
    """
    Ray-casting test: cast a ray rightward from `point` and count edge crossings.

    Points on an edge or vertex are outside. Rings with fewer than three
    positions contain nothing. Self-intersecting rings get whatever answer the
    crossing count gives.
    """
    if len(ring) < MIN_RING_VERTICES:
        return False

    x, y = point[0], point[1]
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i][0], ring[i][1]
        xj, yj = ring[j][0], ring[j][1]
        if _on_segment(x, y, ring[j], ring[i]):
            return False
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def point_in_polygonal(point: Sequence[float], geometry: Polygonal) -> bool:
    """True if `point` is inside the outer ring of any constituent polygon."""
    return any(point_in_ring(point, ring) for ring in geometry.outer_rings())


# ---------- MEASUREMENT ----------
def signed_area(ring: Ring) -> float:
    """Shoelace area in square degrees; positive for counter-clockwise rings."""
    if len(ring) < MIN_RING_VERTICES:
        return 0.0
    total = 0.0
    for i in range(len(ring)):
        x1, y1 = ring[i][0], ring[i][1]
        x2, y2 = ring[(i + 1) % len(ring)][0], ring[(i + 1) % len(ring)][1]
        total += x1 * y2 - x2 * y1
    return total * 0.5


def planar_area(ring: Ring) -> float:
    """
    Approximate area of `ring` in square meters.

    Degree-space area scaled by meters-per-degree at the equator on both axes;
    no latitude correction is applied, so treat it as an order of magnitude.
    """
    return abs(signed_area(ring)) * METERS_PER_DEGREE * METERS_PER_DEGREE


def polygonal_area(geometry: Polygonal) -> float:
    """Sum of `planar_area` over every outer ring (holes are not subtracted)."""
    return sum(planar_area(ring) for ring in geometry.outer_rings())


def ring_centroid(ring: Ring) -> tuple[float, float]:
    """Arithmetic mean of the ring's distinct vertices (not an area centroid)."""
    vertices = list(ring)
    if len(vertices) > 1 and list(vertices[0][:2]) == list(vertices[-1][:2]):
        vertices = vertices[:-1]
    if not vertices:
        raise ValueError("Cannot take the centroid of an empty ring")
    lon = sum(v[0] for v in vertices) / len(vertices)
    lat = sum(v[1] for v in vertices) / len(vertices)
    return lon, lat


# ---------- NORMALIZATION ----------
def _nesting_depth(value: Any) -> int:
    """Depth of nested sequences down to the first number; 0 if none is reached."""
    depth = 0
    while isinstance(value, (list, tuple)):
        if not value:
            return 0
        depth += 1
        value = value[0]
    return depth if isinstance(value, (int, float)) else 0


def normalize_coordinates(raw: Any) -> MultiPolygonGeometry:
    """
    Coerce loosely nested coordinate arrays into a `MultiPolygonGeometry`.

    A ring, a polygon and a multipolygon are all accepted. `[]`, `[[]]` and
    polygons without an outer ring all come back as the empty MultiPolygon.
    """
    depth = _nesting_depth(raw)
    if depth == 0:
        return MultiPolygonGeometry.empty()
    if depth == 2:
        polygons = [[raw]]
    elif depth == 3:
        polygons = [raw]
    elif depth == 4:
        polygons = raw
    else:
        raise IntersectionError(f"Unrecognized coordinate nesting depth {depth}")

    cleaned = []
    for rings in polygons:
        rings = [[list(pos) for pos in ring] for ring in rings if ring]
        if rings:
            cleaned.append(rings)
    return MultiPolygonGeometry(coordinates=cleaned)


def _polygonal_parts(shape: BaseGeometry) -> List[Polygon]:
    if shape.is_empty:
        return []
    if isinstance(shape, Polygon):
        return [shape]
    if hasattr(shape, "geoms"):
        parts = []
        for part in shape.geoms:
            parts.extend(_polygonal_parts(part))
        return parts
    # Touching edges or corners leave lines and points behind.
    return []


def from_shape(shape: BaseGeometry) -> MultiPolygonGeometry:
    """Polygonal parts of a shapely geometry as a `MultiPolygonGeometry`."""
    parts = [p for p in _polygonal_parts(shape) if p.area > 0]
    if not parts:
        return MultiPolygonGeometry.empty()
    return normalize_coordinates([mapping(p)["coordinates"] for p in parts])


def _check_ring(ring: Ring) -> None:
    if any(len(pos) < 2 for pos in ring):
        raise ValueError("ring position with fewer than two ordinates")
    if not all(math.isfinite(v) for pos in ring for v in pos[:2]):
        raise ValueError("ring contains a non-finite coordinate")
    distinct = {tuple(pos[:2]) for pos in ring}
    if len(distinct) < MIN_RING_VERTICES:
        raise ValueError(
            f"ring has {len(distinct)} distinct positions, "
            f"needs at least {MIN_RING_VERTICES}"
        )


def to_shape(geometry: Polygonal) -> MultiPolygon:
    """Wrap a Polygon or MultiPolygon into a shapely MultiPolygon for clipping."""
    polygons = []
    for rings in geometry.polygons():
        for ring in rings:
            _check_ring(ring)
        shell = [tuple(pos[:2]) for pos in rings[0]]
        holes = [[tuple(pos[:2]) for pos in hole] for hole in rings[1:]]
        polygons.append(Polygon(shell, holes))
    return MultiPolygon(polygons)


# ---------- BOOLEAN OPERATIONS ----------
def intersect(geom_a: Polygonal, geom_b: Polygonal) -> MultiPolygonGeometry:
    """
    Intersection of two polygonal geometries.

    Returns the empty MultiPolygon when the regions do not overlap (including
    when they only share an edge). Raises `IntersectionError`, with both inputs
    attached, when the rings cannot be clipped.
    """
    try:
        result = to_shape(geom_a).intersection(to_shape(geom_b))
    except (GEOSException, ValueError, TypeError) as e:
        logger.error(f"Clipping failed: {e}")
        raise IntersectionError(
            f"Intersection calculation failed: {e}", geometries=[geom_a, geom_b]
        ) from e

    clipped = from_shape(result)
    logger.debug(
        f"Clipped {len(geom_a.polygons())} x {len(geom_b.polygons())} polygons "
        f"into {len(clipped.coordinates)} polygon(s)"
    )
    return clipped
