"""Filtering and ordering of candidate meeting places inside an overlap."""

from math import asin, cos, radians, sin, sqrt
from typing import List, Optional, Sequence, Union

from loguru import logger

from meetzone.constants import EARTH_RADIUS_M
from meetzone.geometry import ring_centroid
from meetzone.models import Candidate, Coordinate, OverlapRegion, SortKey
from meetzone.validator import is_valid

Point = Union[Coordinate, Sequence[float]]


def _xy(point: Point) -> tuple[float, float]:
    if isinstance(point, Coordinate):
        return point.as_tuple()
    return point[0], point[1]


def haversine_m(a: Point, b: Point) -> float:
    """Great-circle distance in meters between two (lon, lat) points."""
    lon1, lat1 = map(radians, _xy(a))
    lon2, lat2 = map(radians, _xy(b))

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, h)))


def region_anchor(region: OverlapRegion) -> Optional[Coordinate]:
    """Mean vertex of the first outer ring of the overlap, or None."""
    if not region.is_intersection:
        return None
    rings = [ring for ring in region.geometry.outer_rings() if ring]
    if not rings:
        return None
    lon, lat = ring_centroid(rings[0])
    return Coordinate(lon=lon, lat=lat)


def rank_within_region(
    candidates: Sequence[Candidate],
    region: OverlapRegion,
    sort_key: SortKey = "distance",
    anchor: Optional[Point] = None,
) -> List[Candidate]:
    """
    Keep the candidates inside `region` and order them by `sort_key`.

    - distance: ascending haversine distance to `anchor` (defaults to the
      region anchor); the returned candidates carry the computed distance.
    - rating / relevance: descending by the candidate's own field, candidates
      without it last.

    Ties keep their input order.
    """
    if not region.is_intersection:
        logger.warning(f"No candidates can be ranked in a {region.kind.value} region")
        return []

    inside = [c for c in candidates if is_valid(c.coordinates, region)]
    logger.info(
        f"{len(inside)}/{len(candidates)} candidates inside the overlap, sorting by {sort_key}"
    )

    if sort_key == "distance":
        if anchor is None:
            anchor = region_anchor(region)
        if anchor is None:
            logger.warning("Overlap has no vertices to measure distances from")
            return []
        measured = [
            c.model_copy(update={"distance": haversine_m(c.coordinates, anchor)})
            for c in inside
        ]
        return sorted(measured, key=lambda c: c.distance)

    if sort_key in ("rating", "relevance"):

        def by_field(candidate: Candidate):
            value = getattr(candidate, sort_key)
            return (value is None, -value if value is not None else 0.0)

        return sorted(inside, key=by_field)

    raise ValueError(f"Unknown sort key: {sort_key}")
