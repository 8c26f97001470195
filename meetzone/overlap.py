"""Overlap resolution between the reachability sets of several owners."""

from typing import Iterable, Sequence

from loguru import logger

from meetzone.exceptions import IntersectionError
from meetzone.geometry import intersect, planar_area
from meetzone.models import Contour, OverlapRegion
from meetzone.reachability import ReachabilitySet, group_by_owner
from meetzone.utils import format_contour_value, log_timing


def resolve(set_a: ReachabilitySet, set_b: ReachabilitySet) -> OverlapRegion:
    """Intersect the largest contours of two owners."""
    return resolve_many([set_a, set_b])


@log_timing
def resolve_many(sets: Sequence[ReachabilitySet]) -> OverlapRegion:
    """
    Fold the intersection left to right over the largest contour of each set.

    Stops at the first empty step (NoOverlap) or failed step (Error). The
    reported travel time is the largest contributing contour value.
    """
    sets = list(sets)
    owner_ids = [s.owner_id for s in sets]
    if len(sets) < 2:
        logger.warning(f"Overlap needs at least two owners, got {owner_ids}")
        return OverlapRegion.error(
            "Need isochrones from at least two different locations", owner_ids
        )

    contours = [s.largest() for s in sets]
    values = [c.value for c in contours]
    travel_time = max(values)
    logger.info(
        "Resolving overlap of {} owners using contours {}",
        len(sets),
        " & ".join(f"{c.owner_id}:{format_contour_value(c.value)}" for c in contours),
    )

    for contour in contours:
        if contour.geometry.is_structurally_empty():
            logger.warning(
                f"Contour {contour.value} of owner {contour.owner_id} has no geometry"
            )
            return OverlapRegion.error(
                f"Contour {contour.value} of owner {contour.owner_id} has no geometry",
                owner_ids,
            )

    current = contours[0].geometry
    for step, contour in enumerate(contours[1:], start=1):
        try:
            current = intersect(current, contour.geometry)
        except IntersectionError as e:
            logger.error(f"Overlap step {step} (owner {contour.owner_id}) failed: {e}")
            return OverlapRegion.error(str(e), owner_ids)

        if current.is_empty:
            logger.warning(
                f"No intersection found once owner {contour.owner_id} was included"
            )
            return OverlapRegion.no_overlap(owner_ids, travel_time, values)

    # First part only
    area = planar_area(current.outer_rings()[0])
    logger.success(
        f"Meeting area found: {len(current.coordinates)} polygon(s), "
        f"{area / 1_000_000:.2f} km², travel time {format_contour_value(travel_time)}"
    )
    return OverlapRegion.intersection(current, area, travel_time, owner_ids, values)


def resolve_contours(contours: Iterable[Contour]) -> OverlapRegion:
    """
    Resolve a flat provider contour list: group by owner, then fold.

    Owners are intersected in the order they first appear.
    """
    contours = list(contours)
    if not contours:
        return OverlapRegion.error(
            "Insufficient data: need contours from at least two locations"
        )

    grouped = group_by_owner(contours)
    return resolve_many(list(grouped.values()))
