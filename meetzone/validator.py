from typing import Sequence, Union

from loguru import logger

from meetzone.geometry import point_in_polygonal
from meetzone.models import Coordinate, OverlapRegion


def is_valid(point: Union[Coordinate, Sequence[float]], region: OverlapRegion) -> bool:
    """
    Accept a manually placed meeting point only if it lies inside the overlap.

    Anything but an intersection region rejects every point.
    """
    if not region.is_intersection:
        logger.debug(f"Rejecting meeting point: region is {region.kind.value}")
        return False

    xy = point.as_tuple() if isinstance(point, Coordinate) else tuple(point)
    inside = point_in_polygonal(xy, region.geometry)
    logger.debug(f"Meeting point {xy} inside overlap: {inside}")
    return inside
