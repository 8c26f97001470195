"""Service layer for overlap endpoint business logic."""

from loguru import logger

from api.schemas import (
    ContourCollection,
    RankRequest,
    RankResponse,
    ValidatePointRequest,
    ValidatePointResponse,
)
from meetzone.io import contours_from_geojson
from meetzone.models import OverlapRegion
from meetzone.overlap import resolve_contours
from meetzone.ranking import rank_within_region, region_anchor
from meetzone.validator import is_valid


def process_overlap_request(collection: ContourCollection) -> OverlapRegion:
    """
    Resolve the overlap of every party's largest contour.

    Raises meetzone ValidationError when the features cannot be read as contours.
    """
    logger.info(f"Overlap requested for {len(collection.features)} feature(s)")
    contours = contours_from_geojson(collection.model_dump())
    region = resolve_contours(contours)
    logger.info(f"Overlap result: {region.kind.value}")
    return region


def process_validate_request(request: ValidatePointRequest) -> ValidatePointResponse:
    valid = is_valid(request.point, request.region)
    return ValidatePointResponse(valid=valid, kind=request.region.kind)


def process_rank_request(request: RankRequest) -> RankResponse:
    anchor = request.anchor or region_anchor(request.region)
    ranked = rank_within_region(
        request.candidates, request.region, request.sort_by, anchor=anchor
    )
    logger.info(
        f"Ranked {len(ranked)}/{len(request.candidates)} candidates by {request.sort_by}"
    )
    return RankResponse(
        sort_by=request.sort_by,
        total_candidates=len(request.candidates),
        candidates_in_region=len(ranked),
        candidates=ranked,
        anchor=anchor,
    )
