from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from meetzone.models import Candidate, Coordinate, OverlapKind, OverlapRegion, SortKey


# ---------- REQUEST MODELS ----------
class ContourCollection(BaseModel):
    """Routing-provider contours of every party, as one FeatureCollection"""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[Dict[str, Any]] = Field(
        ..., description="Polygon/MultiPolygon features with contour and group_index"
    )


class ValidatePointRequest(BaseModel):
    """Manually placed meeting point to check against an overlap"""

    point: Coordinate = Field(..., description="Candidate meeting point")
    region: OverlapRegion = Field(..., description="Previously resolved overlap")


class RankRequest(BaseModel):
    """Places-provider candidates to filter and order inside an overlap"""

    candidates: List[Candidate] = Field(default_factory=list)
    region: OverlapRegion = Field(..., description="Previously resolved overlap")
    sort_by: SortKey = Field("distance", description="Ordering key")
    anchor: Optional[Coordinate] = Field(
        None, description="Distance reference, defaults to the overlap anchor"
    )


# ---------- RESPONSE MODELS ----------
class ValidatePointResponse(BaseModel):
    valid: bool
    kind: OverlapKind


class RankResponse(BaseModel):
    sort_by: SortKey
    total_candidates: int
    candidates_in_region: int
    candidates: List[Candidate]
    anchor: Optional[Coordinate] = None
