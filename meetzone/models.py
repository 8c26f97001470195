"""Canonical home for ALL Pydantic models used across the project."""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

# Type aliases
OwnerId = Union[int, str]
SortKey = Literal["distance", "rating", "relevance"]
Position = List[float]  # [lon, lat] (extra ordinates are carried, never read)
Ring = List[Position]


# ---------- COORDINATES ----------
class Coordinate(BaseModel):
    """WGS84 point; accepts `lng` as an alias for `lon`"""

    model_config = ConfigDict(frozen=True)

    lon: float = Field(
        ...,
        ge=-180,
        le=180,
        validation_alias=AliasChoices("lon", "lng"),
        description="Longitude",
    )
    lat: float = Field(..., ge=-90, le=90, description="Latitude")

    def as_tuple(self) -> tuple[float, float]:
        return (self.lon, self.lat)


# ---------- GEOMETRY (GeoJSON-shaped) ----------
class PolygonGeometry(BaseModel):
    """Outer ring first, then holes. Holes are kept but never processed."""

    model_config = ConfigDict(frozen=True)

    type: Literal["Polygon"] = "Polygon"
    coordinates: List[Ring] = Field(
        default_factory=list, description="Rings of [lon, lat] positions"
    )

    def polygons(self) -> List[List[Ring]]:
        return [self.coordinates] if self.coordinates else []

    def outer_rings(self) -> List[Ring]:
        return [rings[0] for rings in self.polygons() if rings]

    def is_structurally_empty(self) -> bool:
        return not any(ring for ring in self.outer_rings())


class MultiPolygonGeometry(BaseModel):
    """
    Ordered polygons of a possibly split region.

    `MultiPolygonGeometry(coordinates=[])` is the single representation of an
    empty clipping result.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: List[List[Ring]] = Field(
        default_factory=list, description="Polygons, each as a list of rings"
    )

    @classmethod
    def empty(cls) -> "MultiPolygonGeometry":
        return cls(coordinates=[])

    @property
    def is_empty(self) -> bool:
        return self.is_structurally_empty()

    def polygons(self) -> List[List[Ring]]:
        return [rings for rings in self.coordinates if rings]

    def outer_rings(self) -> List[Ring]:
        return [rings[0] for rings in self.polygons()]

    def is_structurally_empty(self) -> bool:
        return not any(ring for ring in self.outer_rings())


Geometry = Annotated[
    Union[PolygonGeometry, MultiPolygonGeometry], Field(discriminator="type")
]


# ---------- CONTOURS ----------
class Contour(BaseModel):
    """One reachability band of one owner"""

    model_config = ConfigDict(frozen=True)

    value: float = Field(..., description="Contour level (minutes or meters)")
    owner_id: OwnerId = Field(
        ..., description="Origin this contour belongs to (provider group index)"
    )
    geometry: Geometry = Field(..., description="Polygon or MultiPolygon region")
    metadata: Optional[Dict[str, Any]] = Field(
        None, description="Provider properties carried through (e.g. color)"
    )


# ---------- CANDIDATES ----------
class Candidate(BaseModel):
    """Point of interest considered as a meeting location"""

    id: str = Field(..., description="Unique candidate identifier")
    name: Optional[str] = Field(None, description="Display name")
    category: Optional[str] = Field(None, description="Provider category")
    address: Optional[str] = Field(None, description="Formatted address")
    coordinates: Coordinate = Field(..., description="Candidate location")
    distance: Optional[float] = Field(
        None, ge=0, description="Distance in meters from the ranking anchor"
    )
    rating: Optional[float] = Field(None, description="Provider rating")
    relevance: Optional[float] = Field(None, description="Provider relevance score")
    metadata: Optional[Dict[str, Any]] = Field(
        None, description="Additional provider data"
    )


# ---------- OVERLAP RESULT ----------
class OverlapKind(str, Enum):
    INTERSECTION = "intersection"
    NO_OVERLAP = "no_overlap"
    ERROR = "error"


class OverlapRegion(BaseModel):
    """Result of intersecting the representative contours of several owners"""

    model_config = ConfigDict(frozen=True)

    kind: OverlapKind = Field(..., description="Classification of the result")
    geometry: Optional[Geometry] = Field(
        None, description="Overlap geometry, only for intersections"
    )
    area_square_meters: Optional[float] = Field(
        None, ge=0, description="Approximate planar area, only for intersections"
    )
    travel_time: Optional[float] = Field(
        None, description="Largest contributing contour value"
    )
    owner_ids: List[OwnerId] = Field(
        default_factory=list, description="Owners that were intersected"
    )
    contour_values: List[float] = Field(
        default_factory=list, description="Contributing contour values, by owner"
    )
    message: Optional[str] = Field(None, description="Diagnostic message")

    @model_validator(mode="after")
    def geometry_only_on_intersection(self):
        if self.kind != OverlapKind.INTERSECTION and (
            self.geometry is not None or self.area_square_meters is not None
        ):
            raise ValueError(f"{self.kind.value} region cannot carry geometry or area")
        return self

    @computed_field
    @property
    def area_km2(self) -> Optional[float]:
        if self.area_square_meters is None:
            return None
        return round(self.area_square_meters / 1_000_000, 2)

    @property
    def is_intersection(self) -> bool:
        return self.kind == OverlapKind.INTERSECTION and self.geometry is not None

    @classmethod
    def intersection(
        cls,
        geometry: Union[PolygonGeometry, MultiPolygonGeometry],
        area_square_meters: float,
        travel_time: float,
        owner_ids: Sequence[OwnerId],
        contour_values: Sequence[float] = (),
    ) -> "OverlapRegion":
        return cls(
            kind=OverlapKind.INTERSECTION,
            geometry=geometry,
            area_square_meters=area_square_meters,
            travel_time=travel_time,
            owner_ids=list(owner_ids),
            contour_values=list(contour_values),
        )

    @classmethod
    def no_overlap(
        cls,
        owner_ids: Sequence[OwnerId],
        travel_time: Optional[float] = None,
        contour_values: Sequence[float] = (),
        message: Optional[str] = None,
    ) -> "OverlapRegion":
        return cls(
            kind=OverlapKind.NO_OVERLAP,
            travel_time=travel_time,
            owner_ids=list(owner_ids),
            contour_values=list(contour_values),
            message=message,
        )

    @classmethod
    def error(
        cls, message: str, owner_ids: Sequence[OwnerId] = ()
    ) -> "OverlapRegion":
        return cls(kind=OverlapKind.ERROR, owner_ids=list(owner_ids), message=message)
