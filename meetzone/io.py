# meetzone/io.py

import math
from typing import Any, Dict, Iterable, List, Optional

import geopandas as gpd
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from shapely.geometry import shape

from meetzone.constants import CRS_WGS84
from meetzone.exceptions import ValidationError
from meetzone.models import Candidate, Contour, OverlapRegion, OwnerId
from meetzone.utils import format_contour_value

VALUE_KEYS = ("contour", "value")
OWNER_KEYS = ("group_index", "owner_id")
POLYGONAL_TYPES = ("Polygon", "MultiPolygon")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _scalar(value: Any) -> Any:
    # numpy scalars from GeoDataFrame properties
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        return value.item()
    return value


def _clean_owner(value: Any) -> OwnerId:
    value = _scalar(value)
    # pandas turns integer columns with gaps into floats
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _iter_positions(coordinates: Any):
    if not isinstance(coordinates, (list, tuple)):
        return
    if coordinates and not isinstance(coordinates[0], (list, tuple)):
        yield coordinates
        return
    for item in coordinates:
        yield from _iter_positions(item)


def _validate_positions(coordinates: Any, label: str) -> None:
    for pos in _iter_positions(coordinates):
        if len(pos) < 2:
            raise ValidationError(f"{label}: position {list(pos)} lacks a latitude")
        if not all(_is_number(v) for v in pos):
            raise ValidationError(f"{label}: non-numeric position {list(pos)}")
        lon, lat = pos[0], pos[1]
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise ValidationError(f"{label}: non-finite position {list(pos)}")
        if not (-180 <= lon <= 180 and -90 <= lat <= 90):
            raise ValidationError(f"{label}: position {list(pos)} outside WGS84 range")


# ---------- CONTOUR INGESTION ----------
def contour_from_feature(
    feature: Dict[str, Any], owner_id: Optional[OwnerId] = None, label: str = "feature"
) -> Contour:
    """
    Build a Contour from one provider GeoJSON feature.

    The contour value comes from the `contour` or `value` property, the owner
    from `group_index` or `owner_id`, falling back to `owner_id` here.
    """
    geometry = feature.get("geometry") or {}
    properties = dict(feature.get("properties") or {})

    if geometry.get("type") not in POLYGONAL_TYPES:
        raise ValidationError(
            f"{label}: expected Polygon or MultiPolygon, got {geometry.get('type')}"
        )

    value = next(
        (properties[k] for k in VALUE_KEYS if not _is_missing(properties.get(k))), None
    )
    if value is None:
        raise ValidationError(f"{label}: no contour value ({' / '.join(VALUE_KEYS)})")

    owner = next(
        (properties[k] for k in OWNER_KEYS if not _is_missing(properties.get(k))),
        owner_id,
    )
    if _is_missing(owner):
        raise ValidationError(f"{label}: no owner ({' / '.join(OWNER_KEYS)})")

    _validate_positions(geometry.get("coordinates"), label)

    metadata = {
        k: v
        for k, v in properties.items()
        if k not in VALUE_KEYS + OWNER_KEYS and not _is_missing(v)
    }
    try:
        return Contour(
            value=_scalar(value),
            owner_id=_clean_owner(owner),
            geometry=geometry,
            metadata=metadata or None,
        )
    except PydanticValidationError as e:
        raise ValidationError(f"{label}: {e}") from e


def contours_from_geojson(
    feature_collection: Dict[str, Any], owner_id: Optional[OwnerId] = None
) -> List[Contour]:
    """Contours of every feature in a provider FeatureCollection."""
    features = feature_collection.get("features") or []
    contours = [
        contour_from_feature(f, owner_id=owner_id, label=f"feature {i}")
        for i, f in enumerate(features)
    ]
    logger.info(f"Parsed {len(contours)} contour(s) from FeatureCollection")
    return contours


def contours_from_geodataframe(
    gdf: gpd.GeoDataFrame, owner_id: Optional[OwnerId] = None
) -> List[Contour]:
    """
    Convert provider isochrones held in a GeoDataFrame into Contours.

    Accepts `band_minutes` / `band_hours` columns when no `contour` or `value`
    column is present, and reprojects to WGS84 when needed.
    """
    gdf = gdf.copy()
    if gdf.crs is None:
        gdf.set_crs(CRS_WGS84, inplace=True)
    elif gdf.crs.to_string() != CRS_WGS84:
        logger.debug(f"Reprojecting contours from {gdf.crs.to_string()} to {CRS_WGS84}")
        gdf = gdf.to_crs(CRS_WGS84)

    if not any(k in gdf.columns for k in VALUE_KEYS):
        if "band_minutes" in gdf.columns:
            gdf["value"] = gdf["band_minutes"]
        elif "band_hours" in gdf.columns:
            gdf["value"] = gdf["band_hours"] * 60.0
        else:
            raise ValidationError(
                "No known contour column found (contour, value, band_minutes, band_hours)"
            )

    return contours_from_geojson(gdf.__geo_interface__, owner_id=owner_id)


def read_contours(path: str, owner_id: Optional[OwnerId] = None) -> List[Contour]:
    """Read contours from any vector file geopandas can open."""
    logger.info(f"Reading contours from {path}")
    return contours_from_geodataframe(gpd.read_file(path), owner_id=owner_id)


# ---------- CANDIDATE INGESTION ----------
def candidates_from_records(records: Iterable[Dict[str, Any]]) -> List[Candidate]:
    """Validate raw places-provider records into Candidates."""
    candidates = []
    for i, record in enumerate(records):
        try:
            candidates.append(Candidate.model_validate(record))
        except PydanticValidationError as e:
            raise ValidationError(f"candidate {i}: {e}") from e
    return candidates


# ---------- OVERLAP EXPORT ----------
def overlap_to_feature_collection(region: OverlapRegion) -> Dict[str, Any]:
    """
    GeoJSON FeatureCollection for the map layer.

    One feature for an intersection; no features otherwise.
    """
    if not region.is_intersection:
        return {"type": "FeatureCollection", "features": []}

    labels = [format_contour_value(v) for v in region.contour_values]
    feature = {
        "type": "Feature",
        "properties": {
            "isIntersection": True,
            "area": region.area_km2,
            "travelTime": region.travel_time,
            "range": " & ".join(labels),
            "value": "_".join(labels),
            "owners": [str(o) for o in region.owner_ids],
        },
        "geometry": region.geometry.model_dump(),
    }
    return {"type": "FeatureCollection", "features": [feature]}


def overlap_to_geodataframe(region: OverlapRegion) -> gpd.GeoDataFrame:
    """Single-row GeoDataFrame of an intersection (empty frame otherwise)."""
    if not region.is_intersection:
        return gpd.GeoDataFrame(
            columns=["travel_time", "area_km2", "geometry"],
            geometry="geometry",
            crs=CRS_WGS84,
        )
    return gpd.GeoDataFrame(
        {
            "travel_time": [region.travel_time],
            "area_km2": [region.area_km2],
            "owners": [" & ".join(str(o) for o in region.owner_ids)],
            "geometry": [shape(region.geometry.model_dump())],
        },
        crs=CRS_WGS84,
    )


def save_overlap(
    region: OverlapRegion, filename: str, driver: str = "GeoJSON"
) -> Optional[str]:
    """Write an intersection to `filename`; returns the path, or None if nothing to write."""
    if not region.is_intersection:
        logger.warning(f"Nothing to save: overlap is {region.kind.value}")
        return None
    overlap_to_geodataframe(region).to_file(filename, driver=driver)
    logger.success(f"Overlap polygon saved to {filename}")
    return filename
