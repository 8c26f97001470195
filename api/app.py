from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from api.schemas import (
    ContourCollection,
    RankRequest,
    RankResponse,
    ValidatePointRequest,
    ValidatePointResponse,
)
from api.services import (
    process_overlap_request,
    process_rank_request,
    process_validate_request,
)
from meetzone.config import API_HOST, API_PORT, CORS_ORIGINS, configure_logging
from meetzone.exceptions import ValidationError
from meetzone.io import overlap_to_feature_collection
from meetzone.models import OverlapRegion

configure_logging()

# ---------- FASTAPI APP ----------
app = FastAPI(
    title="Meetzone Overlap API",
    version="0.1.0",
    description="Meeting-area overlap, meeting-point validation and candidate ranking",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- ENDPOINTS ----------
@app.get("/")
def root():
    """API information"""
    return {
        "name": "Meetzone Overlap API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
        "features": [
            "Isochrone overlap between two or more locations",
            "Meeting point validation",
            "Candidate ranking inside the overlap",
        ],
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.post("/overlap", response_model=OverlapRegion)
def compute_overlap_endpoint(collection: ContourCollection):
    """
    Intersect the largest contour of every location in the collection

    - Features are grouped by `group_index`
    - `kind` is `intersection`, `no_overlap` or `error`; all come back as 200
    """
    try:
        return process_overlap_request(collection)
    except ValidationError as e:
        logger.warning(f"Rejected contour collection: {e}")
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/overlap/validate", response_model=ValidatePointResponse)
def validate_point_endpoint(request: ValidatePointRequest):
    """Check a manually placed meeting point against an overlap"""
    return process_validate_request(request)


@app.post("/overlap/candidates", response_model=RankResponse)
def rank_candidates_endpoint(request: RankRequest):
    """Keep candidates inside the overlap and order them"""
    return process_rank_request(request)


@app.post("/overlap/geojson")
def overlap_geojson_endpoint(region: OverlapRegion) -> Dict[str, Any]:
    """Overlap as a GeoJSON FeatureCollection for the map layer"""
    return overlap_to_feature_collection(region)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=API_HOST, port=API_PORT)
