import sys

import pytest
from loguru import logger

from meetzone.models import Contour, MultiPolygonGeometry, OverlapRegion, PolygonGeometry

# Configure loguru for tests
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    level="INFO",
)


def square_ring(x0, y0, x1, y1):
    """Closed counter-clockwise ring of an axis-aligned box"""
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1], [x0, y0]]


@pytest.fixture
def square():
    return square_ring


@pytest.fixture
def square_polygon():
    def _polygon(x0, y0, x1, y1):
        return PolygonGeometry(coordinates=[square_ring(x0, y0, x1, y1)])

    return _polygon


@pytest.fixture
def make_contour():
    def _contour(owner_id, value, x0, y0, x1, y1):
        return Contour(
            value=value,
            owner_id=owner_id,
            geometry=PolygonGeometry(coordinates=[square_ring(x0, y0, x1, y1)]),
        )

    return _contour


@pytest.fixture
def square_region():
    """Intersection region covering [0, 10] x [0, 10]"""
    geometry = MultiPolygonGeometry(coordinates=[[square_ring(0, 0, 10, 10)]])
    return OverlapRegion.intersection(
        geometry,
        area_square_meters=100 * 111_000**2,
        travel_time=20,
        owner_ids=["A", "B"],
        contour_values=[20, 20],
    )


@pytest.fixture
def jakarta_features():
    """Mapbox-style contours of two parties, 20 minutes each"""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"contour": 20, "group_index": 0, "color": "#4286f4"},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [square_ring(106.80, -6.20, 106.90, -6.10)],
                },
            },
            {
                "type": "Feature",
                "properties": {"contour": 20, "group_index": 1, "color": "#f44242"},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [square_ring(106.85, -6.25, 106.95, -6.15)],
                },
            },
        ],
    }


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "api: marks tests that exercise the HTTP layer")
    config.addinivalue_line("markers", "integration: marks integration tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark API tests"""
    api_marker = pytest.mark.api
    for item in items:
        if "test_api" in item.nodeid:
            item.add_marker(api_marker)
