"""
Shared fixtures for the dredge_zone test suite.

Run with: python -m pytest -v
"""

import pytest

from dredge_zone import DredgeRecord, GeoPoint, Material, Polygon, Timestamp
from dredge_zone.logging import create_logger


def make_record(
    id: str,
    lat: float,
    lng: float,
    depth: float = 5.0,
    volume: float = 100.0,
    material: Material = Material.SAND,
    timestamp: str = "2025-03-14T09:30:00Z",
    project_id: str = "santos",
    vessel_name: str = "Draga I",
    notes=None,
) -> DredgeRecord:
    """Record with sensible defaults for the fields a test does not care about."""
    return DredgeRecord(
        id=id,
        project_id=project_id,
        timestamp=Timestamp(timestamp),
        lat=lat,
        lng=lng,
        depth=depth,
        volume=volume,
        material=material,
        vessel_name=vessel_name,
        notes=notes,
    )


def square(south: float, west: float, north: float, east: float) -> Polygon:
    """Axis-aligned rectangle as a polygon, vertices in drawing order."""
    return Polygon(vertices=(
        GeoPoint(south, west),
        GeoPoint(south, east),
        GeoPoint(north, east),
        GeoPoint(north, west),
    ))


@pytest.fixture(autouse=True, scope="session")
def _json_log_handlers():
    """Bind the JSON log handlers before any test swaps sys.stderr."""
    for component in ("session", "boundary", "export"):
        create_logger(component)


@pytest.fixture
def unit_square() -> Polygon:
    """Square (0,0),(0,10),(10,10),(10,0) in (lat, lng)."""
    return Polygon(vertices=(
        GeoPoint(0, 0),
        GeoPoint(0, 10),
        GeoPoint(10, 10),
        GeoPoint(10, 0),
    ))
