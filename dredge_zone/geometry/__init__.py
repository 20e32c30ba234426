"""
Geometry Layer
==============

Bounded Context: Pure geographic shapes and containment queries.

Responsibilities:
- Shape representation (immutable)
- Point-in-polygon tests
- Bounding boxes
- NO state, NO aggregation, NO serialization

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Fail-fast validation
- Zero side effects
"""

from dredge_zone.geometry.shapes import GeoPoint, Bounds, Polygon
from dredge_zone.geometry.detector import point_in_polygon, ZoneDetector

__all__ = [
    "GeoPoint",
    "Bounds",
    "Polygon",
    "point_in_polygon",
    "ZoneDetector",
]
