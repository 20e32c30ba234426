"""
Dredge Zone v1.0
================

Bounded Context: Geofenced aggregation of dredging field measurements.

Design Philosophy:
- Separation of Concerns: Geometry, Boundary editing, Analytics, Export separated
- Pure geometry, stateful editing, immutable statistics snapshots
- The map UI owns rendering; this package only sees coordinates

Architecture:

    dredge_zone/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── shapes.py      # GeoPoint, Polygon, Bounds
    │   └── detector.py    # point_in_polygon, ZoneDetector (batched masks)
    │
    ├── boundary/          # Project boundary (stateful)
    │   └── editor.py      # BoundaryEditor
    │
    ├── analytics/         # Statistics (stateless, immutable outputs)
    │   ├── aggregator.py  # DepthRange, ActivePolygonSet, SelectionStats
    │   └── trends.py      # ProjectStats, MonthlyTrend, critical records
    │
    ├── export/            # GeoJSON document + delivery sinks
    ├── schemas/           # DredgeRecord, Material, Timestamp
    ├── control/           # EventRegistry for drawing-surface events
    ├── logging/           # Structured JSON logging
    │
    └── session.py         # SelectionSession (single coordinator)

Usage:

    # 1. Records from the point source
    from dredge_zone import DredgeRecord, GeoPoint, Polygon, SelectionSession

    records = [DredgeRecord.from_dict(item) for item in stored_points]

    # 2. Session owns boundary, ad-hoc polygon and depth filter
    session = SelectionSession(records, boundary_vertices=project_boundary,
                               on_boundary_save=store.save)

    # 3. Boundary capture (map clicks)
    session.start_capture()
    session.dispatch('map_click', GeoPoint(lat=-23.96, lng=-46.33))

    # 4. Ad-hoc drawing
    session.dispatch('polygon_created', Polygon(vertices=drawn_vertices))

    # 5. Stats and export
    print(session.stats)
    document, filename = session.export()
"""

# Geometry Layer (immutable, stateless)
from dredge_zone.geometry.shapes import GeoPoint, Bounds, Polygon
from dredge_zone.geometry.detector import point_in_polygon, ZoneDetector

# Schemas
from dredge_zone.schemas import Timestamp, Material, DredgeRecord, select_records

# Boundary Layer (stateful)
from dredge_zone.boundary.editor import BoundaryEditor

# Analytics Layer
from dredge_zone.analytics.aggregator import (
    DepthRange,
    ActivePolygonSet,
    MaterialVolume,
    SelectionStats,
    SelectionAggregator,
)
from dredge_zone.analytics.trends import (
    ProjectStats,
    MonthlyTrend,
    summarize_project,
    monthly_trends,
    peak_month,
    critical_records,
)

# Export Layer
from dredge_zone.export.serializer import ExportSerializer
from dredge_zone.export.sinks import FileExportSink, MqttExportSink

# Errors
from dredge_zone.errors import (
    BoundaryError,
    EmptyBoundaryError,
    VertexIndexError,
    NoSelectionError,
)

# Coordination
from dredge_zone.config import DashboardConfig
from dredge_zone.session import SelectionSession

__all__ = [
    # Geometry
    "GeoPoint",
    "Bounds",
    "Polygon",
    "point_in_polygon",
    "ZoneDetector",
    # Schemas
    "Timestamp",
    "Material",
    "DredgeRecord",
    "select_records",
    # Boundary
    "BoundaryEditor",
    # Analytics
    "DepthRange",
    "ActivePolygonSet",
    "MaterialVolume",
    "SelectionStats",
    "SelectionAggregator",
    "ProjectStats",
    "MonthlyTrend",
    "summarize_project",
    "monthly_trends",
    "peak_month",
    "critical_records",
    # Export
    "ExportSerializer",
    "FileExportSink",
    "MqttExportSink",
    # Errors
    "BoundaryError",
    "EmptyBoundaryError",
    "VertexIndexError",
    "NoSelectionError",
    # Coordination
    "DashboardConfig",
    "SelectionSession",
]

__version__ = "1.0.0"
