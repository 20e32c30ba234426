"""
Analytics Layer
===============

Bounded Context: Statistics over field records.

Responsibilities:
- Depth filtering and polygon selection (SelectionAggregator)
- Immutable statistics snapshots (SelectionStats, ProjectStats)
- Monthly production trends and shallow-record flagging

Design Philosophy:
- Immutable inputs and outputs
- Full recomputation, no caches
- Deterministic ordering of material breakdowns
"""

from dredge_zone.analytics.aggregator import (
    DepthRange,
    ActivePolygonSet,
    MaterialVolume,
    SelectionStats,
    SelectionAggregator,
    material_distribution,
)
from dredge_zone.analytics.trends import (
    ProjectStats,
    MonthlyTrend,
    summarize_project,
    monthly_trends,
    peak_month,
    critical_records,
)

__all__ = [
    "DepthRange",
    "ActivePolygonSet",
    "MaterialVolume",
    "SelectionStats",
    "SelectionAggregator",
    "material_distribution",
    "ProjectStats",
    "MonthlyTrend",
    "summarize_project",
    "monthly_trends",
    "peak_month",
    "critical_records",
]
