"""
Project Trends Module
=====================

Whole-project summaries that do not depend on any polygon: dashboard
totals, monthly production and shallow (critical) measurements.

Design:
- Pure functions over record sequences
- Immutable outputs (ProjectStats, MonthlyTrend)
- Chronological order from a stable timestamp sort
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dredge_zone.analytics.aggregator import MaterialVolume, material_distribution
from dredge_zone.schemas.record import DredgeRecord, Material

DEFAULT_TARGET_DEPTH = 12.0


@dataclass(frozen=True)
class ProjectStats:
    """Dashboard totals for a project."""

    total_volume: float = 0.0
    avg_depth: float = 0.0
    point_count: int = 0
    material_distribution: Tuple[MaterialVolume, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'total_volume': self.total_volume,
            'avg_depth': self.avg_depth,
            'point_count': self.point_count,
            'material_distribution': [mv.to_dict() for mv in self.material_distribution],
        }


@dataclass(frozen=True)
class MonthlyTrend:
    """
    Production summary for one calendar month.

    Attributes:
        month: 'YYYY-MM'
        volume: Volume dredged during the month
        cumulative_volume: Volume dredged up to the end of the month
        avg_depth: Mean depth of the month's records
        count: Number of records
        material_volumes: Volume per material (every material present, 0 if none)
    """

    month: str
    volume: float
    cumulative_volume: float
    avg_depth: float
    count: int
    material_volumes: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'month': self.month,
            'volume': self.volume,
            'cumulative_volume': self.cumulative_volume,
            'avg_depth': self.avg_depth,
            'count': self.count,
            'material_volumes': dict(self.material_volumes),
        }


def summarize_project(records: Sequence[DredgeRecord]) -> ProjectStats:
    """Totals over every record of a project."""
    total_volume = 0.0
    total_depth = 0.0
    for record in records:
        total_volume += record.volume
        total_depth += record.depth

    count = len(records)
    return ProjectStats(
        total_volume=total_volume,
        avg_depth=total_depth / count if count else 0.0,
        point_count=count,
        material_distribution=material_distribution(records),
    )


def monthly_trends(records: Sequence[DredgeRecord]) -> List[MonthlyTrend]:
    """
    Group records by calendar month in chronological order.

    Records are sorted by timestamp (stable, so same-instant records keep
    their input order) and the cumulative volume runs across months.
    """
    ordered = sorted(records, key=lambda r: r.timestamp.sort_key())

    buckets: Dict[str, Dict[str, Any]] = {}
    cumulative = 0.0
    for record in ordered:
        key = record.timestamp.month_key()
        bucket = buckets.get(key)
        if bucket is None:
            bucket = {
                'volume': 0.0,
                'depth': 0.0,
                'count': 0,
                'materials': {m.value: 0.0 for m in Material},
            }
            buckets[key] = bucket

        bucket['volume'] += record.volume
        bucket['depth'] += record.depth
        bucket['count'] += 1
        bucket['materials'][record.material.value] += record.volume
        cumulative += record.volume
        bucket['cumulative'] = cumulative

    return [
        MonthlyTrend(
            month=key,
            volume=bucket['volume'],
            cumulative_volume=bucket['cumulative'],
            avg_depth=bucket['depth'] / bucket['count'],
            count=bucket['count'],
            material_volumes=bucket['materials'],
        )
        for key, bucket in buckets.items()
    ]


def peak_month(trends: Sequence[MonthlyTrend]) -> Optional[MonthlyTrend]:
    """Month with the largest volume; the earliest wins on ties."""
    best = None
    for trend in trends:
        if best is None or trend.volume > best.volume:
            best = trend
    return best


def critical_records(
    records: Sequence[DredgeRecord],
    target_depth: float = DEFAULT_TARGET_DEPTH,
) -> List[DredgeRecord]:
    """Records shallower than the target (design) depth, in input order."""
    return [r for r in records if r.depth < target_depth]
