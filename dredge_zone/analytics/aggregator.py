"""
Selection Aggregator Module
==========================

Containment-based statistics over the records inside the active polygons.

Design:
- Immutable inputs (DepthRange, ActivePolygonSet) and outputs (SelectionStats)
- Full recomputation on every call (no cache, no hidden state)
- Material volumes accumulated in first-appearance order, then stably
  sorted by volume so equal volumes keep that order
- OR across polygons: a record inside several polygons counts once
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from dredge_zone.geometry.detector import ZoneDetector
from dredge_zone.geometry.shapes import Polygon
from dredge_zone.schemas.record import DredgeRecord, Material

DEFAULT_DEPTH_EXTENT = (0.0, 30.0)


@dataclass(frozen=True)
class DepthRange:
    """
    Inclusive depth filter bounds, in meters.

    An inverted range (minimum > maximum) is allowed and selects nothing.

    Attributes:
        minimum: Lowest depth kept
        maximum: Highest depth kept
    """

    minimum: float = DEFAULT_DEPTH_EXTENT[0]
    maximum: float = DEFAULT_DEPTH_EXTENT[1]

    def __post_init__(self):
        """Validate bounds."""
        if not (math.isfinite(self.minimum) and math.isfinite(self.maximum)):
            raise ValueError(
                f"DepthRange bounds must be finite, got [{self.minimum}, {self.maximum}]"
            )

    def contains(self, depth: float) -> bool:
        """Inclusive on both ends."""
        return self.minimum <= depth <= self.maximum

    @staticmethod
    def data_extent(records: Sequence[DredgeRecord]) -> Tuple[float, float]:
        """
        Observed depth extent rounded outwards to whole meters.

        Returns:
            (floor(min depth), ceil(max depth)), or (0, 30) without records
        """
        if not records:
            return DEFAULT_DEPTH_EXTENT
        depths = [r.depth for r in records]
        return float(math.floor(min(depths))), float(math.ceil(max(depths)))

    def clamp_to(self, records: Sequence[DredgeRecord]) -> 'DepthRange':
        """
        Pull out-of-extent bounds back to the observed data extent.

        Bounds already inside the extent are kept; without records the range
        is returned unchanged.
        """
        if not records:
            return self
        low, high = self.data_extent(records)
        minimum = low if self.minimum < low else self.minimum
        maximum = high if self.maximum > high else self.maximum
        if minimum == self.minimum and maximum == self.maximum:
            return self
        return DepthRange(minimum=minimum, maximum=maximum)

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return {'min': self.minimum, 'max': self.maximum}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DepthRange':
        """Deserialize from {min, max} dict."""
        try:
            return cls(minimum=float(data['min']), maximum=float(data['max']))
        except KeyError as e:
            raise ValueError(f"Missing required DepthRange field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid DepthRange data: {e}")


@dataclass(frozen=True)
class ActivePolygonSet:
    """
    Polygons currently eligible for containment testing.

    Holds at most one ad-hoc polygon: a newly drawn selection replaces the
    previous one (last write wins).

    Attributes:
        boundary: Committed project boundary (None when hidden, absent or
                  below 3 vertices)
        adhoc: Transient drawn selection (None when absent)
    """

    boundary: Optional[Polygon] = None
    adhoc: Optional[Polygon] = None

    @classmethod
    def from_state(
        cls,
        boundary: Optional[Polygon],
        boundary_visible: bool = True,
        adhoc: Optional[Polygon] = None,
    ) -> 'ActivePolygonSet':
        """Build the set from editor/drawing state; a hidden boundary is inactive."""
        return cls(boundary=boundary if boundary_visible else None, adhoc=adhoc)

    @property
    def polygons(self) -> List[Polygon]:
        """Active polygons, drawn selection first then the boundary."""
        return [p for p in (self.adhoc, self.boundary) if p is not None]

    @property
    def roles(self) -> List[Tuple[str, Polygon]]:
        """(role, polygon) pairs in the same order as polygons."""
        pairs = []
        if self.adhoc is not None:
            pairs.append(('adhoc', self.adhoc))
        if self.boundary is not None:
            pairs.append(('boundary', self.boundary))
        return pairs

    @property
    def is_empty(self) -> bool:
        """True when no polygon is active."""
        return self.boundary is None and self.adhoc is None

    @property
    def is_official_only(self) -> bool:
        """True when the boundary is the only active polygon."""
        return self.boundary is not None and self.adhoc is None

    def __len__(self) -> int:
        """Number of active polygons."""
        return len(self.polygons)


@dataclass(frozen=True)
class MaterialVolume:
    """Summed volume of one material."""

    material: Material
    volume: float

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {'material': self.material.value, 'volume': self.volume}


@dataclass(frozen=True)
class SelectionStats:
    """
    Immutable statistics snapshot for the current selection.

    Design:
    - Frozen dataclass (thread-safe read)
    - Value object (no identity)
    - Can be serialized to JSON

    Attributes:
        volume: Summed volume of selected records (m³)
        count: Number of selected records
        avg_depth: Mean depth of selected records (0 when count is 0)
        material_distribution: Per-material volume, largest first
        is_official_boundary: Only the project boundary is active
    """

    volume: float = 0.0
    count: int = 0
    avg_depth: float = 0.0
    material_distribution: Tuple[MaterialVolume, ...] = field(default_factory=tuple)
    is_official_boundary: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'volume': self.volume,
            'count': self.count,
            'avg_depth': self.avg_depth,
            'material_distribution': [mv.to_dict() for mv in self.material_distribution],
            'is_official_boundary': self.is_official_boundary,
        }

    def __str__(self) -> str:
        """Human-readable representation."""
        label = "Official Area" if self.is_official_boundary else "Active Selection"
        return f"{label}: {self.volume:,.2f} m³, {self.count} samples, avg depth {self.avg_depth:.2f} m"


def material_distribution(records: Iterable[DredgeRecord]) -> Tuple[MaterialVolume, ...]:
    """
    Per-material summed volume, largest first.

    Accumulates in first-appearance order; the stable sort keeps that order
    between materials with equal volume.
    """
    totals: Dict[Material, float] = {}
    for record in records:
        totals[record.material] = totals.get(record.material, 0.0) + record.volume

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return tuple(MaterialVolume(material=m, volume=v) for m, v in ranked)


class SelectionAggregator:
    """
    Stateless aggregator for polygon selections.

    Design Philosophy:
    - All methods are static (no instance state)
    - Depth filter first, containment second
    - Identical inputs always give identical outputs
    """

    @staticmethod
    def selection_mask(
        records: Sequence[DredgeRecord],
        active: ActivePolygonSet,
        depth_range: DepthRange,
    ) -> np.ndarray:
        """
        Boolean mask of records within the depth range and any active polygon.

        Returns:
            Mask of shape (N,) aligned with records
        """
        if len(records) == 0:
            return np.array([], dtype=bool)

        in_range = np.fromiter(
            (depth_range.contains(r.depth) for r in records), dtype=bool, count=len(records)
        )
        return in_range & ZoneDetector.detect_any(active.polygons, records)

    @staticmethod
    def select(
        records: Sequence[DredgeRecord],
        active: ActivePolygonSet,
        depth_range: DepthRange,
    ) -> List[DredgeRecord]:
        """Selected records in input order."""
        mask = SelectionAggregator.selection_mask(records, active, depth_range)
        return [records[idx] for idx in np.where(mask)[0]]

    @staticmethod
    def compute_stats(
        records: Sequence[DredgeRecord],
        active: ActivePolygonSet,
        depth_range: DepthRange,
    ) -> Optional[SelectionStats]:
        """
        Aggregate depth/volume/material statistics over the selection.

        Args:
            records: Candidate records (never mutated)
            active: Active polygons
            depth_range: Inclusive depth filter

        Returns:
            SelectionStats, or None when no polygon is active or there are
            no records
        """
        if active.is_empty or len(records) == 0:
            return None

        selected = SelectionAggregator.select(records, active, depth_range)

        total_volume = 0.0
        total_depth = 0.0
        for record in selected:
            total_volume += record.volume
            total_depth += record.depth

        count = len(selected)
        return SelectionStats(
            volume=total_volume,
            count=count,
            avg_depth=total_depth / count if count > 0 else 0.0,
            material_distribution=material_distribution(selected),
            is_official_boundary=active.is_official_only,
        )
