"""
Dredge Record Schema
====================

Bounded Context: Field Measurement Data Structures

This module defines the geotagged measurement a supervisor records in the
field and the helpers the dashboard uses to scope records before they reach
the aggregation engine.

Design:
- Material: fixed enumeration (no free-form keys in aggregations)
- DredgeRecord: immutable measurement, replaced (never mutated) on edit
- select_records(): project scoping + free-text search

Message Flow:
    Field form → DredgeRecord → point source → SelectionAggregator
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from dredge_zone.geometry.shapes import GeoPoint
from .common import Timestamp


class Material(str, Enum):
    """Dredged material enumeration."""
    SAND = "Sand"
    CLAY = "Clay"
    SILT = "Silt"
    ROCK = "Rock"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> 'Material':
        """
        Parse a material label.

        Accepts enum members, the English values (any case) and the
        Portuguese labels stored by earlier versions of the field app.

        Raises:
            ValueError: If the label is unknown
        """
        if isinstance(value, cls):
            return value
        label = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == label:
                return member
        if label in _LEGACY_LABELS:
            return _LEGACY_LABELS[label]
        raise ValueError(
            f"Unknown material: {value!r}. "
            f"Must be one of {[m.value for m in cls]}"
        )


_LEGACY_LABELS = {
    "areia": Material.SAND,
    "argila": Material.CLAY,
    "silte": Material.SILT,
    "rocha": Material.ROCK,
    "outro": Material.OTHER,
}


@dataclass(frozen=True)
class DredgeRecord:
    """
    Immutable geotagged dredging measurement.

    Attributes:
        id: Record identifier
        project_id: Owning project identifier
        timestamp: When the measurement was taken
        lat: Latitude in decimal degrees
        lng: Longitude in decimal degrees
        depth: Depth in meters (>= 0)
        volume: Dredged volume in cubic meters (>= 0)
        material: Dredged material
        vessel_name: Vessel that took the measurement
        notes: Optional free-text notes
        photo: Optional photo (base64 data or URL)

    Invariants:
        - depth >= 0 and volume >= 0
        - lat/lng finite

    Example:
        >>> record = DredgeRecord(
        ...     id="p1", project_id="santos", timestamp=Timestamp("2025-03-14T09:30:00Z"),
        ...     lat=-23.9618, lng=-46.3322, depth=8.5, volume=120.0,
        ...     material=Material.SAND, vessel_name="Draga I"
        ... )
    """
    id: str
    project_id: str
    timestamp: Timestamp
    lat: float
    lng: float
    depth: float
    volume: float
    material: Material
    vessel_name: str
    notes: Optional[str] = None
    photo: Optional[str] = None

    def __post_init__(self):
        """Validate invariants."""
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(
                f"Record '{self.id}' coordinates must be finite, got ({self.lat}, {self.lng})"
            )
        if not math.isfinite(self.depth) or self.depth < 0:
            raise ValueError(f"Record '{self.id}' depth must be >= 0, got {self.depth}")
        if not math.isfinite(self.volume) or self.volume < 0:
            raise ValueError(f"Record '{self.id}' volume must be >= 0, got {self.volume}")

    @property
    def point(self) -> GeoPoint:
        """Record location as a geographic point."""
        return GeoPoint(lat=self.lat, lng=self.lng)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'id': self.id,
            'project_id': self.project_id,
            'timestamp': self.timestamp.to_dict(),
            'lat': self.lat,
            'lng': self.lng,
            'depth': self.depth,
            'volume': self.volume,
            'material': self.material.value,
            'vessel_name': self.vessel_name,
            'notes': self.notes,
            'photo': self.photo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DredgeRecord':
        """Deserialize from dict.

        Both the snake_case keys produced by to_dict() and the camelCase keys
        of the browser storage dump (projectId, latitude, longitude,
        vesselName) are accepted.

        Args:
            data: Dictionary with record fields

        Returns:
            DredgeRecord instance

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            return cls(
                id=str(data['id']),
                project_id=str(_first(data, 'project_id', 'projectId')),
                timestamp=Timestamp(value=str(data['timestamp'])),
                lat=float(_first(data, 'lat', 'latitude')),
                lng=float(_first(data, 'lng', 'longitude')),
                depth=float(data['depth']),
                volume=float(data['volume']),
                material=Material.parse(data['material']),
                vessel_name=str(_first(data, 'vessel_name', 'vesselName')),
                notes=data.get('notes'),
                photo=data.get('photo'),
            )
        except KeyError as e:
            raise ValueError(f"Missing required DredgeRecord field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid DredgeRecord data: {e}")


def _first(data: Dict[str, Any], *keys: str) -> Any:
    """Return the value of the first present key."""
    for key in keys:
        if key in data:
            return data[key]
    raise KeyError(keys[0])


def select_records(
    records: Iterable[DredgeRecord],
    project_id: Optional[str] = None,
    search: Optional[str] = None,
) -> List[DredgeRecord]:
    """
    Scope records to a project and a free-text search term.

    The search matches vessel name, material or notes (case-insensitive).
    Input order is preserved.

    Args:
        records: Candidate records
        project_id: Keep only records of this project (None = all projects)
        search: Search term (None or blank = no text filtering)

    Returns:
        Matching records in input order
    """
    term = search.strip().lower() if search else ""

    selected = []
    for record in records:
        if project_id is not None and record.project_id != project_id:
            continue
        if term:
            haystacks = [record.vessel_name, record.material.value, record.notes or ""]
            if not any(term in text.lower() for text in haystacks):
                continue
        selected.append(record)
    return selected
