"""
File-backed collaborators for the CLI.

- BoundaryStore: YAML project boundary ({vertices: [{lat, lng}, ...]})
- load_records(): JSON array of field records
- load_selection(): ad-hoc polygon from GeoJSON or a {lat, lng} list
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import geojson
import yaml

from dredge_zone import DredgeRecord, GeoPoint, Polygon
from dredge_zone.export import COORDINATE_PRECISION

_GEOMETRY_TYPES = {"Point", "MultiPoint", "LineString", "MultiLineString", "Polygon", "MultiPolygon"}


class BoundaryStore:
    """
    Project boundary persisted as YAML.

    Example file:
        vertices:
          - {lat: -23.960, lng: -46.335}
          - {lat: -23.960, lng: -46.330}
          - {lat: -23.965, lng: -46.330}
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[GeoPoint]:
        """Stored vertices (empty when the file is missing or has none)."""
        if not self.path.exists():
            return []

        try:
            with open(self.path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {self.path}: {e}")

        return [GeoPoint.from_dict(item) for item in data.get("vertices") or []]

    def save(self, vertices: Optional[List[GeoPoint]]) -> None:
        """Persist the vertex list; None stores an absent boundary."""
        data = {"vertices": [v.to_dict() for v in vertices] if vertices else []}
        with open(self.path, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False)


def load_records(path: Path) -> List[DredgeRecord]:
    """
    Load field records from a JSON array.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON or a record is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Records file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}")

    if not isinstance(data, list):
        raise ValueError(f"Records file must hold a JSON array, got {type(data).__name__}")
    return [DredgeRecord.from_dict(item) for item in data]


def load_selection(path: Path) -> Polygon:
    """
    Load an ad-hoc polygon.

    Accepts a GeoJSON Polygon geometry, a Feature wrapping one, a
    FeatureCollection whose first feature is one, or a list of {lat, lng}.
    GeoJSON positions are [longitude, latitude].
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Selection file not found: {path}")

    try:
        data = geojson.loads(path.read_text(encoding="utf-8"), object_hook=_to_geojson)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}")

    if isinstance(data, list):
        return Polygon.from_dicts(data)
    return _polygon_from_geojson(data)


def _to_geojson(obj: Dict[str, Any]) -> Any:
    """geojson object hook that keeps geometry coordinates unrounded."""
    if obj.get("type") in _GEOMETRY_TYPES:
        obj = dict(obj, precision=COORDINATE_PRECISION)
    return geojson.GeoJSON.to_instance(obj)


def _polygon_from_geojson(data: Any) -> Polygon:
    if isinstance(data, geojson.FeatureCollection):
        if not data.features:
            raise ValueError("FeatureCollection has no features")
        return _polygon_from_geojson(data.features[0])
    if isinstance(data, geojson.Feature):
        return _polygon_from_geojson(data.geometry)
    if isinstance(data, geojson.Polygon):
        if not data.is_valid:
            raise ValueError(f"Invalid GeoJSON Polygon: {data.errors()}")
        # Valid rings are closed; the last position repeats the first
        ring = data.coordinates[0][:-1]
        return Polygon(vertices=tuple(
            GeoPoint(lat=float(position[1]), lng=float(position[0])) for position in ring
        ))

    kind = data.get("type") if isinstance(data, dict) else type(data).__name__
    raise ValueError(f"Unsupported selection geometry: {kind!r}")
