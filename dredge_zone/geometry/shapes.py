"""
Geometric Shapes Module
========================

Pure geographic representations - NO state, NO side effects.

Design:
- Immutable shapes (frozen dataclass pattern)
- Vertex array built once at init for batched containment queries
- Insertion order of vertices is significant (consecutive edges, closed
  implicitly from the last vertex back to the first)
- Thread-safe by design (immutability)
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class GeoPoint:
    """
    Immutable geographic coordinate.

    Attributes:
        lat: Latitude in decimal degrees
        lng: Longitude in decimal degrees

    Invariants:
        - lat and lng are finite
    """

    lat: float
    lng: float

    def __post_init__(self):
        """Validate coordinates."""
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(f"GeoPoint coordinates must be finite, got ({self.lat}, {self.lng})")

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return {'lat': self.lat, 'lng': self.lng}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GeoPoint':
        """Deserialize from dict.

        Args:
            data: Dictionary with keys: lat, lng

        Returns:
            GeoPoint instance

        Raises:
            ValueError: If required keys missing or invalid values
        """
        try:
            return cls(lat=float(data['lat']), lng=float(data['lng']))
        except KeyError as e:
            raise ValueError(f"Missing required GeoPoint field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid GeoPoint data: {e}")

    def to_lng_lat(self) -> Tuple[float, float]:
        """Interchange-format axis order ([longitude, latitude])."""
        return (self.lng, self.lat)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box in decimal degrees."""

    south: float
    west: float
    north: float
    east: float

    def contains(self, point: GeoPoint) -> bool:
        """Inclusive bounding-box test."""
        return self.south <= point.lat <= self.north and self.west <= point.lng <= self.east

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return {'south': self.south, 'west': self.west, 'north': self.north, 'east': self.east}


@dataclass(frozen=True)
class Polygon:
    """
    Immutable polygon geometry for containment queries.

    Design:
    - Vertex array created once at init (reused by batched detection)
    - Immutable by frozen dataclass
    - Coincident vertices are kept (a user may click the same spot twice)

    Attributes:
        vertices: Ordered vertices (at least 3)
    """

    vertices: Tuple[GeoPoint, ...]

    def __post_init__(self):
        """Normalize and validate vertices."""
        vertices = tuple(self.vertices)
        for vertex in vertices:
            if not isinstance(vertex, GeoPoint):
                raise TypeError(f"vertices must be GeoPoint, got {type(vertex)}")
        if len(vertices) < 3:
            raise ValueError(f"Polygon must have at least 3 vertices, got {len(vertices)}")
        object.__setattr__(self, 'vertices', vertices)

        # (N, 2) array of [lat, lng], read-only
        array = np.array([[v.lat, v.lng] for v in vertices], dtype=np.float64)
        array.flags.writeable = False
        object.__setattr__(self, '_array', array)

    @classmethod
    def from_vertices(cls, vertices: Optional[Iterable[GeoPoint]]) -> Optional['Polygon']:
        """
        Build a polygon, or None when the vertex list cannot form one.

        Zero, one or two vertices collapse to "no polygon".
        """
        if vertices is None:
            return None
        vertices = tuple(vertices)
        if len(vertices) < 3:
            return None
        return cls(vertices=vertices)

    @classmethod
    def from_dicts(cls, data: Sequence[Dict[str, Any]]) -> 'Polygon':
        """Deserialize from a list of {lat, lng} dicts."""
        return cls(vertices=tuple(GeoPoint.from_dict(item) for item in data))

    @property
    def array(self) -> np.ndarray:
        """Read-only (N, 2) array of [lat, lng] rows."""
        return self._array

    @property
    def bounds(self) -> Bounds:
        """Bounding box of the vertices."""
        lats = self._array[:, 0]
        lngs = self._array[:, 1]
        return Bounds(
            south=float(lats.min()),
            west=float(lngs.min()),
            north=float(lats.max()),
            east=float(lngs.max()),
        )

    def contains(self, point: GeoPoint) -> bool:
        """Ray-casting containment test (see point_in_polygon)."""
        from dredge_zone.geometry.detector import point_in_polygon

        return point_in_polygon(point, self.vertices)

    def to_dicts(self) -> List[Dict[str, float]]:
        """Serialize to a list of {lat, lng} dicts."""
        return [v.to_dict() for v in self.vertices]

    def ring_lng_lat(self) -> List[Tuple[float, float]]:
        """
        Closed linear ring in [longitude, latitude] order.

        The interchange format repeats the first position at the end.
        """
        ring = [v.to_lng_lat() for v in self.vertices]
        ring.append(ring[0])
        return ring

    def __len__(self) -> int:
        """Number of vertices."""
        return len(self.vertices)
