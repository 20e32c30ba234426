"""
Zone Detector Module
====================

Stateless containment logic - applies polygon geometry to field records.

Design:
- Pure functions (no state)
- Scalar test for single points, numpy masks for record batches
- Both paths evaluate the same crossing formula in the same operation order,
  so they agree bit-for-bit
- Thread-safe (no mutations)

Known ambiguity:
    Points lying exactly on an edge get whatever the crossing formula yields
    (the comparisons are not symmetric across edges). For the square
    (0,0),(0,10),(10,10),(10,0) the point (0,5) tests inside while (10,5)
    tests outside. Callers must not rely on either answer.
"""

import numpy as np
from typing import Sequence, Tuple

from dredge_zone.geometry.shapes import GeoPoint, Polygon


def point_in_polygon(point: GeoPoint, vertices: Sequence[GeoPoint]) -> bool:
    """
    Crossing-number containment test.

    Walks consecutive edges (including the wraparound edge from the last
    vertex to the first) and toggles the result each time the edge straddles
    the point's longitude with its crossing latitude above the point.

    Args:
        point: Point to test
        vertices: Ordered polygon vertices

    Returns:
        True if the point is inside; always False for fewer than 3 vertices
    """
    count = len(vertices)
    if count < 3:
        return False

    lat, lng = point.lat, point.lng
    inside = False
    j = count - 1
    for i in range(count):
        vi, vj = vertices[i], vertices[j]
        if ((vi.lng > lng) != (vj.lng > lng)) and (
            lat < (vj.lat - vi.lat) * (lng - vi.lng) / (vj.lng - vi.lng) + vi.lat
        ):
            inside = not inside
        j = i
    return inside


class ZoneDetector:
    """
    Stateless detector for applying polygons to batches of records.

    Design Philosophy:
    - All methods are static (no instance state)
    - Records are anything with lat/lng attributes
    - Returns boolean masks aligned with the input order
    """

    @staticmethod
    def coordinates(records: Sequence) -> Tuple[np.ndarray, np.ndarray]:
        """
        Extract coordinate arrays from records.

        Returns:
            Tuple of (lats, lngs) float64 arrays of shape (N,)
        """
        lats = np.fromiter((r.lat for r in records), dtype=np.float64, count=len(records))
        lngs = np.fromiter((r.lng for r in records), dtype=np.float64, count=len(records))
        return lats, lngs

    @staticmethod
    def detect_polygon(polygon: Polygon, lats: np.ndarray, lngs: np.ndarray) -> np.ndarray:
        """
        Detect which coordinates are inside a polygon.

        Args:
            polygon: Polygon geometry
            lats: (N,) latitudes
            lngs: (N,) longitudes

        Returns:
            Boolean mask of shape (N,) where True = inside polygon
        """
        inside = np.zeros(len(lats), dtype=bool)
        if len(lats) == 0:
            return inside

        vertices = polygon.array
        j = len(vertices) - 1
        # Vertical edges divide by zero; the straddle test masks them out
        with np.errstate(divide='ignore', invalid='ignore'):
            for i in range(len(vertices)):
                lat_i, lng_i = vertices[i]
                lat_j, lng_j = vertices[j]
                straddles = (lng_i > lngs) != (lng_j > lngs)
                crossing = lats < (lat_j - lat_i) * (lngs - lng_i) / (lng_j - lng_i) + lat_i
                inside ^= straddles & crossing
                j = i
        return inside

    @staticmethod
    def detect_any(polygons: Sequence[Polygon], records: Sequence) -> np.ndarray:
        """
        Detect which records are inside at least one polygon.

        A record inside several polygons is flagged once.

        Args:
            polygons: Active polygons
            records: Records with lat/lng attributes

        Returns:
            Boolean mask of shape (N,) where True = inside any polygon
        """
        if len(records) == 0:
            return np.array([], dtype=bool)

        lats, lngs = ZoneDetector.coordinates(records)
        mask = np.zeros(len(records), dtype=bool)
        for polygon in polygons:
            mask |= ZoneDetector.detect_polygon(polygon, lats, lngs)
        return mask
