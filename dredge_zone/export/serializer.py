"""
Selection Export Module
=======================

Serializes the active polygons and the records they select into a GeoJSON
FeatureCollection.

Design:
- Output is a value (the document), delivery belongs to an ExportSink
- Interchange axis order is [longitude, latitude], the opposite of the
  internal {lat, lng} representation
- Polygon rings are closed (first position repeated at the end)

Document layout:
    FeatureCollection
    ├── Polygon feature per active polygon  {role, calc_volume, avg_depth}
    └── Point feature per selected record    {all record fields}
"""

import time
from typing import Optional, Sequence

import geojson
from geojson import Feature, FeatureCollection, Point
from geojson import Polygon as GeoJSONPolygon

from dredge_zone.analytics.aggregator import ActivePolygonSet, SelectionStats
from dredge_zone.schemas.record import DredgeRecord

# Digits passed to geojson's coordinate rounding. Above 323, round() returns
# every float64 unchanged, so exported positions equal the recorded ones.
COORDINATE_PRECISION = 324

DEFAULT_EXPORT_PREFIX = "dredge_selection"

ROLE_LABELS = {
    'boundary': "Official Area",
    'adhoc': "Manual Selection",
}


class ExportSerializer:
    """
    Stateless serializer for selection exports.

    Usage:
        document = ExportSerializer.export_selection(active, selected, stats)
        text = ExportSerializer.dumps(document)
        filename = ExportSerializer.suggested_filename()
    """

    @staticmethod
    def polygon_feature(role: str, polygon, stats: SelectionStats) -> Feature:
        """Polygon feature tagged with its role and the selection totals."""
        return Feature(
            geometry=GeoJSONPolygon([polygon.ring_lng_lat()], precision=COORDINATE_PRECISION),
            properties={
                'role': ROLE_LABELS[role],
                'calc_volume': stats.volume,
                'avg_depth': round(stats.avg_depth, 2),
            },
        )

    @staticmethod
    def record_feature(record: DredgeRecord) -> Feature:
        """Point feature carrying every field of the record."""
        return Feature(
            geometry=Point((record.lng, record.lat), precision=COORDINATE_PRECISION),
            properties=record.to_dict(),
        )

    @staticmethod
    def export_selection(
        active: ActivePolygonSet,
        selected: Sequence[DredgeRecord],
        stats: SelectionStats,
    ) -> FeatureCollection:
        """
        Build the feature collection for the current selection.

        Args:
            active: Active polygons (one Polygon feature each)
            selected: Records inside the selection (one Point feature each)
            stats: Selection statistics attached to the polygon features

        Returns:
            GeoJSON FeatureCollection
        """
        features = [
            ExportSerializer.polygon_feature(role, polygon, stats)
            for role, polygon in active.roles
        ]
        features.extend(ExportSerializer.record_feature(record) for record in selected)
        return FeatureCollection(features)

    @staticmethod
    def dumps(document: FeatureCollection, indent: Optional[int] = 2) -> str:
        """Serialize the document to JSON text."""
        return geojson.dumps(document, indent=indent)

    @staticmethod
    def suggested_filename(
        now: Optional[float] = None,
        prefix: str = DEFAULT_EXPORT_PREFIX,
    ) -> str:
        """
        Download filename stamped with epoch milliseconds.

        Args:
            now: Epoch seconds (default: current time)
            prefix: Filename prefix

        Returns:
            e.g. 'dredge_selection_1741944600000.geojson'
        """
        seconds = time.time() if now is None else now
        return f"{prefix}_{int(seconds * 1000)}.geojson"
