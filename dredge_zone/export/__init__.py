"""
Export Layer
============

Bounded Context: Selection export to GeoJSON and delivery to sinks.
"""

from dredge_zone.export.serializer import ExportSerializer, COORDINATE_PRECISION, ROLE_LABELS
from dredge_zone.export.sinks import ExportSink, FileExportSink, MqttExportSink

__all__ = [
    "ExportSerializer",
    "COORDINATE_PRECISION",
    "ROLE_LABELS",
    "ExportSink",
    "FileExportSink",
    "MqttExportSink",
]
