"""
Tests for structured JSON logging.

Run with: python -m pytest test_logging.py -v
"""

import json
import logging
from pathlib import Path

from dredge_zone import BoundaryEditor, GeoPoint
from dredge_zone.logging import LogEvent, StructuredLogger


def entries(caplog, name):
    return [json.loads(r.getMessage()) for r in caplog.records if r.name == name]


def test_entry_layout(caplog):
    logger = StructuredLogger(component="test_layout")

    logger.info(
        event=LogEvent.EXPORT_DELIVERED,
        message="Export written to file",
        metadata={'path': Path("/tmp/a.geojson")},
    )

    [entry] = entries(caplog, "dredge_zone.test_layout")
    assert entry['level'] == "INFO"
    assert entry['component'] == "test_layout"
    assert entry['event'] == "export.delivered"
    assert entry['metadata'] == {'path': "/tmp/a.geojson"}
    assert "timestamp" in entry


def test_level_filtering(caplog):
    logger = StructuredLogger(component="test_levels", level=logging.WARNING)

    logger.info(event=LogEvent.BOUNDARY_CLEARED, message="dropped")
    logger.warning(event=LogEvent.BOUNDARY_EDIT_ERROR, message="kept")
    logger.set_level(logging.DEBUG)
    logger.debug(event=LogEvent.BOUNDARY_SAVED, message="now kept")

    assert [e['message'] for e in entries(caplog, "dredge_zone.test_levels")] == ["kept", "now kept"]


def test_error_carries_exception(caplog):
    logger = StructuredLogger(component="test_errors")

    logger.error(
        event=LogEvent.MQTT_CONNECTION_ERROR,
        message="Failed to connect to broker",
        exc_info=ConnectionRefusedError("refused"),
    )

    [entry] = entries(caplog, "dredge_zone.test_errors")
    assert entry['exception'] == {'type': "ConnectionRefusedError", 'message': "refused"}


def test_editor_logs_vertex_events(caplog):
    editor = BoundaryEditor(logger=StructuredLogger(component="test_editor"))

    editor.append_vertex(GeoPoint(0, 0))
    editor.undo_last()

    events = [e['event'] for e in entries(caplog, "dredge_zone.test_editor")]
    assert events == ["boundary.vertex.added", "boundary.vertex.removed"]
