"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: boundary, selection, export, mqtt, error
    category: vertex, polygon, stats, depth_range
    action: added, removed, computed, delivered
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - boundary.*: Project boundary editing
    - selection.*: Active polygons, depth range and computed stats
    - export.*: Feature-collection export
    - mqtt.*: MQTT export sink
    - error.*: Error conditions
    """

    # ========== Boundary Events ==========
    BOUNDARY_LOADED = "boundary.loaded"
    """Boundary vertices loaded from the project store."""

    BOUNDARY_VERTEX_ADDED = "boundary.vertex.added"
    """Vertex appended to the project boundary."""

    BOUNDARY_VERTEX_REMOVED = "boundary.vertex.removed"
    """Vertex removed from the project boundary."""

    BOUNDARY_CLEARED = "boundary.cleared"
    """Project boundary emptied."""

    BOUNDARY_CAPTURE_TOGGLED = "boundary.capture.toggled"
    """Boundary capture mode switched on or off."""

    BOUNDARY_SAVED = "boundary.saved"
    """Boundary vertex list handed to the project store."""

    # ========== Selection Events ==========
    SELECTION_POLYGON_SET = "selection.polygon.set"
    """Ad-hoc polygon created or edited (replaces the previous one)."""

    SELECTION_POLYGON_CLEARED = "selection.polygon.cleared"
    """Ad-hoc polygon deleted."""

    SELECTION_RECORDS_UPDATED = "selection.records.updated"
    """Point source supplied a new record list."""

    SELECTION_DEPTH_RANGE_CLAMPED = "selection.depth_range.clamped"
    """Depth range clamped to the observed data extent."""

    SELECTION_STATS_COMPUTED = "selection.stats.computed"
    """Selection statistics recomputed."""

    SELECTION_STATS_EMPTY = "selection.stats.empty"
    """No active polygon or no records: nothing to report."""

    # ========== Export Events ==========
    EXPORT_SERIALIZED = "export.serialized"
    """Selection serialized to a feature collection."""

    EXPORT_DELIVERED = "export.delivered"
    """Export document handed to a sink."""

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    """MQTT broker connection established."""

    MQTT_DISCONNECTED = "mqtt.disconnected"
    """MQTT broker connection lost."""

    # ========== Error Events ==========
    BOUNDARY_EDIT_ERROR = "error.boundary_edit"
    """Invalid boundary edit (bad index, undo on empty boundary)."""

    EVENT_DISPATCH_ERROR = "error.event_dispatch"
    """Drawing-surface event could not be dispatched."""

    EXPORT_ERROR = "error.export"
    """Export failed (no selection, sink failure)."""

    MQTT_CONNECTION_ERROR = "error.mqtt_connection"
    """Failed to connect to MQTT broker."""


# Event categories for filtering
BOUNDARY_EVENTS = {
    LogEvent.BOUNDARY_LOADED,
    LogEvent.BOUNDARY_VERTEX_ADDED,
    LogEvent.BOUNDARY_VERTEX_REMOVED,
    LogEvent.BOUNDARY_CLEARED,
    LogEvent.BOUNDARY_CAPTURE_TOGGLED,
    LogEvent.BOUNDARY_SAVED,
}

SELECTION_EVENTS = {
    LogEvent.SELECTION_POLYGON_SET,
    LogEvent.SELECTION_POLYGON_CLEARED,
    LogEvent.SELECTION_RECORDS_UPDATED,
    LogEvent.SELECTION_DEPTH_RANGE_CLAMPED,
    LogEvent.SELECTION_STATS_COMPUTED,
    LogEvent.SELECTION_STATS_EMPTY,
}

ERROR_EVENTS = {
    LogEvent.BOUNDARY_EDIT_ERROR,
    LogEvent.EVENT_DISPATCH_ERROR,
    LogEvent.EXPORT_ERROR,
    LogEvent.MQTT_CONNECTION_ERROR,
}
