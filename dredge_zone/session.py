"""
Selection Session - Single coordinator for selection state.

This module provides the SelectionSession class which owns the records,
the project boundary editor, the ad-hoc drawn polygon, the depth range and
the boundary visibility toggle, and recomputes selection statistics after
every change.

Thread Safety:
- Uses threading.RLock around every read and mutation so aggregation never
  observes a torn state (e.g. a vertex removed mid-aggregation)
- The boundary store callback runs under the lock and may read the session
- Stats listeners are notified after the lock is released, with a snapshot.
  Every recomputation gets a revision number; a snapshot older than one
  already delivered is dropped, so listeners see revisions in increasing
  order and the last delivered snapshot is the current one
"""

import threading
from typing import Any, Callable, Iterable, List, Optional, Tuple

from geojson import FeatureCollection

from dredge_zone.analytics.aggregator import (
    ActivePolygonSet,
    DepthRange,
    SelectionAggregator,
    SelectionStats,
)
from dredge_zone.boundary.editor import BoundaryEditor, SaveCallback
from dredge_zone.config import DashboardConfig
from dredge_zone.control.registry import EventNotAvailableError, EventRegistry
from dredge_zone.errors import NoSelectionError
from dredge_zone.export.serializer import ExportSerializer
from dredge_zone.geometry.shapes import GeoPoint, Polygon
from dredge_zone.logging import LogEvent, StructuredLogger, create_logger
from dredge_zone.schemas.record import DredgeRecord

StatsListener = Callable[[Optional[SelectionStats]], None]


class SelectionSession:
    """
    Coordinator for one project's map selection.

    Drawing-surface events are dispatched through an EventRegistry:
        polygon_created  -> replace the ad-hoc polygon
        polygon_edited   -> replace the ad-hoc polygon
        polygon_deleted  -> drop the ad-hoc polygon
        map_click        -> append a boundary vertex while capturing

    Usage:
        session = SelectionSession(records, boundary_vertices=stored,
                                   on_boundary_save=store.save)
        session.add_stats_listener(render_footer)

        session.dispatch('polygon_created', drawn_polygon)
        session.set_depth_range(DepthRange(5, 20))
        document, filename = session.export()
    """

    def __init__(
        self,
        records: Iterable[DredgeRecord] = (),
        boundary_vertices: Optional[Iterable[GeoPoint]] = None,
        on_boundary_save: Optional[SaveCallback] = None,
        config: Optional[DashboardConfig] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize session.

        Args:
            records: Records supplied by the point source
            boundary_vertices: Stored boundary of the project (may be empty)
            on_boundary_save: Project store callback (vertex list or None)
            config: Dashboard configuration (default depth range, export prefix)
            logger: Structured logger (default: component "session")
        """
        self.config = config or DashboardConfig()
        self._logger = logger or create_logger("session", level=self.config.logging_level)
        self._lock = threading.RLock()

        self._records: List[DredgeRecord] = []
        self._depth_range = self.config.depth_range
        self._boundary_visible = True
        self._adhoc: Optional[Polygon] = None
        self._stats: Optional[SelectionStats] = None
        self._listeners: List[StatsListener] = []
        self._revision = 0
        self._notified_revision = 0
        self._notify_lock = threading.RLock()

        self._editor = BoundaryEditor(
            vertices=boundary_vertices,
            on_save=on_boundary_save,
            logger=create_logger("boundary", level=self.config.logging_level),
        )

        self.events = EventRegistry()
        self.events.register('polygon_created', self.set_adhoc_polygon, "Replace the ad-hoc polygon",
                             takes_payload=True)
        self.events.register('polygon_edited', self.set_adhoc_polygon, "Replace the ad-hoc polygon",
                             takes_payload=True)
        self.events.register('polygon_deleted', self.clear_adhoc_polygon, "Remove the ad-hoc polygon")
        self.events.register('map_click', self.handle_map_click, "Append boundary vertex while capturing",
                             takes_payload=True)

        self.set_records(records)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def records(self) -> List[DredgeRecord]:
        """Copy of the current records."""
        with self._lock:
            return list(self._records)

    @property
    def depth_range(self) -> DepthRange:
        """Current depth filter."""
        with self._lock:
            return self._depth_range

    @property
    def boundary_visible(self) -> bool:
        """Whether the project boundary takes part in the selection."""
        with self._lock:
            return self._boundary_visible

    @property
    def boundary_vertices(self) -> List[GeoPoint]:
        """Copy of the boundary vertex list (may hold fewer than 3)."""
        with self._lock:
            return self._editor.vertices

    @property
    def capture_active(self) -> bool:
        """Whether map clicks append boundary vertices."""
        with self._lock:
            return self._editor.capture_active

    @property
    def adhoc_polygon(self) -> Optional[Polygon]:
        """Current ad-hoc polygon, if any."""
        with self._lock:
            return self._adhoc

    @property
    def active_polygons(self) -> ActivePolygonSet:
        """Polygons currently eligible for containment testing."""
        with self._lock:
            return ActivePolygonSet.from_state(
                boundary=self._editor.to_polygon(),
                boundary_visible=self._boundary_visible,
                adhoc=self._adhoc,
            )

    @property
    def stats(self) -> Optional[SelectionStats]:
        """Statistics from the last recomputation (None = nothing to report)."""
        with self._lock:
            return self._stats

    @property
    def revision(self) -> int:
        """Number of recomputations so far."""
        with self._lock:
            return self._revision

    def selected_records(self) -> List[DredgeRecord]:
        """Records inside the current selection, in input order."""
        with self._lock:
            return SelectionAggregator.select(self._records, self.active_polygons, self._depth_range)

    def add_stats_listener(self, listener: StatsListener) -> None:
        """Register a callback receiving every recomputed stats snapshot."""
        with self._lock:
            self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Point source / filter surface
    # ------------------------------------------------------------------

    def set_records(self, records: Iterable[DredgeRecord]) -> None:
        """
        Replace the records and clamp the depth range to their extent.
        """
        with self._lock:
            self._records = list(records)
            self._logger.info(
                event=LogEvent.SELECTION_RECORDS_UPDATED,
                message="Records updated",
                metadata={'record_count': len(self._records)}
            )

            clamped = self._depth_range.clamp_to(self._records)
            if clamped != self._depth_range:
                self._logger.info(
                    event=LogEvent.SELECTION_DEPTH_RANGE_CLAMPED,
                    message="Depth range clamped to data extent",
                    metadata={'before': self._depth_range.to_dict(), 'after': clamped.to_dict()}
                )
                self._depth_range = clamped
        self._recompute()

    def set_depth_range(self, depth_range: DepthRange) -> None:
        """Apply the user-chosen depth range (not clamped)."""
        with self._lock:
            self._depth_range = depth_range
        self._recompute()

    def set_boundary_visible(self, visible: bool) -> None:
        """Show or hide the project boundary (hidden = not selected on)."""
        with self._lock:
            self._boundary_visible = bool(visible)
        self._recompute()

    # ------------------------------------------------------------------
    # Boundary editing
    # ------------------------------------------------------------------

    def start_capture(self) -> None:
        """Enter boundary capture mode."""
        with self._lock:
            self._editor.start_capture()

    def stop_capture(self) -> None:
        """Leave boundary capture mode."""
        with self._lock:
            self._editor.stop_capture()

    def handle_map_click(self, point: Any) -> bool:
        """
        Map click: appends a boundary vertex while capture mode is active.

        Returns:
            True if a vertex was appended
        """
        point = _coerce_point(point)
        with self._lock:
            appended = self._editor.capture(point)
        if appended:
            self._recompute()
        return appended

    def append_vertex(self, point: GeoPoint) -> None:
        """Append a boundary vertex (regardless of capture mode)."""
        with self._lock:
            self._editor.append_vertex(point)
        self._recompute()

    def remove_vertex_at(self, index: int) -> GeoPoint:
        """
        Remove the boundary vertex at index.

        Raises:
            VertexIndexError: If index is out of range
        """
        with self._lock:
            removed = self._editor.remove_vertex_at(index)
        self._recompute()
        return removed

    def undo_last(self) -> GeoPoint:
        """
        Remove the last boundary vertex.

        Raises:
            EmptyBoundaryError: If the boundary is empty
        """
        with self._lock:
            removed = self._editor.undo_last()
        self._recompute()
        return removed

    def clear_boundary(self) -> None:
        """Empty the project boundary."""
        with self._lock:
            self._editor.clear()
        self._recompute()

    # ------------------------------------------------------------------
    # Ad-hoc drawing surface
    # ------------------------------------------------------------------

    def dispatch(self, event: str, payload: Optional[Any] = None) -> Any:
        """
        Dispatch a drawing-surface event.

        Raises:
            EventNotAvailableError: If the event is not registered
            ValueError: If the payload is missing, unexpected or invalid
        """
        try:
            return self.events.dispatch(event, payload)
        except (EventNotAvailableError, ValueError) as e:
            self._logger.warning(
                event=LogEvent.EVENT_DISPATCH_ERROR,
                message=str(e),
                metadata={'event': event}
            )
            raise

    def set_adhoc_polygon(self, polygon: Any) -> None:
        """Replace the single ad-hoc polygon (last write wins)."""
        polygon = _coerce_polygon(polygon)
        with self._lock:
            replaced = self._adhoc is not None
            self._adhoc = polygon
            self._logger.info(
                event=LogEvent.SELECTION_POLYGON_SET,
                message="Ad-hoc polygon set",
                metadata={'vertex_count': len(polygon), 'replaced': replaced}
            )
        self._recompute()

    def clear_adhoc_polygon(self) -> None:
        """Remove the ad-hoc polygon."""
        with self._lock:
            self._adhoc = None
            self._logger.info(
                event=LogEvent.SELECTION_POLYGON_CLEARED,
                message="Ad-hoc polygon removed"
            )
        self._recompute()

    # ------------------------------------------------------------------
    # Aggregation / export
    # ------------------------------------------------------------------

    def _recompute(self) -> Optional[SelectionStats]:
        """Full recomputation, then notify listeners outside the lock."""
        with self._lock:
            active = self.active_polygons
            stats = SelectionAggregator.compute_stats(self._records, active, self._depth_range)
            self._stats = stats
            self._revision += 1
            revision = self._revision
            listeners = list(self._listeners)

            if stats is None:
                self._logger.debug(
                    event=LogEvent.SELECTION_STATS_EMPTY,
                    message="No active polygon or no records",
                    metadata={'polygon_count': len(active), 'record_count': len(self._records)}
                )
            else:
                self._logger.info(
                    event=LogEvent.SELECTION_STATS_COMPUTED,
                    message=str(stats),
                    metadata={
                        'count': stats.count,
                        'volume': stats.volume,
                        'polygon_count': len(active),
                        'is_official_boundary': stats.is_official_boundary,
                    }
                )

        self._notify(revision, stats, listeners)
        return stats

    def _notify(
        self,
        revision: int,
        stats: Optional[SelectionStats],
        listeners: List[StatsListener],
    ) -> bool:
        """
        Deliver a snapshot unless a newer one was already delivered.

        Returns:
            True if the listeners were called
        """
        with self._notify_lock:
            if revision <= self._notified_revision:
                return False
            self._notified_revision = revision
            for listener in listeners:
                listener(stats)
        return True

    def export(self, now: Optional[float] = None) -> Tuple[FeatureCollection, str]:
        """
        Serialize the current selection.

        Args:
            now: Epoch seconds used for the filename (default: current time)

        Returns:
            (document, suggested filename)

        Raises:
            NoSelectionError: If there are no stats to export
        """
        with self._lock:
            stats = self._stats
            if stats is None:
                self._logger.warning(
                    event=LogEvent.EXPORT_ERROR,
                    message="Nothing to export: no active selection"
                )
                raise NoSelectionError("No active selection to export")

            active = self.active_polygons
            selected = SelectionAggregator.select(self._records, active, self._depth_range)
            document = ExportSerializer.export_selection(active, selected, stats)
            filename = ExportSerializer.suggested_filename(now=now, prefix=self.config.export_prefix)

            self._logger.info(
                event=LogEvent.EXPORT_SERIALIZED,
                message="Selection serialized",
                metadata={
                    'filename': filename,
                    'polygon_count': len(active),
                    'point_count': len(selected),
                }
            )
        return document, filename

    def __repr__(self) -> str:
        """Human-readable representation."""
        with self._lock:
            return (
                f"SelectionSession(records={len(self._records)}, "
                f"boundary_vertices={len(self._editor)}, "
                f"adhoc={'yes' if self._adhoc is not None else 'no'})"
            )


def _coerce_point(value: Any) -> GeoPoint:
    """Accept GeoPoint or {lat, lng} dict."""
    if isinstance(value, GeoPoint):
        return value
    if isinstance(value, dict):
        return GeoPoint.from_dict(value)
    raise TypeError(f"Expected GeoPoint or {{lat, lng}} dict, got {type(value)}")


def _coerce_polygon(value: Any) -> Polygon:
    """Accept Polygon or a sequence of GeoPoint / {lat, lng} dicts."""
    if isinstance(value, Polygon):
        return value
    if isinstance(value, (list, tuple)):
        return Polygon(vertices=tuple(_coerce_point(v) for v in value))
    raise TypeError(f"Expected Polygon or vertex sequence, got {type(value)}")
