"""
Boundary Editor Module
======================

Stateful editor for a project's official boundary.

Design:
- Encapsulates the ordered vertex list (insertion order is significant)
- Capture mode gates map clicks, not explicit appends
- Persist-on-change: every mutation hands the new vertex list (or None when
  empty) to the project store callback
- Thread-safe via encapsulation (caller must synchronize)
"""

from typing import Callable, Iterable, List, Optional

from dredge_zone.errors import EmptyBoundaryError, VertexIndexError
from dredge_zone.geometry.shapes import GeoPoint, Polygon
from dredge_zone.logging import LogEvent, StructuredLogger, create_logger

SaveCallback = Callable[[Optional[List[GeoPoint]]], None]


class BoundaryEditor:
    """
    Accumulates a project boundary one vertex at a time.

    State:
        vertices: ordered list of GeoPoint (may hold 1-2 vertices while
                  capturing; only 3+ vertices form a polygon)
        capture_active: whether map clicks append vertices

    Usage:
        editor = BoundaryEditor(on_save=store.save)
        editor.start_capture()
        editor.capture(GeoPoint(-23.96, -46.33))   # map click
        editor.undo_last()
        polygon = editor.to_polygon()              # None below 3 vertices
    """

    def __init__(
        self,
        vertices: Optional[Iterable[GeoPoint]] = None,
        on_save: Optional[SaveCallback] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize editor from the stored boundary.

        Args:
            vertices: Initial vertices supplied by the project store
            on_save: Called after every mutation with the new vertex list,
                     or None when the boundary became empty
            logger: Structured logger (default: component "boundary")
        """
        self._vertices: List[GeoPoint] = list(vertices or [])
        self._capture_active = False
        self._on_save = on_save
        self._logger = logger or create_logger("boundary")

        if self._vertices:
            self._logger.info(
                event=LogEvent.BOUNDARY_LOADED,
                message="Boundary loaded from project store",
                metadata={'vertex_count': len(self._vertices)}
            )

    @property
    def vertices(self) -> List[GeoPoint]:
        """Copy of the current vertex list."""
        return list(self._vertices)

    @property
    def capture_active(self) -> bool:
        """Whether map clicks currently append vertices."""
        return self._capture_active

    def start_capture(self) -> None:
        """Enter boundary capture mode."""
        self._set_capture(True)

    def stop_capture(self) -> None:
        """Leave boundary capture mode."""
        self._set_capture(False)

    def _set_capture(self, active: bool) -> None:
        if self._capture_active == active:
            return
        self._capture_active = active
        self._logger.info(
            event=LogEvent.BOUNDARY_CAPTURE_TOGGLED,
            message=f"Boundary capture {'started' if active else 'stopped'}",
            metadata={'capture_active': active, 'vertex_count': len(self._vertices)}
        )

    def capture(self, point: GeoPoint) -> bool:
        """
        Handle a map click.

        Returns:
            True if the vertex was appended (capture mode active), else False
        """
        if not self._capture_active:
            return False
        self.append_vertex(point)
        return True

    def append_vertex(self, point: GeoPoint) -> None:
        """
        Append a vertex at the end of the boundary.

        Coincident vertices are accepted.
        """
        if not isinstance(point, GeoPoint):
            raise TypeError(f"point must be GeoPoint, got {type(point)}")
        self._vertices.append(point)
        self._logger.info(
            event=LogEvent.BOUNDARY_VERTEX_ADDED,
            message="Vertex appended to boundary",
            metadata={'index': len(self._vertices) - 1, 'vertex_count': len(self._vertices)}
        )
        self._save()

    def remove_vertex_at(self, index: int) -> GeoPoint:
        """
        Remove the vertex at a position, shifting later vertices down.

        Removing the last remaining vertex leaves an empty boundary.

        Args:
            index: Zero-based vertex position (negative positions are rejected)

        Returns:
            The removed vertex

        Raises:
            VertexIndexError: If index is out of range (no mutation)
        """
        if not 0 <= index < len(self._vertices):
            self._logger.warning(
                event=LogEvent.BOUNDARY_EDIT_ERROR,
                message="Vertex index out of range",
                metadata={'index': index, 'vertex_count': len(self._vertices)}
            )
            raise VertexIndexError(
                f"Vertex index {index} out of range for boundary with "
                f"{len(self._vertices)} vertices"
            )

        removed = self._vertices.pop(index)
        self._logger.info(
            event=LogEvent.BOUNDARY_VERTEX_REMOVED,
            message="Vertex removed from boundary",
            metadata={'index': index, 'vertex_count': len(self._vertices)}
        )
        self._save()
        return removed

    def undo_last(self) -> GeoPoint:
        """
        Remove the most recently appended vertex.

        Raises:
            EmptyBoundaryError: If the boundary has no vertices
        """
        if not self._vertices:
            self._logger.warning(
                event=LogEvent.BOUNDARY_EDIT_ERROR,
                message="Nothing to undo on empty boundary"
            )
            raise EmptyBoundaryError("Boundary has no vertices to undo")
        return self.remove_vertex_at(len(self._vertices) - 1)

    def clear(self) -> None:
        """Empty the boundary."""
        self._vertices.clear()
        self._logger.info(
            event=LogEvent.BOUNDARY_CLEARED,
            message="Boundary cleared"
        )
        self._save()

    def to_polygon(self) -> Optional[Polygon]:
        """Committed polygon, or None below 3 vertices."""
        return Polygon.from_vertices(self._vertices)

    def _save(self) -> None:
        """Hand the new vertex list to the project store."""
        if self._on_save is None:
            return
        payload = list(self._vertices) if self._vertices else None
        self._on_save(payload)
        self._logger.debug(
            event=LogEvent.BOUNDARY_SAVED,
            message="Boundary handed to project store",
            metadata={'vertex_count': len(self._vertices)}
        )

    def __len__(self) -> int:
        """Return number of vertices."""
        return len(self._vertices)

    def __repr__(self) -> str:
        """Human-readable representation."""
        return f"BoundaryEditor(vertices={len(self._vertices)}, capture_active={self._capture_active})"
