"""
Structured JSON Logger
======================

One JSON object per log line, emitted through the standard logging module
under the logger name ``dredge_zone.<component>``.

Example:
    >>> logger = create_logger("boundary")
    >>> logger.info(
    ...     event=LogEvent.BOUNDARY_VERTEX_ADDED,
    ...     message="Vertex appended to boundary",
    ...     metadata={'index': 3, 'vertex_count': 4}
    ... )

Output:
    {"timestamp": "2025-03-14T09:30:00.123456+00:00", "level": "INFO",
     "component": "boundary", "event": "boundary.vertex.added",
     "message": "Vertex appended to boundary",
     "metadata": {"index": 3, "vertex_count": 4}}
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent


class StructuredLogger:
    """
    JSON logger for one component of the engine.

    Entries below the configured level are dropped before serialization.
    Thread-safe via Python's logging module.
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Args:
            component: Component identifier ("boundary", "session", "export")
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: dredge_zone.<component>)
        """
        self.component = component
        self.logger = logging.getLogger(logger_name or f"dredge_zone.{component}")
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return

        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }
        if metadata:
            entry['metadata'] = metadata
        if exc_info is not None:
            entry['exception'] = {'type': type(exc_info).__name__, 'message': str(exc_info)}

        # metadata may hold non-JSON values (paths, enums)
        self.logger.log(level, json.dumps(entry, default=str), exc_info=exc_info)

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, event, message, metadata)

    def warning(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Contract violations, logged before the exception is raised."""
        self._log(logging.WARNING, event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """Failures of external collaborators (broker, file system)."""
        self._log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        """Change the logging level at runtime."""
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """Passes the pre-serialized JSON message through unchanged."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(component: str, level: int = logging.INFO) -> StructuredLogger:
    """Factory for a component logger."""
    return StructuredLogger(component=component, level=level)
