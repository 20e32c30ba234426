"""
Structured Logging for Dredge Zone
==================================

Bounded Context: Observability

JSON-structured logging for boundary edits, selection recomputation and
exports.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from dredge_zone.logging import StructuredLogger, LogEvent
    >>> logger = StructuredLogger(component="session")
    >>> logger.info(
    ...     event=LogEvent.SELECTION_STATS_COMPUTED,
    ...     message="Selected 12 records",
    ...     metadata={'count': 12, 'volume': 1540.0}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
