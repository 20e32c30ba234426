"""
dredge_zone.control - Drawing-surface event dispatch

Bounded Context: Events reported by the map (polygon created / edited /
deleted, map clicks) and the session handlers they reach.

Design Philosophy:
  - Explicit registration (fail-fast, no runtime surprises)
  - Clear error messages (lists available events on error)
"""

from .registry import EventRegistry, EventNotAvailableError

__all__ = [
    "EventRegistry",
    "EventNotAvailableError",
]
