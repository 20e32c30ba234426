"""
EventRegistry - Explicit registration of drawing-surface events

Bounded Context: Event registration and dispatch
Responsibilities:
  - Register event names with handlers
  - Validate event existence before dispatch
  - Provide introspection (available_events, get_help)

Design Motivation:
  Problem: The map surface reports many kinds of events and optional
           callbacks make it unclear which ones the session reacts to
  Solution: Explicit registration pattern

Threading: Thread-safe (uses lock for write operations)
"""

from typing import Any, Callable, Dict, Optional, Set
import threading


class EventNotAvailableError(Exception):
    """Raised when dispatching an unregistered event"""
    pass


class EventRegistry:
    """
    Registry for drawing-surface events with explicit registration.

    Key Features:
      - Fail-fast: Unknown events rejected immediately
      - Introspection: Can query available events at runtime
      - Self-Documenting: Each event has description

    Example:
        registry = EventRegistry()
        registry.register('polygon_created', session.set_adhoc_polygon, "Replace ad-hoc polygon",
                          takes_payload=True)

        try:
            registry.dispatch('polygon_created', polygon)
        except EventNotAvailableError as e:
            print(f"Event not available: {e}")
    """

    def __init__(self):
        self._handlers: Dict[str, Callable] = {}
        self._descriptions: Dict[str, str] = {}
        self._takes_payload: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def register(
        self,
        event: str,
        handler: Callable,
        description: str,
        takes_payload: bool = False,
    ) -> None:
        """
        Register an event with its handler function.

        Args:
            event: Event name (lowercase, no spaces)
            handler: Callable invoked on dispatch
            description: Human-readable description for help text
            takes_payload: Handler is called with exactly one payload argument

        Raises:
            ValueError: If event already registered (double registration)
        """
        with self._lock:
            if event in self._handlers:
                raise ValueError(f"Event '{event}' already registered")

            self._handlers[event] = handler
            self._descriptions[event] = description
            self._takes_payload[event] = takes_payload

    def dispatch(self, event: str, payload: Optional[Any] = None) -> Any:
        """
        Dispatch a registered event.

        Args:
            event: Event name to dispatch
            payload: Optional event payload (polygon, clicked point)

        Returns:
            Whatever the handler returns

        Raises:
            EventNotAvailableError: If event not registered
            ValueError: If the payload is missing for an event that takes one,
                        or given for an event that does not
        """
        if event not in self._handlers:
            raise EventNotAvailableError(
                f"Event '{event}' not available. "
                f"Available events: {', '.join(sorted(self.available_events))}"
            )

        handler = self._handlers[event]
        if self._takes_payload[event]:
            if payload is None:
                raise ValueError(f"Event '{event}' requires a payload")
            return handler(payload)
        if payload is not None:
            raise ValueError(f"Event '{event}' does not take a payload")
        return handler()

    def is_available(self, event: str) -> bool:
        """Check if event is registered."""
        return event in self._handlers

    @property
    def available_events(self) -> Set[str]:
        """Snapshot of all registered events."""
        return set(self._handlers.keys())

    def get_help(self) -> Dict[str, str]:
        """Dict of events with descriptions (snapshot)."""
        return dict(self._descriptions)

    def count(self) -> int:
        """Number of registered events."""
        return len(self._handlers)
