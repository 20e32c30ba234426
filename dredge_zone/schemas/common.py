"""
Common Schema Types
==================

Bounded Context: Shared Data Structures

This module defines the value types shared by field records, the boundary
store and exported documents.

Design Principles:
- Immutability: frozen=True prevents accidental mutation
- Type Safety: All fields explicitly typed
- Serialization: to_dict() for JSON export
- Validation: Constructor validates invariants

Types:
- Timestamp: ISO 8601 timestamp wrapper
"""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable ISO 8601 timestamp wrapper.

    Field entries are stamped by the browser, so a trailing 'Z' (UTC) is
    accepted in addition to the offsets understood by datetime.fromisoformat.

    Attributes:
        value: ISO 8601 formatted timestamp string

    Example:
        >>> ts = Timestamp("2025-03-14T09:30:00Z")
        >>> ts.month_key()
        '2025-03'
    """
    value: str

    def __post_init__(self):
        """Validate invariants."""
        # Raises ValueError on malformed values
        self.to_datetime()

    @classmethod
    def now(cls) -> 'Timestamp':
        """Create timestamp from current time."""
        return cls(value=datetime.now(timezone.utc).isoformat())

    @classmethod
    def from_datetime(cls, dt: datetime) -> 'Timestamp':
        """Create timestamp from datetime object."""
        return cls(value=dt.isoformat())

    def to_datetime(self) -> datetime:
        """Parse to datetime object.

        Returns:
            datetime instance (timezone-aware when the value carries an offset)

        Raises:
            ValueError: If timestamp format invalid
        """
        text = self.value
        if isinstance(text, str) and text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            return datetime.fromisoformat(text)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ISO timestamp: {self.value}") from e

    def sort_key(self) -> float:
        """Seconds since epoch, naive values read as UTC."""
        dt = self.to_datetime()
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.timestamp()

    def month_key(self) -> str:
        """Calendar month bucket ('YYYY-MM') used by trend aggregation."""
        return self.to_datetime().strftime('%Y-%m')

    def to_dict(self) -> str:
        """Serialize to JSON (as string)."""
        return self.value
