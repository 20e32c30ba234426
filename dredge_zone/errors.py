"""
Domain Errors
=============

Contract violations raised by the boundary editor and the selection session.

VertexIndexError also derives from IndexError so callers that pre-validate
with the builtin exception keep working.
"""


class BoundaryError(Exception):
    """Base class for boundary editing errors."""
    pass


class EmptyBoundaryError(BoundaryError):
    """Raised when undoing a vertex on an empty boundary."""
    pass


class VertexIndexError(BoundaryError, IndexError):
    """Raised when removing a vertex at an out-of-range position."""
    pass


class NoSelectionError(Exception):
    """Raised when exporting while no polygon selects any data."""
    pass
