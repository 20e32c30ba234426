"""
Boundary Layer
==============

Bounded Context: Project boundary editing (stateful).

Responsibilities:
- Ordered vertex list with append / undo / remove-at / clear
- Capture mode for click-to-append
- Persist-on-change callback to the project store
"""

from dredge_zone.boundary.editor import BoundaryEditor

__all__ = [
    "BoundaryEditor",
]
