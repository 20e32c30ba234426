"""
Schemas
=======

Immutable data structures exchanged with the point source and the
boundary store.

Public API
----------
    Timestamp
    Material, DredgeRecord, select_records
"""

from .common import Timestamp
from .record import Material, DredgeRecord, select_records

__all__ = [
    'Timestamp',
    'Material',
    'DredgeRecord',
    'select_records',
]
