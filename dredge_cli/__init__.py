"""
Dredge Zone CLI Package

Command-line interface for geofenced selection statistics, GeoJSON export,
project trends and boundary editing.
"""

from .cli import main

__version__ = "1.0.0"
__all__ = ["main"]
