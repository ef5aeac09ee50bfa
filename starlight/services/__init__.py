# Starlight Services Package
"""
Backend services for Starlight.

Services own the application index and process launching.
"""

from .applications import ApplicationIndex
from .launcher import Launcher

__all__ = ["ApplicationIndex", "Launcher"]
