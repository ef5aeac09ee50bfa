# Starlight Utilities Package
"""
Shared utility functions and helpers for Starlight.
"""

from .executables import list_path_executables
from .helpers import launch_app, load_settings
from .locks import ReadWriteLock

__all__ = ["launch_app", "list_path_executables", "load_settings", "ReadWriteLock"]
