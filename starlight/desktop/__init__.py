# Starlight Desktop Entry Package
"""
Discovery and parsing of .desktop application descriptors.
"""

from .discovery import DiscoveryCoordinator, default_search_paths
from .entry import (
    Accepted,
    ApplicationRecord,
    RejectedFiltered,
    RejectedFormat,
    classify_entry,
    parse_entry,
)
from .scanner import scan_directory

__all__ = [
    "Accepted",
    "ApplicationRecord",
    "DiscoveryCoordinator",
    "RejectedFiltered",
    "RejectedFormat",
    "classify_entry",
    "default_search_paths",
    "parse_entry",
    "scan_directory",
]
