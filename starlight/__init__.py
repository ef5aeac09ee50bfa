# Starlight Package
"""
Application launcher core for Linux desktops.

Packages:
  - desktop: .desktop discovery and parsing
  - services: Application index and process launcher
  - search: Substring search and query routing (apps, r: run, w: web)
"""

__version__ = "0.1.0-dev"
