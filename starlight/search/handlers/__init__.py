"""
Search handlers - Pluggable query processors.

Each handler checks if it can handle a query and returns typed results.
"""

from .app_search import AppSearchHandler
from .run_commands import RunCommandHandler
from .web_search import WebSearchHandler

__all__ = [
    "AppSearchHandler",
    "RunCommandHandler",
    "WebSearchHandler",
]
