"""
Search package - Query routing, handlers and the substring search engine.

Queries are dispatched to priority-ordered handlers (web search, run
command, app search).
"""

from .engine import filter_by_category, search_records
from .router import QueryRouter, SearchHandler, ResultItem

__all__ = ["QueryRouter", "SearchHandler", "ResultItem", "filter_by_category", "search_records"]
