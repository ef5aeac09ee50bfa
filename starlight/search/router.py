"""
Query Router - Dispatches search queries to priority-ordered handlers.

Handlers subclass SearchHandler. A handler with prefixes ("w:", "r:")
claims every query that starts with one of them; the fallback handler
overrides matches() to accept anything. Handlers are tried from the
lowest priority number up and the first one that matches answers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

FALLBACK_HANDLER = "app_search"


@dataclass
class ResultItem:
    """A single search result from any handler."""
    title: str
    description: str = ""
    icon: str = "application-x-executable"
    result_type: str = "app"  # app, command, web
    on_activate: Optional[Callable] = None
    record: object = None  # ApplicationRecord for app results
    url: Optional[str] = None  # target URL for web results


def strip_prefix(query: str, prefixes: Sequence[str]) -> str:
    """Remove the first matching prefix and surrounding whitespace."""
    q = query.strip()
    for prefix in prefixes:
        if q.startswith(prefix):
            return q[len(prefix):].strip()
    return q


class SearchHandler(ABC):
    """
    Base class for all search handlers.

    Subclasses set name, priority and usually prefixes, and implement
    the async get_results().
    """

    prefixes: tuple = ()

    @property
    @abstractmethod
    def name(self) -> str:
        """Handler identifier."""

    @property
    @abstractmethod
    def priority(self) -> int:
        """Lower number = checked first."""

    def matches(self, query: str) -> bool:
        q = query.strip()
        return any(q.startswith(prefix) for prefix in self.prefixes)

    def query_text(self, query: str) -> str:
        """The query with this handler's prefix removed."""
        return strip_prefix(query, self.prefixes)

    @abstractmethod
    async def get_results(self, query: str) -> list[ResultItem]:
        """Return results for the query."""


class QueryRouter:
    """Routes queries to the appropriate handler based on priority."""

    def __init__(self):
        self._handlers: list[SearchHandler] = []

    def register(self, handler: SearchHandler) -> None:
        """Add a handler, keeping the list ordered by priority."""
        if not isinstance(handler, SearchHandler):
            raise TypeError(f"{handler!r} is not a SearchHandler")
        self._handlers.append(handler)
        self._handlers.sort(key=lambda h: h.priority)

    @property
    def handlers(self) -> list[SearchHandler]:
        return list(self._handlers)

    def select(self, query: str) -> Optional[SearchHandler]:
        """Pick the handler for query; a blank query goes to the fallback."""
        if not query or not query.strip():
            return next((h for h in self._handlers if h.name == FALLBACK_HANDLER), None)
        return next((h for h in self._handlers if h.matches(query)), None)

    async def route(self, query: str) -> tuple[str, list[ResultItem]]:
        """
        Run the selected handler.

        Returns:
            (handler name, results), or ("none", []) when nothing matches
        """
        handler = self.select(query)
        if handler is None:
            return "none", []
        return handler.name, await handler.get_results(query if query and query.strip() else "")
