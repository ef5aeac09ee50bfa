"""
Web Search Handler - Open web searches in the default browser.

Triggers on prefix patterns:
  w: query    → one result per search engine
  web: query  → same

Every configured engine produces a result, in configuration order.
Engines are configurable via settings.toml [web_search.engines], mapping
an engine name to a URL template containing {query}.
"""

import urllib.parse
from dataclasses import dataclass

from loguru import logger

from ...errors import LaunchError
from ..router import ResultItem, SearchHandler, strip_prefix as _strip

PREFIXES = ("web:", "w:")

# Default search engine URLs (can be overridden in settings.toml)
DEFAULT_ENGINES = {
    "google": "https://www.google.com/search?q={query}",
    "duckduckgo": "https://duckduckgo.com/?q={query}",
    "youtube": "https://www.youtube.com/results?search_query={query}",
    "stackoverflow": "https://stackoverflow.com/search?q={query}",
}

ENGINE_DESCRIPTIONS = {
    "google": "Search with Google",
    "duckduckgo": "Search with DuckDuckGo (Privacy-focused)",
    "youtube": "Search YouTube videos",
    "stackoverflow": "Search Stack Overflow",
}


@dataclass
class WebSearchResult:
    title: str
    url: str
    description: str
    search_engine: str


def strip_prefix(query: str) -> str:
    """Remove a leading w:/web: prefix and surrounding whitespace."""
    return _strip(query, PREFIXES)


class WebSearchHandler(SearchHandler):
    """Turn a query into search-engine URLs."""

    name = "web_search"
    priority = 200
    prefixes = PREFIXES

    def __init__(self, launcher, engines: dict = None):
        self.launcher = launcher
        self.engines = engines or DEFAULT_ENGINES

    def search_engines_for_query(self, query: str) -> list[WebSearchResult]:
        """
        Build one search URL per engine.

        Args:
            query: Free text to search for (without prefix)

        Returns:
            List of WebSearchResult in engine order
        """
        encoded = urllib.parse.quote(query, safe="")
        return [
            WebSearchResult(
                title=f'Search "{query}" on {engine}',
                url=template.replace("{query}", encoded),
                description=ENGINE_DESCRIPTIONS.get(engine, "Web search"),
                search_engine=engine,
            )
            for engine, template in self.engines.items()
        ]

    async def get_results(self, query: str) -> list[ResultItem]:
        search_term = self.query_text(query)
        return [
            ResultItem(
                title=result.title,
                description=result.description,
                icon="web-browser",
                result_type="web",
                on_activate=lambda u=result.url: self._open_url(u),
                url=result.url,
            )
            for result in self.search_engines_for_query(search_term)
        ]

    def _open_url(self, url: str):
        """Open URL in default browser via xdg-open."""
        try:
            proc = self.launcher.open_url(url)
        except LaunchError:
            logger.warning(f"Failed to open URL: {url}")
            raise
        logger.debug(f"Opened URL: {url}")
        return proc
