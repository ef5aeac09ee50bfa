"""
App Search Handler - Substring search over the application index.

Fallback handler: anything not claimed by a prefix handler is treated
as an application query.
"""

from loguru import logger

from ...errors import LaunchError
from ..router import ResultItem, SearchHandler


class AppSearchHandler(SearchHandler):
    """Search installed applications by substring."""

    name = "app_search"
    priority = 1000

    def __init__(self, index, launcher, max_results: int = 30, include_categories: bool = False):
        self.index = index
        self.launcher = launcher
        self.max_results = max_results
        self.include_categories = include_categories

    def matches(self, query: str) -> bool:
        return True

    async def get_results(self, query: str) -> list[ResultItem]:
        records = await self.index.search(query.strip(), self.include_categories)
        return self._records_to_results(records[:self.max_results])

    def _records_to_results(self, records) -> list[ResultItem]:
        """Convert ApplicationRecords to ResultItem list."""
        return [
            ResultItem(
                title=record.name,
                description=record.comment or record.generic_name or "",
                icon=record.icon or "application-x-executable",
                result_type="app",
                on_activate=lambda r=record: self._launch(r),
                record=record,
            )
            for record in records
        ]

    def _launch(self, record):
        """Launch the record; errors are logged and re-raised for the caller."""
        try:
            return self.launcher.launch(record)
        except LaunchError:
            logger.exception(f"Failed to launch application: {record.key}")
            raise
