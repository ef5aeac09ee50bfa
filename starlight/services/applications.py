"""
Application Index - In-memory store of discovered applications.

Holds one mapping of key -> ApplicationRecord, guarded by a single
reader-writer lock:
  - load()/refresh() take the write lock for the whole scan-and-replace
  - get()/list()/count()/search()/by_category() share the read lock

The mapping never leaves this class; callers only see record lists,
which are safe to keep because records are immutable.
"""

from __future__ import annotations

from loguru import logger

from ..desktop.discovery import DiscoveryCoordinator
from ..desktop.entry import ApplicationRecord
from ..search.engine import filter_by_category, search_records
from ..utils.locks import ReadWriteLock


class ApplicationIndex:
    """
    Searchable index of installed applications.

    Methods:
        load(): Scan all search paths and insert the results
        refresh(): Drop everything and load again from scratch
        get(key): Look up a record by descriptor filename stem
        list(): All current records
        count(): Number of records
        search(query): Substring search over names, comments, keywords
        by_category(name): Records in a category
    """

    def __init__(self, coordinator: DiscoveryCoordinator | None = None, log=logger):
        self.log = log
        self.coordinator = coordinator or DiscoveryCoordinator(log=log)
        self._apps: dict[str, ApplicationRecord] = {}
        self._lock = ReadWriteLock()

    async def load(self) -> int:
        """
        Run one discovery pass and insert the results.

        Returns:
            Number of applications in the index afterwards

        Raises:
            DiscoveryError: If no search path is configured
        """
        async with self._lock.write():
            return await self._load_locked()

    async def refresh(self) -> int:
        """
        Clear the index and load it again.

        Returns:
            Number of applications in the index afterwards
        """
        async with self._lock.write():
            self._apps.clear()
            return await self._load_locked()

    async def _load_locked(self) -> int:
        discovered = await self.coordinator.discover()
        self._apps.update(discovered)
        self.log.debug(f"Loaded {len(self._apps)} applications")
        return len(self._apps)

    async def get(self, key: str) -> ApplicationRecord | None:
        async with self._lock.read():
            return self._apps.get(key)

    async def list(self) -> list[ApplicationRecord]:
        async with self._lock.read():
            return list(self._apps.values())

    async def count(self) -> int:
        async with self._lock.read():
            return len(self._apps)

    async def search(self, query: str, include_categories: bool = False) -> list[ApplicationRecord]:
        """
        Find applications whose name, generic name, comment or keywords
        contain the query (case-insensitive).

        Args:
            query: Search text; empty returns every application
            include_categories: Also match category names

        Returns:
            Matching records, in index iteration order
        """
        async with self._lock.read():
            return search_records(self._apps.values(), query, include_categories)

    async def by_category(self, name: str) -> list[ApplicationRecord]:
        """Records whose category list contains name (case-insensitive)."""
        async with self._lock.read():
            return filter_by_category(self._apps.values(), name)

