"""
Async reader-writer lock.

Readers share the lock; a writer holds it alone. Once a writer is
waiting, new readers queue behind it so a steady stream of searches
cannot starve a refresh.
"""

import asyncio
from contextlib import asynccontextmanager


class ReadWriteLock:
    """Reader-writer lock for coroutines running on one event loop."""

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @asynccontextmanager
    async def read(self):
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self):
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and self._readers == 0
                )
            except BaseException:
                # Readers parked behind this writer must re-check
                self._writers_waiting -= 1
                self._cond.notify_all()
                raise
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()

    @property
    def readers(self) -> int:
        """Number of coroutines currently holding the read lock."""
        return self._readers

    @property
    def locked_for_write(self) -> bool:
        return self._writer
