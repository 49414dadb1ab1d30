"""Per-repository leases that keep overlapping sync attempts from racing."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class RepositorySyncLocks:
    """Tracks which repositories currently have a sync attempt in progress.

    Leases are process-local. An attempt that finds its repository already
    leased is expected to skip, since the running attempt will cover the
    same upstream commits.
    """

    def __init__(self) -> None:
        """Initialize an empty lease registry."""
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, repository: str) -> asyncio.Lock:
        key = repository.lower()
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def is_locked(self, repository: str) -> bool:
        """Return True if a sync attempt holds the lease for repository."""
        lock = self._locks.get(repository.lower())
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def try_acquire(self, repository: str) -> AsyncIterator[bool]:
        """Hold the lease for repository while the block runs, if it is free.

        Yields True when the lease was acquired and False when another
        attempt already holds it. The lease's lock is forgotten once it is
        released.
        """
        key = repository.lower()
        lock = self._lock_for(repository)
        if lock.locked():
            logger.info("Sync already in progress for repository, skipping", repository=repository)
            yield False
            return
        try:
            async with lock:
                yield True
        finally:
            # Nothing ever waits on a held lease, so an unlocked lock is unused.
            if self._locks.get(key) is lock and not lock.locked():
                del self._locks[key]
