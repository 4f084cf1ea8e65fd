"""Async synchronization primitives specific to the mining economy."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator, Dict, Hashable, Optional


class KeyedAsyncLock:
    """Hand out one :class:`asyncio.Lock` per key, created on first use.

    Locks are never evicted; the set of keys mirrors the in-memory ledger,
    which also lives for the whole process.
    """

    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._logger = logger or logging.getLogger(__name__)

    def lock_for(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def guard(self, key: Hashable) -> AsyncIterator[None]:
        lock = self.lock_for(key)
        if lock.locked():
            self._logger.debug(
                "Waiting for keyed lock",
                extra={"lock_key": str(key), "event_type": "lock_wait"},
            )
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


__all__ = ["KeyedAsyncLock"]
