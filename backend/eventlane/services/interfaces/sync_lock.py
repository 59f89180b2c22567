"""
Per-event sync lock interface.
Serializes read-modify-write reconciliation of an event's commerce product.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import Counter
from contextlib import asynccontextmanager
from typing import AsyncIterator


class SyncLock(ABC):
    """
    Interface for per-key mutual exclusion around sync operations.

    Implementations:
    - LocalSyncLock: asyncio locks, one process only
    - RedisSyncLock: Redis lock shared across workers
    """

    @abstractmethod
    def hold(self, key: str, blocking: bool = True) -> AsyncIterator[bool]:
        """
        Async context manager guarding a key.

        Args:
            key: Lock name, e.g. "ticket_types:42"
            blocking: Wait up to the configured timeout (True) or give up
                immediately when the lock is held (False)

        Yields:
            True if the lock was acquired, False otherwise
        """
        pass


class LocalSyncLock(SyncLock):
    """
    In-process lock keyed by name.

    Use when:
    - Single worker deployments
    - Tests and local development
    """

    def __init__(self, timeout: float = 10.0):
        self._timeout = timeout
        self._locks: dict[str, asyncio.Lock] = {}
        # Holders and waiters per key; a key is forgotten once nobody uses it
        self._users: Counter[str] = Counter()

    @property
    def key_count(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: str, blocking: bool = True) -> AsyncIterator[bool]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with self._acquire(lock, blocking) as acquired:
                yield acquired
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    @asynccontextmanager
    async def _acquire(self, lock: asyncio.Lock, blocking: bool) -> AsyncIterator[bool]:
        if not blocking and lock.locked():
            yield False
            return

        try:
            await asyncio.wait_for(lock.acquire(), timeout=self._timeout)
        except asyncio.TimeoutError:
            yield False
            return

        try:
            yield True
        finally:
            lock.release()
