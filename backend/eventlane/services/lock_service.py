"""
Redis-backed sync lock for multi-worker deployments.
Implements SyncLock interface using Redis.

Circuit Breaker Pattern:
  On Redis failure, the lock "fails open" (the sync proceeds unlocked).
  This prevents Redis outages from blocking every vendor save.
  Reconciliation is idempotent, so an unguarded run is still safe to repeat.

  Tradeoff: During Redis outage, two concurrent saves of the same event's
  ticket types may interleave. This is acceptable because:
  - Temporary degradation better than rejecting all ticket edits
  - A re-run of the sync converges the variation set
  - Redis failures should be rare and monitored
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from eventlane.core.logging import get_logger
from eventlane.core.metrics import redis_circuit_breaker_open, redis_connection_errors
from eventlane.infrastructure.redis_client import get_redis
from eventlane.services.interfaces.sync_lock import SyncLock

logger = get_logger(__name__)

LOCK_PREFIX = "eventlane:sync:"


class RedisSyncLock(SyncLock):
    """
    Redis lock shared by all workers.

    The lock TTL bounds how long a crashed worker can hold an event.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        ttl: int = 30,
        client_factory: Callable[[], Awaitable[Optional[redis.Redis]]] = get_redis,
    ):
        self._timeout = timeout
        self._ttl = ttl
        self._client_factory = client_factory

    @asynccontextmanager
    async def hold(self, key: str, blocking: bool = True) -> AsyncIterator[bool]:
        client = await self._client_factory()
        if client is None:
            logger.warning("sync_lock_unavailable", key=key, message="Proceeding without lock")
            redis_circuit_breaker_open.set(1)
            yield True
            return

        lock = client.lock(f"{LOCK_PREFIX}{key}", timeout=self._ttl)
        acquired: Optional[bool] = None
        try:
            acquired = await lock.acquire(blocking=blocking, blocking_timeout=self._timeout)
        except RedisError as e:
            # Circuit breaker: fail open
            redis_connection_errors.inc()
            redis_circuit_breaker_open.set(1)
            logger.error("sync_lock_acquire_failed", key=key, error=str(e))

        if acquired is None:
            yield True
            return

        redis_circuit_breaker_open.set(0)
        if not acquired:
            yield False
            return

        try:
            yield True
        finally:
            try:
                await lock.release()
            except RedisError as e:
                # Best effort: the TTL releases it eventually
                logger.warning("sync_lock_release_failed", key=key, error=str(e))
