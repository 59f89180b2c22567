"""
Sync lock strategy factory.
Configures which mutual-exclusion strategy guards reconciliation.
"""

from typing import Optional

from eventlane.core.config import get_settings
from eventlane.services.interfaces.sync_lock import LocalSyncLock, SyncLock
from eventlane.services.lock_service import RedisSyncLock


def get_sync_lock_strategy() -> SyncLock:
    """
    Get configured sync lock.

    Strategy selection:
    - local: LocalSyncLock (single worker, development)
    - redis: RedisSyncLock (multiple workers)

    Set via SYNC_LOCK_STRATEGY env var.
    """
    settings = get_settings()

    if settings.SYNC_LOCK_STRATEGY == 'redis':
        return RedisSyncLock(
            timeout=settings.SYNC_LOCK_TIMEOUT_SECONDS,
            ttl=settings.SYNC_LOCK_TTL_SECONDS,
        )
    return LocalSyncLock(timeout=settings.SYNC_LOCK_TIMEOUT_SECONDS)


# Singleton instance
_strategy: Optional[SyncLock] = None

def get_sync_lock() -> SyncLock:
    """Get sync lock singleton."""
    global _strategy
    if _strategy is None:
        _strategy = get_sync_lock_strategy()
    return _strategy
