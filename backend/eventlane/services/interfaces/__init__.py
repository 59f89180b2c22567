"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .availability import AvailabilityOracle
from .clock import Clock, SystemClock
from .repositories import CommerceRepository, EventRepository
from .sync_lock import LocalSyncLock, SyncLock

__all__ = [
    'AvailabilityOracle',
    'Clock',
    'SystemClock',
    'CommerceRepository',
    'EventRepository',
    'LocalSyncLock',
    'SyncLock',
]
