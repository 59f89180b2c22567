"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .memory import InMemoryCommerceRepository, InMemoryEventRepository
from .redis_client import get_redis, close_redis
from .sql_repositories import SqlCommerceRepository, SqlEventRepository

__all__ = [
    'InMemoryCommerceRepository',
    'InMemoryEventRepository',
    'SqlCommerceRepository',
    'SqlEventRepository',
    'get_redis',
    'close_redis',
]
