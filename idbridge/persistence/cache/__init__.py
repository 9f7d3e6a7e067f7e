"""Cache store implementations."""

from .memory import InMemoryCacheStore
from .redis_store import RedisCacheStore

__all__ = [
    "InMemoryCacheStore",
    "RedisCacheStore",
]
