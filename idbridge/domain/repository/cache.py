"""Cache store interface."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

Compute = Callable[[], Awaitable[Any]]


class CacheStore(ABC):
    """Keyed cache used for read-through directory lookups.

    A None stored by ``remember`` is a cached value (negative lookup), not
    a miss. ``remember_forever`` never stores None.
    Implementations must make fetch-or-compute-and-store single-flight per
    key: concurrent misses on one key trigger a single ``compute``.
    """

    @abstractmethod
    async def remember(self, key: str, ttl: int, compute: Compute) -> Any:
        """Return the cached value, or compute, store for ttl seconds, return.

        Args:
            key: Cache key
            ttl: Lifetime in seconds
            compute: Coroutine factory producing the value on a miss

        Returns:
            Cached or freshly computed value
        """
        pass

    @abstractmethod
    async def remember_forever(self, key: str, compute: Compute) -> Any:
        """Like ``remember`` without expiry.

        A None result is returned but not stored, so the next call
        computes again.
        """
        pass

    @abstractmethod
    async def forget(self, key: str) -> bool:
        """Drop an entry.

        Returns:
            True if an entry was removed
        """
        pass

    @abstractmethod
    async def flush(self) -> None:
        """Drop every entry owned by this store."""
        pass
