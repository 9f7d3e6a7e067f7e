"""In-process cache store."""

import asyncio
import time
from collections.abc import Callable
from typing import Any

from idbridge.domain.repository.cache import CacheStore, Compute


class InMemoryCacheStore(CacheStore):
    """Dict-backed cache store for a single process.

    Entries are ``(value, expires_at)`` with ``expires_at`` None for
    entries that never expire. A lock per key makes misses single-flight;
    the lock lives only while some caller is filling or waiting on it.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize in-memory cache store.

        Args:
            clock: Seconds source used for expiry
        """
        self.clock = clock
        self._entries: dict[str, tuple[Any, float | None]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiting: dict[str, int] = {}

    def _get(self, key: str) -> tuple[bool, Any]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self.clock():
            del self._entries[key]
            return False, None
        return True, value

    def _evict_expired(self) -> None:
        now = self.clock()
        expired = [
            key
            for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._entries[key]

    def _store(self, key: str, value: Any, ttl: int | None) -> None:
        self._evict_expired()
        expires_at = None if ttl is None else self.clock() + ttl
        self._entries[key] = (value, expires_at)

    async def _remember(
        self, key: str, ttl: int | None, compute: Compute, store_none: bool
    ) -> Any:
        found, value = self._get(key)
        if found:
            return value

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiting[key] = self._waiting.get(key, 0) + 1
        try:
            async with lock:
                # Another waiter may have filled the entry
                found, value = self._get(key)
                if found:
                    return value
                value = await compute()
                if value is not None or store_none:
                    self._store(key, value, ttl)
                return value
        finally:
            self._waiting[key] -= 1
            if not self._waiting[key]:
                del self._waiting[key]
                del self._locks[key]

    async def remember(self, key: str, ttl: int, compute: Compute) -> Any:
        return await self._remember(key, ttl, compute, store_none=True)

    async def remember_forever(self, key: str, compute: Compute) -> Any:
        return await self._remember(key, None, compute, store_none=False)

    async def forget(self, key: str) -> bool:
        if key not in self._waiting:
            self._locks.pop(key, None)
        return self._entries.pop(key, None) is not None

    async def flush(self) -> None:
        self._entries.clear()
