"""Redis-backed cache store."""

import pickle
from typing import Any

import logfire
from redis.asyncio import Redis
from redis.exceptions import LockError

from idbridge.domain.repository.cache import CacheStore, Compute


class RedisCacheStore(CacheStore):
    """Cache store shared by every process talking to one Redis.

    Values are pickled inside a one-element tuple, so a cached None is
    told apart from a missing key. Misses are single-flight through a
    Redis lock per key. A caller that cannot get the lock in time fills
    the entry without it.
    """

    def __init__(self, redis: Redis, key_prefix: str, lock_timeout: float = 10.0):
        """Initialize Redis cache store.

        Args:
            redis: Async Redis client
            key_prefix: Prefix of every key this store owns
            lock_timeout: Seconds a fill lock is held and waited for
        """
        self.redis = redis
        self.key_prefix = key_prefix
        self.lock_timeout = lock_timeout

    async def _get(self, key: str) -> tuple[bool, Any]:
        data = await self.redis.get(key)
        if data is None:
            return False, None
        (value,) = pickle.loads(data)
        return True, value

    async def _fill(
        self, key: str, ttl: int | None, compute: Compute, store_none: bool
    ) -> Any:
        found, value = await self._get(key)
        if found:
            return value
        value = await compute()
        if value is not None or store_none:
            await self.redis.set(key, pickle.dumps((value,)), ex=ttl)
            logfire.debug("Cache entry stored", key=key, ttl=ttl)
        return value

    async def _remember(
        self, key: str, ttl: int | None, compute: Compute, store_none: bool
    ) -> Any:
        found, value = await self._get(key)
        if found:
            return value

        lock = self.redis.lock(
            f"{key}:lock",
            timeout=self.lock_timeout,
            blocking_timeout=self.lock_timeout,
        )
        if not await lock.acquire():
            logfire.warn("Cache fill lock not acquired", key=key)
            return await self._fill(key, ttl, compute, store_none)

        try:
            return await self._fill(key, ttl, compute, store_none)
        finally:
            try:
                await lock.release()
            except LockError:
                logfire.warn("Cache fill lock expired before release", key=key)

    async def remember(self, key: str, ttl: int, compute: Compute) -> Any:
        return await self._remember(key, ttl, compute, store_none=True)

    async def remember_forever(self, key: str, compute: Compute) -> Any:
        return await self._remember(key, None, compute, store_none=False)

    async def forget(self, key: str) -> bool:
        return bool(await self.redis.delete(key))

    async def flush(self) -> None:
        keys = [key async for key in self.redis.scan_iter(match=f"{self.key_prefix}:*")]
        if keys:
            await self.redis.delete(*keys)
        logfire.info("Cache flushed", prefix=self.key_prefix, count=len(keys))
