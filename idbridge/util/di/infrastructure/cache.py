"""Cache infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from redis.asyncio import Redis

from idbridge.config import CacheSettings
from idbridge.domain.repository import CacheStore
from idbridge.persistence.cache import InMemoryCacheStore, RedisCacheStore
from idbridge.util.di.base import ProviderBase
from idbridge.util.observability import instrument_redis


class CacheProvider(ProviderBase):
    """Cache component base."""

    __mock_component__ = "cache"


class ProdCacheProvider(CacheProvider):
    """Production cache provider, Redis or process memory by configuration."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_cache_store(
        self, cache_settings: CacheSettings
    ) -> AsyncIterator[CacheStore]:
        """Provide the cache store shared by all requests."""
        if cache_settings.backend == "memory":
            logfire.info("Using in-memory identity cache")
            yield InMemoryCacheStore()
            return

        instrument_redis()
        redis = Redis.from_url(cache_settings.redis_url)
        try:
            yield RedisCacheStore(
                redis,
                key_prefix=cache_settings.key_prefix,
                lock_timeout=cache_settings.lock_timeout,
            )
        finally:
            await redis.aclose()
