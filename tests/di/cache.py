"""Mock cache providers for testing."""

from dishka import Scope, alias, provide

from idbridge.domain.repository import CacheStore
from idbridge.persistence.cache import InMemoryCacheStore
from idbridge.util.di.infrastructure.cache import CacheProvider


class MockCacheProvider(CacheProvider):
    """Mock cache provider using a process-local store.

    Uses REQUEST scope to ensure test isolation - each test gets an empty cache.
    """

    __is_mock__ = True

    @provide(scope=Scope.REQUEST)
    def get_memory_store(self) -> InMemoryCacheStore:
        """Provide in-memory cache store."""
        return InMemoryCacheStore()

    cache_store = alias(source=InMemoryCacheStore, provides=CacheStore)
