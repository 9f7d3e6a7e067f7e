"""Test configuration and fixtures."""

import pytest

from idbridge.adapter.directory import FakeIdentityDirectory
from idbridge.config import CacheSettings, DirectorySettings
from idbridge.domain.service import IdentityCache
from idbridge.persistence.cache import InMemoryCacheStore


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_settings() -> CacheSettings:
    return CacheSettings(ttl_seconds=60, key_prefix="test")


@pytest.fixture
def directory_settings() -> DirectorySettings:
    return DirectorySettings(
        project_id="demo-project",
        api_key="test-api-key",
        access_token="owner",
        base_url="http://toolkit.test",
        batch_size=2,
        login_url="http://app.test/login",
        verify_url="http://app.test/auth/verify",
        signing_secret="test-secret",
    )


@pytest.fixture
def cache_store(clock: FakeClock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def identity_cache(
    cache_store: InMemoryCacheStore, cache_settings: CacheSettings
) -> IdentityCache:
    return IdentityCache(store=cache_store, settings=cache_settings)


@pytest.fixture
def fake_directory() -> FakeIdentityDirectory:
    return FakeIdentityDirectory()
