"""Mock providers for testing."""

from .cache import MockCacheProvider
from .directory import MockDirectoryProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockCacheProvider",
    "MockDirectoryProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
