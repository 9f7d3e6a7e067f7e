"""Infrastructure providers."""

# Import bases
from .cache import CacheProvider
from .directory import DirectoryProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .cache import ProdCacheProvider  # noqa: F401
from .directory import ProdDirectoryProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "CacheProvider",
    "DirectoryProvider",
    "PersistenceProvider",
    "ProdCacheProvider",
    "ProdDirectoryProvider",
    "ProdPersistenceProvider",
]
