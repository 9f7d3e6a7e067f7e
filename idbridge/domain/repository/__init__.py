"""Repository interfaces for identity synchronization.

Interfaces are defined in the domain layer (dependency inversion).
Implementations live in the adapter and persistence layers.
"""

from idbridge.domain.repository.account import AccountRepository, LifecycleHook
from idbridge.domain.repository.cache import CacheStore
from idbridge.domain.repository.identity_directory import (
    RESET_LINK_SENT,
    IdentityDirectory,
)

__all__ = [
    "AccountRepository",
    "CacheStore",
    "IdentityDirectory",
    "LifecycleHook",
    "RESET_LINK_SENT",
]
