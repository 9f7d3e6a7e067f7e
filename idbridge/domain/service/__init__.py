"""Domain services."""

from .account_service import AccountService
from .base import Service
from .identity_cache import IdentityCache
from .identity_sync import IdentitySyncHook

__all__ = [
    "AccountService",
    "IdentityCache",
    "IdentitySyncHook",
    "Service",
]
