"""Read-through cache for directory lookups."""

import hashlib
import json
from collections.abc import Sequence
from typing import Any

import logfire
from pydantic import BaseModel

from idbridge.config import CacheSettings
from idbridge.domain.repository.cache import CacheStore, Compute

from .base import Service


def _canonical(value: Any) -> Any:
    """Reduce arguments to plain JSON data with a stable shape."""
    if isinstance(value, BaseModel):
        return _canonical(value.model_dump(mode="json"))
    if isinstance(value, dict):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class IdentityCache(Service):
    """Keyed read-through cache in front of the identity directory.

    Listing reads (find_many, query, search, e-mail lookups) are cached
    for ``ttl_seconds``. Per-identity entries never expire; they are
    dropped explicitly after every write to that identity.
    """

    def __init__(self, store: CacheStore, settings: CacheSettings) -> None:
        """Initialize identity cache.

        Args:
            store: Backing cache store
            settings: Cache settings (TTL, key prefix)
        """
        self.store = store
        self.settings = settings

    def cache_key(self, operation: str, arguments: Sequence[Any]) -> str:
        """Deterministic key for an operation and its arguments.

        Args:
            operation: Operation name, e.g. ``"find_many"``
            arguments: Positional arguments of the call

        Returns:
            ``{prefix}:{operation}:{sha256 of canonical JSON}``
        """
        payload = json.dumps(
            _canonical(list(arguments)), sort_keys=True, separators=(",", ":")
        )
        digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
        return f"{self.settings.key_prefix}:{operation}:{digest}"

    def identity_key(self, uid: str) -> str:
        return f"{self.settings.key_prefix}:identity:{uid}"

    def email_key(self, email: str) -> str:
        return f"{self.settings.key_prefix}:email:{email.lower()}"

    async def remember(
        self,
        operation: str,
        arguments: Sequence[Any],
        compute: Compute,
        use_cache: bool = True,
    ) -> Any:
        """Cached read with the configured TTL.

        Args:
            operation: Operation name
            arguments: Arguments identifying the result
            compute: Live read, run on a miss
            use_cache: False runs ``compute`` without touching the entry

        Returns:
            Cached or live result
        """
        if not use_cache:
            return await compute()

        key = self.cache_key(operation, arguments)
        with logfire.span("identity_cache.remember", operation=operation, key=key):
            return await self.store.remember(key, self.settings.ttl_seconds, compute)

    async def remember_key(self, key: str, compute: Compute) -> Any:
        """Cached read under an explicit key with the configured TTL."""
        return await self.store.remember(key, self.settings.ttl_seconds, compute)

    async def remember_identity(self, uid: str, compute: Compute) -> Any:
        """Per-identity read, held until the identity is written.

        A missing identity (None) is not cached.
        """
        with logfire.span("identity_cache.remember_identity", uid=uid):
            return await self.store.remember_forever(self.identity_key(uid), compute)

    async def forget_identity(self, uid: str | None) -> None:
        """Drop the per-identity entry of uid, if any."""
        if not uid:
            return
        removed = await self.store.forget(self.identity_key(uid))
        if removed:
            logfire.info("Identity cache entry dropped", uid=uid)

    async def forget_key(self, key: str) -> None:
        await self.store.forget(key)

    async def forget(self, operation: str, arguments: Sequence[Any]) -> None:
        """Drop a cached listing read."""
        await self.store.forget(self.cache_key(operation, arguments))
