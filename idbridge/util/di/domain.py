"""Domain layer DI providers."""

from dishka import Scope, provide

from idbridge.config import CacheSettings
from idbridge.domain.repository import (
    AccountRepository,
    CacheStore,
    IdentityDirectory,
)
from idbridge.domain.service import AccountService, IdentityCache, IdentitySyncHook
from idbridge.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_identity_cache(
        self, store: CacheStore, cache_settings: CacheSettings
    ) -> IdentityCache:
        """Provide read-through identity cache."""
        return IdentityCache(store=store, settings=cache_settings)

    @provide
    def get_identity_sync_hook(
        self, directory: IdentityDirectory, identity_cache: IdentityCache
    ) -> IdentitySyncHook:
        """Provide account/identity synchronization hook."""
        return IdentitySyncHook(directory=directory, identity_cache=identity_cache)

    @provide
    def get_account_service(
        self,
        account_repository: AccountRepository,
        directory: IdentityDirectory,
        identity_cache: IdentityCache,
        sync_hook: IdentitySyncHook,
    ) -> AccountService:
        """Provide account domain service.

        The synchronization hook is attached to the request's repository
        here, so every account the service touches stays in step with the
        directory.
        """
        sync_hook.attach(account_repository)
        return AccountService(
            account_repository=account_repository,
            directory=directory,
            identity_cache=identity_cache,
        )
