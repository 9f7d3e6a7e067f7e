"""Identity directory infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import httpx

from idbridge.adapter.directory import IdentityDirectoryClient
from idbridge.adapter.identitytoolkit import IdentityToolkitClient
from idbridge.config import DirectorySettings
from idbridge.domain.repository import IdentityDirectory
from idbridge.domain.service import IdentityCache
from idbridge.util.di.base import ProviderBase
from idbridge.util.observability import instrument_httpx


class DirectoryProvider(ProviderBase):
    """Identity directory component base."""

    __mock_component__ = "directory"


class ProdDirectoryProvider(DirectoryProvider):
    """Production directory provider (Firebase Authentication)."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_http_client(
        self, directory_settings: DirectorySettings
    ) -> AsyncIterator[httpx.AsyncClient]:
        """Provide shared HTTP client, closed on container close."""
        instrument_httpx()
        async with httpx.AsyncClient(timeout=directory_settings.timeout) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_toolkit_client(
        self, http: httpx.AsyncClient, directory_settings: DirectorySettings
    ) -> IdentityToolkitClient:
        """Provide Identity Toolkit REST client."""
        return IdentityToolkitClient(http=http, settings=directory_settings)

    @provide(scope=Scope.REQUEST)
    def get_identity_directory(
        self,
        toolkit: IdentityToolkitClient,
        identity_cache: IdentityCache,
        directory_settings: DirectorySettings,
    ) -> IdentityDirectory:
        """Provide identity directory client."""
        return IdentityDirectoryClient(
            toolkit=toolkit,
            identity_cache=identity_cache,
            settings=directory_settings,
        )
