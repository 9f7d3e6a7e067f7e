"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container

from idbridge.config import Settings
from idbridge.util.di import PROVIDERS, get_provider
from idbridge.util.logging import get_logger, setup_logging
from idbridge.util.observability import configure_logfire

logger = get_logger(__name__)


def create_container() -> AsyncContainer:
    """Build production container (all prod implementations).

    Settings are loaded from environment variables automatically.

    Returns:
        Configured DI container with production providers
    """
    # Get provider instances - all are instantiated without arguments
    provider_instances = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(*provider_instances)


def bootstrap(settings: Settings | None = None) -> AsyncContainer:
    """Configure logging and observability, then build the container.

    Args:
        settings: Settings to configure from (loaded from environment if None)

    Returns:
        Production DI container
    """
    settings = settings or Settings()
    setup_logging(settings)
    configure_logfire(settings)
    logger.info("Building container for %s", settings.environment)
    return create_container()
