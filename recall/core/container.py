"""Dependency injection container for the cache engine."""

from dependency_injector import containers, providers

from recall.core.config import Settings
from recall.core.logging import configure_logging
from recall.services.engine import CacheEngine


class Container(containers.DeclarativeContainer):
    """Cache dependency injection container."""

    # Settings
    settings = providers.Singleton(
        Settings,
    )

    # Logging (call container.init_resources() once at startup)
    logging = providers.Resource(
        configure_logging,
        settings=settings,
    )

    # Engine (one configured cache per container)
    engine = providers.Singleton(
        CacheEngine,
        settings=settings,
    )


# Global container instance
container = Container()
