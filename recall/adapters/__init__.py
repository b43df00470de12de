"""Storage backends for the cache engine."""

from recall.core.config import Settings
from recall.core.logging import get_logger

from .base import CacheAdapterProtocol
from .memory import MemoryAdapter
from .redis import RedisAdapter

logger = get_logger(__name__)


def create_adapter(settings: Settings) -> CacheAdapterProtocol:
    """Factory function to create the configured storage adapter.

    Args:
        settings: Engine settings (adapter choice, default TTL, Redis options)

    Returns:
        MemoryAdapter or RedisAdapter, not yet started
    """
    if settings.adapter == "redis":
        logger.debug("Using Redis cache adapter", url=settings.redis_url)
        return RedisAdapter(
            url=settings.redis_url,
            key_prefix=settings.redis_key_prefix,
            default_ttl=settings.default_ttl,
        )
    logger.debug("Using in-memory cache adapter")
    return MemoryAdapter(default_ttl=settings.default_ttl)


__all__ = [
    "CacheAdapterProtocol",
    "MemoryAdapter",
    "RedisAdapter",
    "create_adapter",
]
