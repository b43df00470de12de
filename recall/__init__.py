"""recall - process-local cache-or-compute with TTL expiration.

    from recall import CacheEngine, Settings

    async with CacheEngine(Settings(default_ttl=60_000)) as engine:
        cache = engine.client(name="users")
        user = await cache.fetch(("user", 123), lambda: load_user(123), ttl=5_000)
"""

from recall.adapters import CacheAdapterProtocol, MemoryAdapter, RedisAdapter, create_adapter
from recall.core.config import Settings
from recall.core.exceptions import AdapterStartupError, CacheError, EngineNotStartedError
from recall.core.sweeper import Sweeper
from recall.models.cache import (
    DEFAULT_NAMESPACE,
    NEVER,
    CacheEntry,
    CacheResult,
    build_cache_key,
    resolve_ttl,
)
from recall.services import CacheClient, CacheEngine

__all__ = [
    "AdapterStartupError",
    "CacheAdapterProtocol",
    "CacheClient",
    "CacheEngine",
    "CacheEntry",
    "CacheError",
    "CacheResult",
    "DEFAULT_NAMESPACE",
    "EngineNotStartedError",
    "MemoryAdapter",
    "NEVER",
    "RedisAdapter",
    "Settings",
    "Sweeper",
    "build_cache_key",
    "create_adapter",
    "resolve_ttl",
]
