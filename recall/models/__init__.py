from .cache import (
    NEVER,
    DEFAULT_NAMESPACE,
    CacheEntry,
    CacheResult,
    build_cache_key,
    resolve_ttl,
)

__all__ = [
    "NEVER",
    "DEFAULT_NAMESPACE",
    "CacheEntry",
    "CacheResult",
    "build_cache_key",
    "resolve_ttl",
]
