"""In-memory cache store with per-entry TTL.

Entries live in a plain dict guarded by one asyncio.Lock. Expiration is
enforced twice:
- actively, on get (an expired entry is deleted and reported as a miss)
- passively, by the Sweeper calling purge_expired() on an interval
"""

import asyncio
import time
from typing import Any, Callable, Dict, Union

from recall.core.logging import get_logger, log_cache_operation
from recall.models.cache import (
    CacheEntry,
    CacheResult,
    TTL,
    expires_at_for,
    resolve_ttl,
)

logger = get_logger(__name__)


class MemoryAdapter:
    """Process-local key/value store with TTL semantics.

    Mutations (put, delete, clear, expiry on read, sweep removal) are
    serialized on a single lock. Entries are immutable and replaced whole.
    """

    name = "memory"

    def __init__(self, default_ttl: Union[int, str] = 300_000,
                 clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0
        self._expired = 0
        self._swept = 0
        self._log = logger.bind(adapter=self.name)

    async def startup(self) -> None:
        self._log.debug("Memory store ready", default_ttl=self.default_ttl)

    async def shutdown(self) -> None:
        """Discard every entry; nothing outlives the engine."""
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
        self._log.debug("Memory store discarded", entries=count)

    async def get(self, key: str) -> CacheResult:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            log_cache_operation(self._log, "get", key, hit=False)
            return CacheResult.miss()

        if entry.is_expired(self._clock()):
            async with self._lock:
                # Only drop the entry we inspected; a concurrent put may have replaced it
                if self._entries.get(key) is entry:
                    del self._entries[key]
                    self._expired += 1
            self._misses += 1
            log_cache_operation(self._log, "get", key, hit=False, expired=True)
            return CacheResult.miss()

        self._hits += 1
        log_cache_operation(self._log, "get", key, hit=True)
        return CacheResult.hit(entry.value)

    async def put(self, key: str, value: Any, ttl: TTL = None) -> None:
        ttl_ms = resolve_ttl(ttl, self.default_ttl)
        async with self._lock:
            self._entries[key] = CacheEntry(
                value=value,
                expires_at=expires_at_for(ttl_ms, self._clock()),
            )
        log_cache_operation(self._log, "put", key, ttl=ttl_ms)

    async def delete(self, key: str) -> None:
        async with self._lock:
            deleted = self._entries.pop(key, None) is not None
        log_cache_operation(self._log, "delete", key, deleted=deleted)

    async def clear(self) -> None:
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
        log_cache_operation(self._log, "clear", "*", deleted=count)

    async def purge_expired(self) -> int:
        """Remove every entry whose expiry is at or before now.

        Candidates come from a snapshot taken without the lock; each removal
        then takes the lock for that one key and re-checks it, yielding to the
        event loop between removals.
        """
        now = self._clock()
        candidates = [
            (key, entry) for key, entry in list(self._entries.items())
            if entry.is_sweepable(now)
        ]

        removed = 0
        for key, entry in candidates:
            async with self._lock:
                if self._entries.get(key) is entry:
                    del self._entries[key]
                    removed += 1
            await asyncio.sleep(0)

        self._swept += removed
        if removed:
            self._log.debug("Purged expired entries", count=removed, remaining=len(self._entries))
        return removed

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Raw membership, ignoring expiry (reflects what the sweeper has removed)."""
        return key in self._entries

    def stats(self) -> Dict[str, Any]:
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "expired_on_read": self._expired,
            "swept": self._swept,
        }
