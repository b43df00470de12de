"""Redis-backed cache adapter.

Wraps redis.asyncio behind the adapter contract. Redis owns expiration
(PX milliseconds), so no sweeper is attached. Every key is stored under
a prefix and clear() only touches that prefix.

Values are written with recall.models.codec so tuples, dates, sets and the
like come back with their original type; unsupported types are not stored.
Transport or server errors on get are reported as a miss; errors on
put/delete/clear are logged, not raised.
"""

from typing import Any, Dict, Optional, Union

import redis.asyncio as redis

from recall.core.exceptions import AdapterStartupError
from recall.core.logging import get_logger, log_cache_operation
from recall.models import codec
from recall.models.cache import CacheResult, TTL, resolve_ttl

logger = get_logger(__name__)


class RedisAdapter:
    """Cache adapter over a Redis server."""

    name = "redis"

    def __init__(self, url: str = "redis://localhost:6379/0",
                 key_prefix: str = "recall:",
                 default_ttl: Union[int, str] = 300_000,
                 client: Optional[redis.Redis] = None):
        self.url = url
        self.key_prefix = key_prefix
        self.default_ttl = default_ttl
        self.redis: Optional[redis.Redis] = client
        self._errors = 0
        self._log = logger.bind(adapter=self.name, key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def startup(self) -> None:
        """Connect and ping; any failure is fatal to engine startup."""
        try:
            if self.redis is None:
                self.redis = redis.from_url(
                    self.url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_timeout=5,
                    socket_connect_timeout=5,
                    retry_on_timeout=True
                )
            await self.redis.ping()
        except Exception as e:
            self._log.error("Redis cache startup failed", url=self.url, error=str(e))
            raise AdapterStartupError(self.name, f"cannot connect to {self.url}: {e}") from e

        self._log.info("Redis cache initialized", url=self.url)

    async def shutdown(self) -> None:
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._log.info("Redis cache connections closed")

    async def get(self, key: str) -> CacheResult:
        try:
            raw = await self.redis.get(self._key(key))
        except Exception as e:
            self._errors += 1
            self._log.warning("Redis get failed, treating as miss", cache_key=key, error=str(e))
            return CacheResult.miss()

        if raw is None:
            log_cache_operation(self._log, "get", key, hit=False)
            return CacheResult.miss()

        try:
            value = codec.loads(raw)
        except (TypeError, ValueError, KeyError, IndexError) as e:
            self._errors += 1
            self._log.warning("Undecodable cache value, treating as miss", cache_key=key, error=str(e))
            return CacheResult.miss()

        log_cache_operation(self._log, "get", key, hit=True)
        return CacheResult.hit(value)

    async def put(self, key: str, value: Any, ttl: TTL = None) -> None:
        ttl_ms = resolve_ttl(ttl, self.default_ttl)
        try:
            serialized = codec.dumps(value)
        except TypeError as e:
            self._errors += 1
            self._log.warning("Value not cacheable, skipping put", cache_key=key, error=str(e))
            return

        try:
            if ttl_ms is None:
                await self.redis.set(self._key(key), serialized)
            else:
                await self.redis.set(self._key(key), serialized, px=ttl_ms)
            log_cache_operation(self._log, "put", key, ttl=ttl_ms)
        except Exception as e:
            self._errors += 1
            self._log.error("Redis put failed", cache_key=key, error=str(e))

    async def delete(self, key: str) -> None:
        try:
            deleted = await self.redis.delete(self._key(key))
            log_cache_operation(self._log, "delete", key, deleted=bool(deleted))
        except Exception as e:
            self._errors += 1
            self._log.error("Redis delete failed", cache_key=key, error=str(e))

    async def clear(self) -> None:
        """Delete every key under the prefix (SCAN, never FLUSHDB)."""
        try:
            keys = [k async for k in self.redis.scan_iter(match=f"{self.key_prefix}*")]
            deleted = await self.redis.delete(*keys) if keys else 0
            log_cache_operation(self._log, "clear", f"{self.key_prefix}*", deleted=deleted)
        except Exception as e:
            self._errors += 1
            self._log.error("Redis clear failed", error=str(e))

    def stats(self) -> Dict[str, Any]:
        return {
            "connected": self.redis is not None,
            "key_prefix": self.key_prefix,
            "errors": self._errors,
        }
