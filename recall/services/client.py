"""Cache-or-compute client.

A CacheClient is bound to one adapter and a set of default options. It turns
(name, term) pairs into cache keys and implements fetch: return the cached
value on a hit, otherwise run the computation, store the result and return it.

Options resolve per call, then per client, then per engine. Passing None for
ttl or name means "not given" at every level, so fetch(..., ttl=None) uses
the client's TTL, and a client without a TTL uses the adapter default.

fetch is not atomic across get/compute/put. Two concurrent fetches that both
miss on the same key will both compute and both put; the last put wins.
"""

import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from recall.adapters.base import CacheAdapterProtocol
from recall.core.logging import get_logger
from recall.models.cache import DEFAULT_NAMESPACE, CacheResult, TTL, build_cache_key

logger = get_logger(__name__)

Compute = Callable[[], Union[Any, Awaitable[Any]]]


class CacheClient:
    """Cache operations over a single adapter with per-client defaults."""

    def __init__(self, adapter: CacheAdapterProtocol, ttl: TTL = None,
                 name: Any = DEFAULT_NAMESPACE):
        self.adapter = adapter
        self.default_ttl = ttl
        self.name = DEFAULT_NAMESPACE if name is None else name

    def _key(self, term: Any, name: Any) -> str:
        return build_cache_key(term, self.name if name is None else name)

    def _ttl(self, ttl: TTL) -> TTL:
        return self.default_ttl if ttl is None else ttl

    async def fetch(self, term: Any, compute: Compute, *, ttl: TTL = None,
                    force: bool = False, name: Any = None) -> Any:
        """Return the cached value for term, computing and storing it on a miss.

        Args:
            term: Caller-supplied key term (any value; hashed into a cache key)
            compute: Zero-argument callable; may return a value or an awaitable
            ttl: Milliseconds or NEVER; None falls back to the client's TTL
            force: Delete the entry first so compute always runs
            name: Namespace mixed into the key; None uses the client's

        Returns:
            The cached or freshly computed value

        Exceptions raised by compute propagate unchanged and nothing is stored.
        """
        key = self._key(term, name)

        if force:
            await self.adapter.delete(key)

        result = await self.adapter.get(key)
        if result.found:
            return result.value

        value = compute()
        if inspect.isawaitable(value):
            value = await value

        await self.adapter.put(key, value, ttl=self._ttl(ttl))
        logger.debug("Computed and cached value", cache_key=key, forced=force)
        return value

    async def get(self, term: Any, *, name: Any = None) -> CacheResult:
        return await self.adapter.get(self._key(term, name))

    async def put(self, term: Any, value: Any, *, ttl: TTL = None,
                  name: Any = None) -> None:
        await self.adapter.put(self._key(term, name), value, ttl=self._ttl(ttl))

    async def delete(self, term: Any, *, name: Any = None) -> None:
        await self.adapter.delete(self._key(term, name))

    async def clear(self) -> None:
        """Remove every entry in the adapter, across all namespaces."""
        await self.adapter.clear()

    def with_options(self, ttl: TTL = None, name: Any = None,
                     adapter: Optional[CacheAdapterProtocol] = None) -> "CacheClient":
        """Return a client with different defaults, optionally over another adapter.

        Options left as None keep this client's values.
        """
        return CacheClient(
            self.adapter if adapter is None else adapter,
            ttl=self._ttl(ttl),
            name=self.name if name is None else name,
        )
