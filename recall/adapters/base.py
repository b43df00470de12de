"""Storage adapter contract.

Every backend the cache client can sit on implements the same small async
surface. Usage:

    from recall.adapters import create_adapter

    adapter = create_adapter(settings)
    await adapter.startup()
    await adapter.put(key, value, ttl=60_000)
    result = await adapter.get(key)
"""

from typing import Any, Dict, Protocol, runtime_checkable

from recall.models.cache import CacheResult, TTL


@runtime_checkable
class CacheAdapterProtocol(Protocol):
    """Protocol for cache backends (enables duck typing).

    Contract:
    - get never raises for a missing key; it returns CacheResult.miss()
    - put never fails on an invalid TTL; it falls back to the default TTL
    - delete and clear are idempotent
    """

    name: str

    async def startup(self) -> None:
        """Prepare the backend. Raise AdapterStartupError if it cannot start."""
        ...

    async def shutdown(self) -> None:
        """Release the backend's resources."""
        ...

    async def get(self, key: str) -> CacheResult:
        """Look up a key."""
        ...

    async def put(self, key: str, value: Any, ttl: TTL = None) -> None:
        """Store a value, overwriting any existing entry."""
        ...

    async def delete(self, key: str) -> None:
        """Remove a key if present."""
        ...

    async def clear(self) -> None:
        """Remove every entry owned by this backend."""
        ...

    def stats(self) -> Dict[str, Any]:
        """Backend counters for health reporting."""
        ...
