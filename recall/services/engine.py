"""Cache engine lifecycle.

The engine owns the settings, the storage adapter and the sweeper. It is
constructed and started once; clients are handed out only while it runs.
Shutdown stops the sweeper and discards the adapter (no persistence).
"""

import time
from typing import Any, Dict, Optional

from recall.adapters import create_adapter
from recall.adapters.base import CacheAdapterProtocol
from recall.core.config import Settings
from recall.core.exceptions import AdapterStartupError, EngineNotStartedError
from recall.core.logging import get_logger
from recall.core.sweeper import Sweeper
from recall.models.cache import DEFAULT_NAMESPACE, TTL
from recall.services.client import CacheClient

logger = get_logger(__name__)


class CacheEngine:
    """One configured cache: adapter plus background sweeper."""

    def __init__(self, settings: Optional[Settings] = None,
                 adapter: Optional[CacheAdapterProtocol] = None):
        self.settings = settings or Settings()
        self._adapter_override = adapter
        self._adapter: Optional[CacheAdapterProtocol] = None
        self._sweeper: Optional[Sweeper] = None
        self._started_at: float = 0.0

    @property
    def is_running(self) -> bool:
        return self._adapter is not None

    @property
    def adapter(self) -> CacheAdapterProtocol:
        if self._adapter is None:
            raise EngineNotStartedError("Cache engine is not running; call startup() first")
        return self._adapter

    @property
    def sweeper(self) -> Optional[Sweeper]:
        return self._sweeper

    async def startup(self) -> None:
        """Start the adapter and, for stores that need it, the sweeper."""
        if self.is_running:
            logger.warning("Cache engine already running")
            return

        adapter = (self._adapter_override if self._adapter_override is not None
                   else create_adapter(self.settings))
        log = logger.bind(adapter=adapter.name)
        try:
            await adapter.startup()
        except AdapterStartupError:
            raise
        except Exception as e:
            log.error("Cache adapter failed to start", error=str(e))
            raise AdapterStartupError(adapter.name, str(e)) from e

        self._adapter = adapter
        self._started_at = time.monotonic()

        if hasattr(adapter, "purge_expired"):
            self._sweeper = Sweeper(adapter, interval=self.settings.sweep_interval_seconds)
            await self._sweeper.start()

        log.info("Cache engine started",
                 default_ttl=self.settings.default_ttl,
                 sweep_interval_ms=self.settings.sweep_interval)

    async def shutdown(self) -> None:
        """Stop the sweeper and discard the adapter."""
        if not self.is_running:
            return

        if self._sweeper:
            await self._sweeper.stop()
            self._sweeper = None

        adapter, self._adapter = self._adapter, None
        await adapter.shutdown()
        logger.bind(adapter=adapter.name).info("Cache engine stopped")

    def client(self, ttl: TTL = None, name: Any = DEFAULT_NAMESPACE) -> CacheClient:
        """Create a cache client bound to this engine's adapter."""
        return CacheClient(self.adapter, ttl=ttl, name=name)

    def health(self) -> Dict[str, Any]:
        """Health snapshot for monitoring."""
        if not self.is_running:
            return {"status": "stopped", "adapter": self.settings.adapter}

        return {
            "status": "running",
            "adapter": self._adapter.name,
            "uptime_seconds": round(time.monotonic() - self._started_at, 3),
            "sweeper_running": bool(self._sweeper and self._sweeper.is_running),
            "stats": self._adapter.stats(),
        }

    async def __aenter__(self) -> "CacheEngine":
        await self.startup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()
