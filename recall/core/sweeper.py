"""Periodic sweeper that purges expired cache entries.

Runs as a background task so stale entries do not pile up between reads.
Expiration is already enforced on read; the sweep only bounds memory.
"""

import asyncio
from typing import Optional, Protocol

from recall.core.logging import get_logger

logger = get_logger(__name__)


class SweepTarget(Protocol):
    async def purge_expired(self) -> int:
        ...


class Sweeper:
    """Background task that calls purge_expired() on a fixed interval."""

    def __init__(self, target: SweepTarget, interval: float = 5.0):
        """Initialize sweeper.

        Args:
            target: Store exposing purge_expired()
            interval: Seconds between sweep passes
        """
        self.target = target
        self.interval = interval
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the sweeper background task."""
        if self._running:
            logger.warning("Sweeper already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._sweep_loop())
        logger.info("Sweeper started", sweep_interval=self.interval)

    async def stop(self) -> None:
        """Stop the sweeper; safe to call when it is not running."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Sweeper stopped")

    async def _sweep_loop(self) -> None:
        """Main sweep loop - sleeps first, then purges."""
        while self._running:
            await asyncio.sleep(self.interval)
            try:
                await self.run_once()
            except Exception as e:
                logger.error("Sweep pass failed", error=str(e))

    async def run_once(self) -> int:
        """Run a single sweep pass and return the number of entries removed."""
        removed = await self.target.purge_expired()
        if removed:
            logger.debug("Sweep pass completed", removed=removed)
        return removed
