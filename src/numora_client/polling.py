"""
Refresh loops - one independent polling task per cache.

Loops are not coordinated: positions, protective orders and balances each
refresh on their own interval, and a failed cycle only waits for the next.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .http_client import HttpClientError

logger = logging.getLogger(__name__)


class RefreshLoop:
    """Calls ``refresh`` every ``interval`` seconds until stopped."""

    def __init__(self, name: str, interval: float, refresh: Callable[[], Awaitable[None]]):
        if interval <= 0:
            raise ValueError(f"Refresh interval must be positive, got {interval}")

        self.name = name
        self.interval = interval
        self._refresh = refresh
        self.running = False
        self.task: Optional[asyncio.Task] = None
        self.cycles = 0
        self.failures = 0

    async def start(self):
        """Start polling; the first refresh runs immediately."""
        if self.running:
            return
        self.running = True
        self.task = asyncio.create_task(self._loop())
        logger.info(f"[{self.name}] Refresh loop started (every {self.interval}s)")

    async def stop(self):
        """Stop polling and wait for the task to finish."""
        self.running = False

        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
            self.task = None

        logger.info(f"[{self.name}] Refresh loop stopped")

    async def _loop(self):
        while self.running:
            try:
                await self._refresh()
            except (HttpClientError, asyncio.TimeoutError) as e:
                self.failures += 1
                logger.warning(f"[{self.name}] Refresh failed: {e}")
            self.cycles += 1

            if self.running:
                await asyncio.sleep(self.interval)
