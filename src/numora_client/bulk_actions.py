"""
Bulk Action Orchestrator - close one position or close everything.

The backend owns per-item atomicity for close-all: the client sends a single
request, renders the returned partition and refetches. It never fans out,
parallelizes or retries individual closes itself.

Example usage:
    async with NumoraClient.from_env() as client:
        actions = BulkActionOrchestrator(client, Notifier())
        if not actions.is_pending:
            summary = await actions.close_all()
"""

import logging
from typing import Optional, TYPE_CHECKING

from .adapters import UnsupportedVenueError
from .http_client import HttpClientError
from .models.actions import BulkCloseSummary, CloseOutcome, CloseResult
from .models.positions import Exchange
from .notifications import Notifier
from .utils import strip_display_symbol

if TYPE_CHECKING:
    from .dashboard_client import NumoraClient

logger = logging.getLogger(__name__)


class BulkActionOrchestrator:
    """Runs close actions and reports one toast per action."""

    def __init__(self, client: "NumoraClient", notifier: Notifier):
        self._client = client
        self._notifier = notifier
        self._in_flight = 0

    @property
    def is_pending(self) -> bool:
        """Advisory flag for disabling the trigger control while a close runs."""
        return self._in_flight > 0

    async def close_one(self, exchange: Exchange, symbol: str) -> CloseResult:
        """
        Close a single position by its venue-native symbol.

        Raises:
            UnsupportedVenueError: If the venue is not Hyperliquid. No request is sent.
        """
        if exchange is not Exchange.HYPERLIQUID:
            raise UnsupportedVenueError(
                f"Closing positions is only supported on hyperliquid, not {exchange.value}"
            )

        display = strip_display_symbol(symbol)
        self._in_flight += 1
        try:
            await self._client.close_position(symbol)
        except HttpClientError as e:
            logger.error(f"Failed to close position {symbol}: {e}")
            self._notifier.error("Close Failed", str(e) or f"Failed to close {display}")
            return CloseResult(symbol, CloseOutcome.FAILED, str(e))
        finally:
            self._in_flight -= 1

        self._notifier.notify("Position Closed", f"Successfully closed {display} position")
        await self._refresh()
        return CloseResult(symbol, CloseOutcome.CLOSED)

    async def close_all(self) -> Optional[BulkCloseSummary]:
        """
        Close every Hyperliquid position and cancel every resting order.

        Returns:
            The backend's partition, or None when the request itself failed.
            On total failure nothing is known to have succeeded, so local
            state is left untouched and no refetch is triggered.
        """
        self._in_flight += 1
        try:
            summary = await self._client.close_all()
        except HttpClientError as e:
            logger.error(f"Close-all request failed: {e}")
            self._notifier.error("Close All Failed", str(e) or "Failed to close all positions")
            return None
        finally:
            self._in_flight -= 1

        logger.info(
            f"Close-all finished: {len(summary.closed_positions)} closed, "
            f"{len(summary.cancelled_orders)} cancelled, {len(summary.errors)} errors"
        )
        for failure in summary.errors:
            logger.warning(f"Close-all item failed: {failure.target}: {failure.error_message}")

        if summary.has_errors:
            self._notifier.error("Close All Completed With Errors", summary.toast_text())
        else:
            self._notifier.notify("Close All Complete", summary.toast_text())

        await self._refresh()
        return summary

    async def _refresh(self) -> None:
        """Invalidate and refetch positions and orders."""
        self._client.state.invalidate_trading()
        try:
            await self._client.refresh_trading()
        except HttpClientError as e:
            # The next polling cycle picks the new state up
            logger.warning(f"Refetch after close failed: {e}")
