"""
Prediction-market order entry.

The submit handler validates the order, runs the balance guard against the
latest cached Polygon balances and either places the order or opens the
bridging widget for whatever is missing. Gas is always bridged before
USDC. The user clicks submit again once bridging is done; nothing here
waits for the bridge.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, TYPE_CHECKING, Union

from .balance_guard import BalanceGuard
from .bridge_launcher import BridgeLauncher, PopupBlocked, PopupHandle
from .http_client import HttpClientError
from .models.bridge import BridgeAsset
from .models.orders import OrderResponse, PredictionOrder
from .models.wallet import BalanceCheckResult, EmbeddedWallet
from .notifications import Notifier

if TYPE_CHECKING:
    from .dashboard_client import NumoraClient

logger = logging.getLogger(__name__)

BRIDGE_TOAST_DURATION_MS = 10000


class SubmitStatus(Enum):
    INVALID = "invalid"
    GATED = "gated"
    PLACED = "placed"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmitResult:
    """What happened to one press of the submit button."""
    status: SubmitStatus
    check: Optional[BalanceCheckResult] = None
    popup: Optional[Union[PopupHandle, PopupBlocked]] = None
    response: Optional[OrderResponse] = None


def bridge_instructions(check: BalanceCheckResult) -> str:
    """Toast text shown once the bridging widget is open."""
    asset = check.bridge_asset
    amount = check.bridge_amount

    if check.needs_matic and check.needs_usdc:
        return (
            f"Bridge {amount:.4f} MATIC for gas first, then click Place Order again "
            f"to bridge {check.required_usdc_amount:.2f} USDC."
        )

    if asset is BridgeAsset.MATIC:
        return (
            f"Bridge {amount:.4f} MATIC for gas fees to complete your trade. "
            f"Balances refresh every 10 seconds."
        )
    return f"Bridge {amount:.2f} USDC to complete your trade. Balances refresh every 10 seconds."


class PredictionOrderEntry:
    """Submit handler for Polymarket orders."""

    def __init__(
        self,
        client: "NumoraClient",
        notifier: Notifier,
        launcher: Optional[BridgeLauncher] = None,
        guard: Optional[BalanceGuard] = None,
    ):
        self._client = client
        self._notifier = notifier
        self._launcher = launcher or BridgeLauncher()
        self._guard = guard or BalanceGuard()
        self._wallet: Optional[EmbeddedWallet] = None

    def _validate(self, order: PredictionOrder) -> bool:
        if not order.token_id:
            self._notifier.error("Invalid Market", "Market data unavailable. Please try another market.")
            return False
        if order.size <= 0:
            self._notifier.error("Invalid Size", "Please enter a valid order size")
            return False
        if not (Decimal("0") < order.price <= Decimal("1")):
            self._notifier.error("Invalid Price", "Price must be between 0 and 1")
            return False
        return True

    async def _embedded_wallet(self) -> Optional[EmbeddedWallet]:
        if self._wallet is None:
            try:
                self._wallet = await self._client.get_embedded_wallet()
            except HttpClientError as e:
                logger.warning(f"Could not load embedded wallet: {e}")
                return None
        return self._wallet

    async def submit(self, order: PredictionOrder) -> SubmitResult:
        if not self._validate(order):
            return SubmitResult(SubmitStatus.INVALID)

        check = self._guard.check_and_maybe_gate(
            order.required_usdc, self._client.state.balances.value
        )
        if not check.sufficient:
            popup = await self._open_bridge(check)
            return SubmitResult(SubmitStatus.GATED, check=check, popup=popup)

        try:
            response = await self._client.place_prediction_order(order)
        except (HttpClientError, ValueError) as e:
            logger.error(f"Failed to place {order.outcome} order on {order.token_id}: {e}")
            self._notifier.error("Order Failed", str(e) or "Failed to place order")
            return SubmitResult(SubmitStatus.FAILED, check=check)

        self._notifier.notify("Order Placed", f"{order.outcome} order placed successfully")
        return SubmitResult(SubmitStatus.PLACED, check=check, response=response)

    async def _open_bridge(self, check: BalanceCheckResult) -> Optional[Union[PopupHandle, PopupBlocked]]:
        """Open the bridge for the gating asset; emits the one toast for this submit."""
        shortfall = check.shortfall()

        wallet = await self._embedded_wallet()
        if wallet is None or not wallet.polygon_address:
            logger.warning(f"Bridge not opened, no Polygon deposit address ({check.message()})")
            self._notifier.error(
                "No Polygon Deposit Address",
                f"{shortfall}. Your Polygon deposit address is not available yet, try again shortly.",
            )
            return None

        popup = self._launcher.open(wallet.polygon_address, check.bridge_asset, check.bridge_amount)
        if isinstance(popup, PopupBlocked):
            self._notifier.error("Popup Blocked", f"{shortfall}. {popup.message}")
        else:
            self._notifier.notify(
                "Bridge Opened",
                f"{shortfall}. {bridge_instructions(check)}",
                duration_ms=BRIDGE_TOAST_DURATION_MS,
            )
        return popup
