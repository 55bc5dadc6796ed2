"""
API method implementations for Numora client.

Contains all backend endpoint implementations organized by functional area.
Follows state-first design with pure functions for data transformation.
"""

import logging
import time
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from aiohttp import ClientSession

from .constants import (
    CLOSE_ALL_ENDPOINT,
    CLOSE_POSITION_ENDPOINT,
    EMBEDDED_WALLET_ENDPOINT,
    OPEN_ORDERS_ENDPOINT,
    POSITIONS_ENDPOINTS,
    PREDICTION_ORDER_ENDPOINT,
    WALLET_BALANCES_ENDPOINT,
)
from .http_client import HttpClient
from .models.actions import BulkCloseSummary, CloseOutcome, CloseResult
from .models.orders import OrderResponse, PredictionOrder
from .models.positions import Exchange
from .models.wallet import BalanceSnapshot, ChainBalance, EmbeddedWallet
from .utils import parse_decimal, safe_get

logger = logging.getLogger(__name__)

# Key holding the native gas token balance, per chain
NATIVE_BALANCE_KEYS = {
    "polygon": ("matic", "pol"),
    "solana": ("sol",),
    "arbitrum": ("eth",),
    "ethereum": ("eth",),
    "bnb": ("bnb",),
}


def _entry_target(entry: Any) -> Tuple[str, Optional[str]]:
    """Extract ``(target, error_message)`` from one close-all list entry."""
    if isinstance(entry, dict):
        target = entry.get("target") or entry.get("coin") or entry.get("oid") or ""
        error = entry.get("errorMessage") or entry.get("error")
        return str(target), str(error) if error is not None else None
    return str(entry), None


def _entry_key(entry: Any) -> Any:
    """Identity of one close-all list entry; only identical entries share a key."""
    if isinstance(entry, dict):
        return tuple(sorted((str(k), str(v)) for k, v in entry.items()))
    return str(entry)


def create_close_summary(results: Dict[str, Any]) -> BulkCloseSummary:
    """
    Build a BulkCloseSummary from a close-all ``results`` object.

    Entries may be bare identifiers (coin names, order ids, error strings) or
    objects with ``target``/``errorMessage``. A repeated identical entry
    within one list is counted once. Lists are never de-duplicated against
    each other: closing the BTC position and cancelling its BTC stop-loss
    are two targets.
    """
    def _partition(key: str, outcome: CloseOutcome) -> Tuple[CloseResult, ...]:
        seen = set()
        items = []
        for entry in results.get(key) or []:
            entry_key = _entry_key(entry)
            if entry_key in seen:
                continue
            seen.add(entry_key)

            target, error = _entry_target(entry)
            if outcome is CloseOutcome.FAILED:
                items.append(CloseResult(target, outcome, error if error is not None else target))
            else:
                items.append(CloseResult(target, outcome))
        return tuple(items)

    return BulkCloseSummary(
        closed_positions=_partition("closedPositions", CloseOutcome.CLOSED),
        cancelled_orders=_partition("cancelledOrders", CloseOutcome.CANCELLED_ORDER),
        errors=_partition("errors", CloseOutcome.FAILED),
    )


def create_balance_snapshot(data: Dict[str, Any]) -> BalanceSnapshot:
    """Build a BalanceSnapshot from a ``/api/wallets/balances`` response."""
    balances = safe_get(data, "balances", {}) or {}

    chains: Dict[str, ChainBalance] = {}
    for name, values in balances.items():
        if not isinstance(values, dict):
            continue
        usdc = parse_decimal(values.get("usdc"))
        if usdc is None:
            usdc = parse_decimal(values.get("withdrawable"))

        native = None
        for key in NATIVE_BALANCE_KEYS.get(name, ("native",)):
            native = parse_decimal(values.get(key))
            if native is not None:
                break

        chains[name] = ChainBalance(
            usdc=usdc if usdc is not None else Decimal("0"),
            native=native if native is not None else Decimal("0"),
        )

    return BalanceSnapshot(
        chains=chains,
        total_usd=parse_decimal(balances.get("totalUsd")),
        fetched_at=time.time(),
    )


class APIMethods:
    """Container for all backend method implementations."""

    def __init__(self, http_client: HttpClient):
        """Initialize API methods with HTTP client."""
        self._http_client = http_client

    async def get_raw_positions(self, session: ClientSession, exchange: Exchange) -> List[Dict[str, Any]]:
        """Get venue-native position records for one exchange."""
        endpoint = POSITIONS_ENDPOINTS[exchange.value]
        response = await self._http_client.request(session, "GET", endpoint)
        positions = safe_get(response, "positions", [])
        return list(positions) if isinstance(positions, list) else []

    async def get_open_orders(self, session: ClientSession) -> List[Dict[str, Any]]:
        """Get Hyperliquid open orders (with ``tpsl`` tags)."""
        response = await self._http_client.request(session, "GET", OPEN_ORDERS_ENDPOINT)
        orders = safe_get(response, "orders", [])
        return list(orders) if isinstance(orders, list) else []

    async def close_position(self, session: ClientSession, coin: str) -> Dict[str, Any]:
        """Close one Hyperliquid position by its venue-native coin."""
        if not coin:
            raise ValueError("Coin is required")

        return await self._http_client.request(
            session, "POST", CLOSE_POSITION_ENDPOINT, data={"coin": coin}, retry=False
        )

    async def close_all(self, session: ClientSession) -> BulkCloseSummary:
        """Close every Hyperliquid position and cancel every resting order."""
        response = await self._http_client.request(
            session, "POST", CLOSE_ALL_ENDPOINT, data={}, retry=False
        )
        return create_close_summary(safe_get(response, "results", {}) or {})

    async def get_balances(self, session: ClientSession) -> BalanceSnapshot:
        """Get embedded wallet balances per chain."""
        response = await self._http_client.request(session, "GET", WALLET_BALANCES_ENDPOINT)
        return create_balance_snapshot(response)

    async def get_embedded_wallet(self, session: ClientSession) -> EmbeddedWallet:
        """Get the user's custodial deposit addresses."""
        response = await self._http_client.request(session, "GET", EMBEDDED_WALLET_ENDPOINT)
        wallet = safe_get(response, "wallet", None)
        if wallet is None:
            wallet = response

        return EmbeddedWallet(
            hyperliquid_address=wallet.get("hyperliquidAddress"),
            polygon_address=wallet.get("polygonAddress"),
            solana_address=wallet.get("solanaAddress"),
            evm_address=wallet.get("evmAddress"),
            bnb_address=wallet.get("bnbAddress"),
        )

    async def place_prediction_order(self, session: ClientSession, order: PredictionOrder) -> OrderResponse:
        """Place a Polymarket order."""
        if not order.token_id:
            raise ValueError("Token ID is required")
        if order.size <= 0:
            raise ValueError(f"Invalid size: {order.size}")
        if not (Decimal("0") < order.price <= Decimal("1")):
            raise ValueError(f"Invalid price: {order.price}")

        response = await self._http_client.request(
            session, "POST", PREDICTION_ORDER_ENDPOINT, data=order.to_payload(), retry=False
        )
        order_data = safe_get(response, "order", {}) or {}

        order_id = order_data.get("orderID") or order_data.get("orderId")
        return OrderResponse(
            success=bool(response.get("success", True)),
            order_id=str(order_id) if order_id else None,
            status=order_data.get("status"),
            raw=response,
        )
