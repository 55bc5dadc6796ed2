"""
Venue position adapters.

One pure function per venue maps a venue-native position record onto the
unified ``Position`` model. Adapters never raise on bad data: a missing
optional field gets its default, a malformed field gets its default plus an
entry in ``Position.issues`` so the record is still shown and flagged.

Observed record shapes:

- Hyperliquid: ``{coin, szi, entryPx, positionValue, unrealizedPnl,
  returnOnEquity?, liquidationPx, leverage}`` either flat or nested under
  ``position`` (``assetPositions[]`` form). ``leverage`` is ``{type, value}``
  or a bare number.
- Orderly: camelCase (``positionQty``, ``averageOpenPrice``, ``markPrice``...)
  or snake_case (``position_qty``, ``average_open_price``, ``mark_price``...).
  Symbols look like ``PERP_ETH_USDC`` / ``SPOT_ETH_USDC``.
- Polymarket: unsigned ``size`` plus an explicit ``side`` (``BUY``/``SELL``).
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .models.positions import (
    Exchange,
    MarketType,
    Position,
    ProtectiveKind,
    ProtectiveOrder,
    Side,
)
from .utils import decimal_or_default, parse_decimal, strip_display_symbol

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class UnsupportedVenueError(ValueError):
    """Raised when an operation is requested for a venue that does not support it."""
    pass


class _FieldReader:
    """Reads aliased fields from one raw record and collects issues."""

    def __init__(self, raw: Any):
        if isinstance(raw, Mapping):
            self.raw: Mapping[str, Any] = raw
            self.issues: List[str] = []
        else:
            self.raw = {}
            self.issues = [f"record is not an object: {type(raw).__name__}"]

    def first(self, *keys: str) -> Tuple[Optional[str], Any]:
        for key in keys:
            if key in self.raw and self.raw[key] is not None:
                return key, self.raw[key]
        return None, None

    def text(self, *keys: str) -> Optional[str]:
        _, value = self.first(*keys)
        if value is None or value == "":
            return None
        return str(value)

    def decimal(self, *keys: str, default: Decimal = ZERO) -> Decimal:
        key, value = self.first(*keys)
        result, valid = decimal_or_default(value, default)
        if not valid:
            self.issues.append(f"malformed {key}: {value!r}")
        return result

    def optional_decimal(self, *keys: str) -> Optional[Decimal]:
        key, value = self.first(*keys)
        if value is None or value == "":
            return None
        result = parse_decimal(value)
        if result is None:
            self.issues.append(f"malformed {key}: {value!r}")
        return result


def normalize_leverage(raw: Any) -> Tuple[int, bool]:
    """
    Normalize a leverage field to a plain integer.

    Accepts a bare number, a numeric string or a ``{"type": ..., "value": N}``
    object. Returns ``(leverage, was_valid)``; missing or malformed input
    yields 1.
    """
    if raw is None:
        return 1, True

    value = raw.get("value") if isinstance(raw, Mapping) else raw
    parsed = parse_decimal(value)
    if parsed is None or parsed <= 0:
        return 1, False
    return max(int(parsed), 1), True


def side_from_signed_size(signed_size: Decimal) -> Side:
    """Long iff the signed size is strictly positive."""
    return Side.LONG if signed_size > 0 else Side.SHORT


def side_from_label(label: Optional[str]) -> Optional[Side]:
    """Map an explicit side string onto ``Side``; None when unrecognized."""
    if label is None:
        return None
    normalized = label.strip().lower()
    if normalized in ("long", "buy", "bid"):
        return Side.LONG
    if normalized in ("short", "sell", "ask"):
        return Side.SHORT
    return None


def split_orderly_symbol(symbol: str) -> Tuple[str, MarketType]:
    """``PERP_ETH_USDC`` -> (``ETH``, perpetual); ``SPOT_ETH_USDC`` -> (``ETH``, spot)."""
    parts = symbol.split("_")
    if len(parts) == 3 and parts[0] in ("PERP", "SPOT"):
        market_type = MarketType.SPOT if parts[0] == "SPOT" else MarketType.PERPETUAL
        return parts[1], market_type
    return strip_display_symbol(symbol), MarketType.PERPETUAL


def _roe_from_margin(unrealized_pnl: Decimal, position_value: Decimal, leverage: int) -> Decimal:
    margin = position_value / Decimal(leverage) if leverage > 0 else ZERO
    if margin <= 0:
        return ZERO
    return unrealized_pnl / margin


def _raw_symbol(reader: _FieldReader, *keys: str) -> str:
    symbol = reader.text(*keys)
    if symbol is None:
        reader.issues.append("missing symbol")
        return ""
    return symbol


def adapt_hyperliquid(raw: Any) -> Position:
    """Adapt a Hyperliquid clearinghouse position."""
    if isinstance(raw, Mapping) and isinstance(raw.get("position"), Mapping):
        raw = raw["position"]
    reader = _FieldReader(raw)

    raw_symbol = _raw_symbol(reader, "coin")
    signed_size = reader.decimal("szi")
    size = abs(signed_size)
    entry_price = reader.decimal("entryPx")
    unrealized_pnl = reader.decimal("unrealizedPnl")
    reported_value = reader.optional_decimal("positionValue")

    leverage, valid = normalize_leverage(reader.raw.get("leverage"))
    if not valid:
        reader.issues.append(f"malformed leverage: {reader.raw.get('leverage')!r}")

    current_price = reader.optional_decimal("markPx")
    if current_price is None:
        if reported_value is not None and size > 0:
            current_price = reported_value / size
        else:
            current_price = entry_price
    position_value = reported_value if reported_value is not None else size * current_price

    roe = reader.optional_decimal("returnOnEquity")
    if roe is None:
        roe = _roe_from_margin(unrealized_pnl, position_value, leverage)

    return Position(
        symbol=strip_display_symbol(raw_symbol) or "UNKNOWN",
        raw_symbol=raw_symbol,
        exchange=Exchange.HYPERLIQUID,
        market_type=MarketType.PERPETUAL,
        side=side_from_signed_size(signed_size),
        size=size,
        entry_price=entry_price,
        current_price=current_price,
        position_value=position_value,
        unrealized_pnl=unrealized_pnl,
        roe=roe,
        leverage=leverage,
        liquidation_price=reader.optional_decimal("liquidationPx"),
        protection_applicable=True,
        issues=tuple(reader.issues),
    )


def adapt_orderly(raw: Any) -> Position:
    """Adapt an Orderly position row."""
    reader = _FieldReader(raw)

    raw_symbol = _raw_symbol(reader, "symbol")
    display_symbol, market_type = split_orderly_symbol(raw_symbol)
    signed_size = reader.decimal("positionQty", "position_qty")
    size = abs(signed_size)
    entry_price = reader.decimal("averageOpenPrice", "average_open_price")
    current_price = reader.decimal("markPrice", "mark_price")
    unrealized_pnl = reader.decimal("unrealizedPnl", "unrealized_pnl", "unsettledPnl", "unsettled_pnl")

    leverage_raw = reader.first("leverage")[1]
    leverage, valid = normalize_leverage(leverage_raw)
    if not valid:
        reader.issues.append(f"malformed leverage: {leverage_raw!r}")

    position_value = size * current_price
    liquidation_price = None
    if market_type is MarketType.PERPETUAL:
        liquidation_price = reader.optional_decimal(
            "liquidationPrice", "est_liq_price", "estLiqPrice"
        )

    return Position(
        symbol=display_symbol or "UNKNOWN",
        raw_symbol=raw_symbol,
        exchange=Exchange.ORDERLY,
        market_type=market_type,
        side=side_from_signed_size(signed_size),
        size=size,
        entry_price=entry_price,
        current_price=current_price,
        position_value=position_value,
        unrealized_pnl=unrealized_pnl,
        roe=_roe_from_margin(unrealized_pnl, position_value, leverage),
        leverage=leverage,
        liquidation_price=liquidation_price,
        protection_applicable=False,
        issues=tuple(reader.issues),
    )


def adapt_polymarket(raw: Any) -> Position:
    """Adapt a Polymarket outcome-token position."""
    reader = _FieldReader(raw)

    raw_symbol = _raw_symbol(reader, "asset_id", "asset")
    display_symbol = reader.text("marketQuestion", "title") or raw_symbol

    size = abs(reader.decimal("size"))
    label = reader.text("side")
    side = side_from_label(label)
    if side is None:
        if label is None:
            reader.issues.append("missing side")
        else:
            reader.issues.append(f"unrecognized side: {label!r}")
        side = Side.LONG

    entry_price = reader.decimal("averagePrice", "avgPrice", "entryPrice")
    current_price = reader.decimal("curPrice", "price", default=entry_price)
    unrealized_pnl = reader.decimal("unrealizedPnl", "cashPnl")

    position_value = reader.optional_decimal("currentValue")
    if position_value is None:
        position_value = size * current_price

    cost_basis = size * entry_price
    roe = unrealized_pnl / cost_basis if cost_basis > 0 else ZERO

    return Position(
        symbol=display_symbol or "UNKNOWN",
        raw_symbol=raw_symbol,
        exchange=Exchange.POLYMARKET,
        market_type=MarketType.PREDICTION,
        side=side,
        size=size,
        entry_price=entry_price,
        current_price=current_price,
        position_value=position_value,
        unrealized_pnl=unrealized_pnl,
        roe=roe,
        leverage=1,
        liquidation_price=None,
        protection_applicable=False,
        issues=tuple(reader.issues),
    )


_ADAPTERS: Dict[Exchange, Callable[[Any], Position]] = {
    Exchange.HYPERLIQUID: adapt_hyperliquid,
    Exchange.ORDERLY: adapt_orderly,
    Exchange.POLYMARKET: adapt_polymarket,
}


def adapt(exchange: Exchange, raw_record: Any) -> Position:
    """Map one venue-native record onto ``Position``."""
    adapter = _ADAPTERS.get(exchange)
    if adapter is None:
        raise UnsupportedVenueError(f"No position adapter for {exchange!r}")

    position = adapter(raw_record)
    if position.is_flagged:
        logger.warning(
            f"Adapted {exchange.value} position {position.raw_symbol or '?'} "
            f"with defaults: {', '.join(position.issues)}"
        )
    return position


_TPSL_TAGS = {
    "sl": ProtectiveKind.STOP_LOSS,
    "tp": ProtectiveKind.TAKE_PROFIT,
}


def adapt_protective_order(raw: Any) -> Optional[ProtectiveOrder]:
    """
    Map a Hyperliquid open order onto ``ProtectiveOrder``.

    Returns None unless the order is reduce-only and tagged ``tpsl`` as
    ``sl`` or ``tp`` with a usable trigger (or limit) price.
    """
    if not isinstance(raw, Mapping):
        return None
    if raw.get("reduceOnly") is not True:
        return None

    kind = _TPSL_TAGS.get(str(raw.get("tpsl") or "").lower())
    coin = raw.get("coin")
    if kind is None or not coin:
        return None

    price = parse_decimal(raw.get("triggerPx"))
    if price is None:
        price = parse_decimal(raw.get("limitPx"))
    if price is None:
        logger.debug(f"Skipping protective order without price: {raw.get('oid')}")
        return None

    oid = raw.get("oid")
    return ProtectiveOrder(
        coin=str(coin),
        kind=kind,
        trigger_or_limit_price=price,
        reduce_only=True,
        order_id=str(oid) if oid is not None else None,
    )
