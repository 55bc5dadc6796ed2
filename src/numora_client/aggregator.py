"""
Position Aggregator - merges every venue's positions into one list.

Positions and protective orders arrive from two independently scheduled
fetches, so the join between them is best-effort: an order for a position
that has just closed is ignored, and a position whose orders have not been
refetched yet may carry a stale match for one refresh cycle.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .adapters import adapt, adapt_protective_order
from .models.positions import Exchange, Position, ProtectiveKind, ProtectiveOrder

logger = logging.getLogger(__name__)


def match_protective_orders(
    position: Position,
    orders: Iterable[ProtectiveOrder],
) -> Tuple[Optional[ProtectiveOrder], Optional[ProtectiveOrder]]:
    """
    Find the stop-loss and take-profit for a position.

    Matching is by exact raw symbol on reduce-only orders. When several
    orders of one kind share a symbol the first in source order wins.
    """
    stop_loss = None
    take_profit = None

    for order in orders:
        if not order.reduce_only or order.coin != position.raw_symbol:
            continue
        if order.kind is ProtectiveKind.STOP_LOSS and stop_loss is None:
            stop_loss = order
        elif order.kind is ProtectiveKind.TAKE_PROFIT and take_profit is None:
            take_profit = order
        if stop_loss is not None and take_profit is not None:
            break

    return stop_loss, take_profit


def aggregate(
    raw_by_exchange: Mapping[Exchange, Sequence[Any]],
    protective_orders: Sequence[Any],
) -> List[Position]:
    """
    Build the unified position list.

    Args:
        raw_by_exchange: Venue-native position records per exchange
        protective_orders: Raw Hyperliquid open orders

    Returns:
        Positions of every venue, each venue's own order preserved. Only
        Hyperliquid positions get stop-loss/take-profit matches.
    """
    orders = [
        order for order in (adapt_protective_order(raw) for raw in protective_orders)
        if order is not None
    ]

    positions: List[Position] = []
    for exchange, records in raw_by_exchange.items():
        for record in records:
            position = adapt(exchange, record)

            if exchange is Exchange.HYPERLIQUID:
                stop_loss, take_profit = match_protective_orders(position, orders)
                position = replace(position, stop_loss=stop_loss, take_profit=take_profit)

            positions.append(position)

    flagged = sum(1 for p in positions if p.is_flagged)
    if flagged:
        logger.warning(f"{flagged} of {len(positions)} positions were adapted with defaults")

    return positions


@dataclass(frozen=True)
class ExposureSummary:
    """Per-venue totals for the breakdown panel."""
    exchange: Exchange
    position_count: int
    notional: Decimal
    unrealized_pnl: Decimal


def summarize_by_exchange(positions: Iterable[Position]) -> List[ExposureSummary]:
    """Group notional and unrealized PnL by venue, in first-seen venue order."""
    totals: Dict[Exchange, List[Decimal]] = {}
    counts: Dict[Exchange, int] = {}

    for position in positions:
        bucket = totals.setdefault(position.exchange, [Decimal("0"), Decimal("0")])
        bucket[0] += position.position_value
        bucket[1] += position.unrealized_pnl
        counts[position.exchange] = counts.get(position.exchange, 0) + 1

    return [
        ExposureSummary(
            exchange=exchange,
            position_count=counts[exchange],
            notional=notional,
            unrealized_pnl=pnl,
        )
        for exchange, (notional, pnl) in totals.items()
    ]
