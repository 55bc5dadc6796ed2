"""
Position-related models for Numora client.

Venue-agnostic, immutable structures produced by the venue adapters.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class Exchange(Enum):
    """Venue a position or order came from."""
    HYPERLIQUID = "hyperliquid"
    ORDERLY = "orderly"
    POLYMARKET = "polymarket"


class MarketType(Enum):
    """Market type enumeration."""
    PERPETUAL = "perpetual"
    SPOT = "spot"
    PREDICTION = "prediction"


class Side(Enum):
    """Position direction."""
    LONG = "long"
    SHORT = "short"


class ProtectiveKind(Enum):
    """Kind of a reduce-only trigger order."""
    STOP_LOSS = "stopLoss"
    TAKE_PROFIT = "takeProfit"


@dataclass(frozen=True)
class ProtectiveOrder:
    """Resting reduce-only stop-loss or take-profit order."""
    coin: str
    kind: ProtectiveKind
    trigger_or_limit_price: Decimal
    reduce_only: bool
    order_id: Optional[str] = None


@dataclass(frozen=True)
class Position:
    """
    Unified position across venues.

    Attributes:
        symbol: Display symbol with venue decorations stripped
        raw_symbol: Venue-native identifier, used for close/cancel calls
        exchange: Venue the position came from
        market_type: Perpetual, spot or prediction
        side: Direction; together with size the only directional truth
        size: Non-negative magnitude
        entry_price: Average entry price (0 when the venue omits it)
        current_price: Mark price
        position_value: Notional at current mark
        unrealized_pnl: Unrealized profit and loss
        roe: Return on equity as a fraction (0.05 == 5%)
        leverage: Plain integer leverage
        liquidation_price: None when the venue does not compute one
        stop_loss: Matched protective stop-loss order
        take_profit: Matched protective take-profit order
        protection_applicable: False for venues that expose no protective orders
        issues: Display-only notes about malformed source fields
    """
    symbol: str
    raw_symbol: str
    exchange: Exchange
    market_type: MarketType
    side: Side
    size: Decimal
    entry_price: Decimal
    current_price: Decimal
    position_value: Decimal
    unrealized_pnl: Decimal
    roe: Decimal
    leverage: int
    liquidation_price: Optional[Decimal] = None
    stop_loss: Optional[ProtectiveOrder] = None
    take_profit: Optional[ProtectiveOrder] = None
    protection_applicable: bool = False
    issues: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.size < 0:
            raise ValueError(f"Position size must be non-negative, got {self.size}")

    @property
    def is_flagged(self) -> bool:
        """True when at least one source field had to be defaulted."""
        return bool(self.issues)

    @property
    def can_close(self) -> bool:
        """Only Hyperliquid positions are wired for programmatic close."""
        return self.exchange is Exchange.HYPERLIQUID

    @property
    def roe_percent(self) -> Decimal:
        """ROE scaled for display."""
        return self.roe * 100

    @property
    def liquidation_distance(self) -> Optional[Decimal]:
        """Fractional distance from mark to liquidation price."""
        if self.liquidation_price is None or self.current_price <= 0:
            return None
        return abs(self.current_price - self.liquidation_price) / self.current_price

    @property
    def key(self) -> Tuple[Exchange, str]:
        return (self.exchange, self.raw_symbol)
