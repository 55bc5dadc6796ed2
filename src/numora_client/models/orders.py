"""
Order-related models for Numora client.

Immutable data structures for order submission.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class PredictionOrder:
    """Polymarket order submitted through the dashboard backend."""
    event_id: str
    outcome: str
    token_id: str
    side: str  # "BUY" or "SELL"
    order_type: str  # "market" or "limit"
    price: Decimal  # outcome price, 0 < price <= 1
    size: Decimal  # number of outcome shares
    tick_size: str = "0.01"
    neg_risk: bool = False

    @property
    def required_usdc(self) -> Decimal:
        """USDC the order locks on Polygon."""
        return self.size * self.price

    def to_payload(self) -> dict:
        return {
            "eventId": self.event_id,
            "outcome": self.outcome,
            "tokenId": self.token_id,
            "side": self.side.upper(),
            "orderType": self.order_type.lower(),
            "price": float(self.price),
            "size": float(self.size),
            "tickSize": self.tick_size,
            "negRisk": self.neg_risk,
        }


@dataclass(frozen=True)
class OrderResponse:
    """Backend acknowledgement of a placed order."""
    success: bool
    order_id: Optional[str] = None
    status: Optional[str] = None
    raw: Optional[dict] = None
