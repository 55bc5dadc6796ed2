"""
Bridge-related models for Numora client.

Immutable data structures for the deposit flow and the bridging widget.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class DepositFlowState(Enum):
    """Deposit dialog step enumeration."""
    INPUT = "input"
    QUOTE = "quote"
    EXECUTING = "executing"
    SUCCESS = "success"


class BridgeAsset(Enum):
    """Assets the trade guard may ask the user to bridge."""
    USDC = "USDC"
    MATIC = "MATIC"


@dataclass(frozen=True)
class BridgeToken:
    """Token offered as a deposit source."""
    symbol: str
    address: str
    decimals: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeToken":
        return cls(
            symbol=str(data["symbol"]),
            address=str(data["address"]),
            decimals=int(data["decimals"]),
        )


@dataclass(frozen=True)
class BridgeChain:
    """Source chain offered by the deposit dialog."""
    chain_id: str
    name: str
    tokens: Tuple[BridgeToken, ...] = ()

    def find_token(self, address: str) -> Optional[BridgeToken]:
        """Look up a token on this chain by contract address (case-insensitive)."""
        for token in self.tokens:
            if token.address.lower() == address.lower():
                return token
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeChain":
        return cls(
            chain_id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            tokens=tuple(BridgeToken.from_dict(t) for t in data.get("tokens", [])),
        )


@dataclass(frozen=True)
class QuoteRequest:
    """Parameters for a bridge aggregator quote.

    ``amount`` is an integer count of the source token's smallest unit.
    """
    from_chain_id: str
    from_token_address: str
    to_chain_id: str
    to_token_address: str
    amount: int
    slippage_tolerance: str


@dataclass(frozen=True)
class BridgeQuote:
    """Quote returned by the bridge aggregator.

    The aggregator payload is opaque to the client; it is kept verbatim in
    ``raw`` and handed back unchanged on execution.
    """
    request: QuoteRequest
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def destination_amount(self) -> Optional[str]:
        destination = self.raw.get("destination") or {}
        amount = destination.get("tokenAmount")
        return str(amount) if amount is not None else None


@dataclass(frozen=True)
class PopupRequest:
    """Everything needed to open the bridging widget window."""
    url: str
    window_name: str
    features: str
