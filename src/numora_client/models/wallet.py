"""
Wallet and balance models for Numora client.

Immutable snapshots; each balance fetch produces a new one.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional

from .bridge import BridgeAsset


@dataclass(frozen=True)
class ChainBalance:
    """USDC and native gas balance held on one chain."""
    usdc: Decimal = Decimal("0")
    native: Decimal = Decimal("0")


@dataclass(frozen=True)
class BalanceSnapshot:
    """Per-chain wallet balances as of one fetch."""
    chains: Dict[str, ChainBalance] = field(default_factory=dict)
    total_usd: Optional[Decimal] = None
    fetched_at: Optional[float] = None

    def chain(self, name: str) -> Optional[ChainBalance]:
        return self.chains.get(name)

    @property
    def polygon(self) -> Optional[ChainBalance]:
        return self.chains.get("polygon")


@dataclass(frozen=True)
class EmbeddedWallet:
    """Custodial deposit addresses of the user, one per chain family."""
    hyperliquid_address: Optional[str] = None
    polygon_address: Optional[str] = None
    solana_address: Optional[str] = None
    evm_address: Optional[str] = None
    bnb_address: Optional[str] = None


@dataclass(frozen=True)
class BalanceCheckResult:
    """
    Outcome of a single pre-trade balance check.

    Attributes:
        sufficient: True when neither USDC nor gas is missing
        needs_usdc: True when available USDC is below the requirement
        needs_matic: True when native gas is below the reserve
        required_usdc_amount: USDC deficit, never negative
        minimum_matic_for_gas: Gas reserve the check was made against
    """
    sufficient: bool
    needs_usdc: bool
    needs_matic: bool
    required_usdc_amount: Decimal
    minimum_matic_for_gas: Decimal

    @property
    def bridge_asset(self) -> Optional[BridgeAsset]:
        """Asset to bridge next; gas always comes first."""
        if self.needs_matic:
            return BridgeAsset.MATIC
        if self.needs_usdc:
            return BridgeAsset.USDC
        return None

    @property
    def bridge_amount(self) -> Decimal:
        if self.needs_matic:
            return self.minimum_matic_for_gas
        if self.needs_usdc:
            return self.required_usdc_amount
        return Decimal("0")

    def shortfall(self) -> str:
        """What is missing, e.g. ``Need 15.00 more USDC``; empty when sufficient."""
        parts = []
        if self.needs_usdc:
            parts.append(f"Need {self.required_usdc_amount:.2f} more USDC")
        if self.needs_matic:
            parts.append(f"Need {self.minimum_matic_for_gas} MATIC for gas")
        return " and ".join(parts)

    def message(self) -> str:
        """Human-readable description of what is missing."""
        if self.sufficient:
            return "Sufficient balance"

        text = self.shortfall()
        if self.needs_usdc and self.needs_matic:
            text += (
                ". Bridge MATIC for gas first: without gas the wallet cannot "
                "execute any follow-up transaction, including the USDC bridge"
            )
        return text
