"""
Balance-Gated Trade Guard.

A single synchronous check run by the order-submit handler before any
order-placement request. It never polls: balances are re-validated only on
the user's next explicit submit.
"""

import logging
from decimal import Decimal
from typing import Optional, Union

from .constants import MINIMUM_MATIC_FOR_GAS
from .models.wallet import BalanceCheckResult, BalanceSnapshot

logger = logging.getLogger(__name__)


def check_balance(
    required_usdc: Decimal,
    current_usdc: Decimal,
    current_gas: Decimal,
    minimum_gas: Decimal,
) -> BalanceCheckResult:
    """Compare a USDC requirement and the gas reserve against wallet balances."""
    required_usdc_amount = max(Decimal("0"), required_usdc - current_usdc)
    needs_usdc = required_usdc_amount > 0
    needs_matic = current_gas < minimum_gas

    return BalanceCheckResult(
        sufficient=not needs_usdc and not needs_matic,
        needs_usdc=needs_usdc,
        needs_matic=needs_matic,
        required_usdc_amount=required_usdc_amount,
        minimum_matic_for_gas=minimum_gas,
    )


class BalanceGuard:
    """Gates trades that need funds on one chain's embedded wallet."""

    def __init__(
        self,
        minimum_matic_for_gas: Union[Decimal, str] = MINIMUM_MATIC_FOR_GAS,
        chain: str = "polygon",
    ):
        self._minimum_gas = Decimal(str(minimum_matic_for_gas))
        self._chain = chain

    @property
    def chain(self) -> str:
        return self._chain

    @property
    def minimum_matic_for_gas(self) -> Decimal:
        return self._minimum_gas

    def check_and_maybe_gate(
        self,
        required_amount: Decimal,
        balance_snapshot: Optional[BalanceSnapshot],
    ) -> BalanceCheckResult:
        """
        Check the latest cached balances against a trade's USDC requirement.

        A snapshot without data for the guarded chain counts as an empty
        wallet.

        Raises:
            ValueError: If the required amount is negative
        """
        if required_amount < 0:
            raise ValueError(f"Required amount cannot be negative: {required_amount}")

        chain_balance = balance_snapshot.chain(self._chain) if balance_snapshot else None
        if chain_balance is None:
            logger.warning(f"No {self._chain} balance data cached, treating wallet as empty")
            current_usdc = Decimal("0")
            current_gas = Decimal("0")
        else:
            current_usdc = chain_balance.usdc
            current_gas = chain_balance.native

        result = check_balance(required_amount, current_usdc, current_gas, self._minimum_gas)
        if not result.sufficient:
            logger.info(f"Trade gated on {self._chain}: {result.message()}")
        return result
