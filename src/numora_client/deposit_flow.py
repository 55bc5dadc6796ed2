"""
Deposit quote/execute flow.

A user-initiated cross-chain deposit into the embedded wallet runs through
four steps::

    input -> quote -> executing -> success
                 ^        |
                 +--------+  (execution failed, quote kept)

A flow lives exactly as long as the dialog that owns it. Closing the dialog
discards the flow, so a quote or transaction hash that resolves afterwards
is dropped instead of being applied to a dialog the user already left.
"""

import logging
from typing import Optional, Protocol

from .constants import DEPOSIT_DESTINATION_CHAIN_ID, DEPOSIT_DESTINATION_TOKEN_ADDRESS
from .http_client import HttpClientError
from .models.bridge import BridgeChain, BridgeQuote, BridgeToken, DepositFlowState, QuoteRequest
from .models.config import DashboardConfig
from .pathfinder_client import BridgeError
from .utils import parse_decimal, to_smallest_unit

logger = logging.getLogger(__name__)


class BridgeAggregator(Protocol):
    """Quote and execution backend for deposits. Failures raise BridgeError."""

    async def get_quote(self, request: QuoteRequest) -> BridgeQuote:
        ...

    async def execute_bridge(self, quote: BridgeQuote, recipient_address: str) -> str:
        ...


class InvalidTransitionError(RuntimeError):
    """A step was requested from a state that does not allow it."""


class DepositFlow:
    """State of one open deposit dialog."""

    def __init__(
        self,
        aggregator: BridgeAggregator,
        config: Optional[DashboardConfig] = None,
        recipient_address: Optional[str] = None,
    ):
        self._aggregator = aggregator
        self._config = config or DashboardConfig()

        self.state = DepositFlowState.INPUT
        self.amount = ""
        self.recipient_address = recipient_address
        self.quote: Optional[BridgeQuote] = None
        self.tx_hash: Optional[str] = None
        self.error: Optional[str] = None
        self.is_loading = False
        self._detached = False

        self.from_chain_id = ""
        self.from_token_address = ""
        if self._config.chains:
            self.select_chain(self._config.chains[0].chain_id)

    @property
    def detached(self) -> bool:
        return self._detached

    @property
    def selected_chain(self) -> Optional[BridgeChain]:
        return self._config.find_chain(self.from_chain_id)

    @property
    def selected_token(self) -> Optional[BridgeToken]:
        chain = self.selected_chain
        if chain is None or not self.from_token_address:
            return None
        return chain.find_token(self.from_token_address)

    @property
    def can_get_quote(self) -> bool:
        return (
            self.state is DepositFlowState.INPUT
            and bool(self.amount)
            and self.selected_token is not None
            and bool(self.recipient_address)
            and not self.is_loading
        )

    def select_chain(self, chain_id: str) -> None:
        """Switch source chain; the chain's first token is selected."""
        chain = self._config.find_chain(chain_id)
        if chain is None:
            raise ValueError(f"Unknown source chain: {chain_id}")

        self.from_chain_id = chain.chain_id
        self.from_token_address = chain.tokens[0].address if chain.tokens else ""

    def select_token(self, address: str) -> None:
        chain = self.selected_chain
        if chain is None or chain.find_token(address) is None:
            raise ValueError(f"Token {address} is not offered on chain {self.from_chain_id}")
        self.from_token_address = address

    def set_amount(self, amount: str) -> None:
        self.amount = amount.strip()

    def set_recipient(self, address: Optional[str]) -> None:
        """Set the embedded wallet address once it has been fetched."""
        self.recipient_address = address

    def build_quote_request(self) -> QuoteRequest:
        """
        Quote parameters for the current input.

        Raises:
            ValueError: If the amount is not a positive number expressible
                exactly in the source token's smallest unit
        """
        token = self.selected_token
        if token is None:
            raise ValueError("No source token selected")

        amount = parse_decimal(self.amount)
        if amount is None:
            raise ValueError(f"Invalid amount: {self.amount!r}")

        return QuoteRequest(
            from_chain_id=self.from_chain_id,
            from_token_address=token.address,
            to_chain_id=DEPOSIT_DESTINATION_CHAIN_ID,
            to_token_address=DEPOSIT_DESTINATION_TOKEN_ADDRESS,
            amount=to_smallest_unit(amount, token.decimals),
            slippage_tolerance=self._config.slippage_tolerance,
        )

    async def get_quote(self) -> Optional[BridgeQuote]:
        """
        Request a quote and move to ``quote`` on success.

        Returns None without any request when the input is incomplete. An
        invalid amount or a failed request leaves the flow in ``input`` with
        ``error`` set.
        """
        if not self.can_get_quote:
            return None

        self.error = None
        try:
            request = self.build_quote_request()
        except ValueError as e:
            logger.debug(f"Rejected deposit amount: {e}")
            self.error = str(e)
            return None

        self.is_loading = True
        try:
            quote = await self._aggregator.get_quote(request)
        except (BridgeError, HttpClientError) as e:
            if self._detached:
                return None
            logger.warning(f"Deposit quote failed: {e}")
            self.error = str(e) or "Failed to get bridge quote"
            return None
        finally:
            self.is_loading = False

        if self._detached:
            logger.debug("Dropping quote for a closed deposit dialog")
            return None

        self.quote = quote
        self.state = DepositFlowState.QUOTE
        return quote

    async def execute_bridge(self) -> Optional[str]:
        """
        Execute the current quote and move to ``success``.

        On failure the flow returns to ``quote`` with the quote kept and
        ``error`` set, so the user can retry without requoting.
        """
        if self.state is not DepositFlowState.QUOTE:
            raise InvalidTransitionError(f"Cannot execute from {self.state.value}")
        if self.quote is None or not self.recipient_address:
            return None

        self.state = DepositFlowState.EXECUTING
        self.is_loading = True
        self.error = None
        try:
            tx_hash = await self._aggregator.execute_bridge(self.quote, self.recipient_address)
        except (BridgeError, HttpClientError) as e:
            if self._detached:
                return None
            logger.warning(f"Deposit execution failed: {e}")
            self.error = str(e) or "Failed to execute bridge transaction"
            self.state = DepositFlowState.QUOTE
            return None
        finally:
            self.is_loading = False

        if self._detached:
            logger.info(f"Bridge transaction {tx_hash} resolved after the dialog closed")
            return None

        self.tx_hash = tx_hash
        self.state = DepositFlowState.SUCCESS
        return tx_hash

    def back(self) -> None:
        """Return from the quote review to the amount input."""
        if self.state is not DepositFlowState.QUOTE:
            raise InvalidTransitionError(f"Cannot go back from {self.state.value}")
        self.state = DepositFlowState.INPUT
        self.quote = None
        self.error = None

    def detach(self) -> None:
        """Stop accepting results; called when the owning dialog closes."""
        self._detached = True


class DepositDialog:
    """Owns at most one DepositFlow, created on open and discarded on close."""

    def __init__(self, aggregator: BridgeAggregator, config: Optional[DashboardConfig] = None):
        self._aggregator = aggregator
        self._config = config or DashboardConfig()
        self._flow: Optional[DepositFlow] = None

    @property
    def is_open(self) -> bool:
        return self._flow is not None

    @property
    def flow(self) -> Optional[DepositFlow]:
        return self._flow

    @property
    def state(self) -> DepositFlowState:
        """Current step; a closed dialog is always at ``input``."""
        return self._flow.state if self._flow is not None else DepositFlowState.INPUT

    def open(self, recipient_address: Optional[str] = None) -> DepositFlow:
        if self._flow is not None:
            self._flow.detach()
        self._flow = DepositFlow(self._aggregator, self._config, recipient_address)
        return self._flow

    def close(self) -> None:
        if self._flow is not None:
            self._flow.detach()
            self._flow = None
