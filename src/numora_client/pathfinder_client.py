"""
Router Nitro Pathfinder client - quotes and executes cross-chain deposits.

The aggregator API is public, so this client manages its own lightweight
session. Signing and broadcasting are delegated to an injected
TransactionSender (the user's external wallet); this client only builds
the transaction.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import aiohttp
from aiohttp import ClientError, ClientSession, ClientTimeout

from .constants import DEFAULT_SLIPPAGE_TOLERANCE, PATHFINDER_BASE_URL, PATHFINDER_PARTNER_ID
from .models.bridge import BridgeQuote, QuoteRequest
from .utils import validate_url

logger = logging.getLogger(__name__)


class BridgeError(Exception):
    """A quote or bridge execution could not be completed."""


class TransactionSender(Protocol):
    """External wallet that signs and broadcasts a built transaction."""

    address: str

    async def send_transaction(self, transaction: Dict[str, Any]) -> str:
        """Broadcast the transaction and return its hash."""
        ...


class PathfinderClient:
    """Bridge aggregator backed by the Router Nitro Pathfinder API."""

    def __init__(
        self,
        sender: Optional[TransactionSender] = None,
        base_url: str = PATHFINDER_BASE_URL,
        partner_id: str = PATHFINDER_PARTNER_ID,
        timeout: float = 30.0,
    ):
        if not validate_url(base_url):
            raise ValueError("Base URL must be a valid HTTP/HTTPS URL")

        self.base_url = base_url.rstrip("/")
        self.partner_id = partner_id
        self._sender = sender
        self._session: Optional[ClientSession] = None
        self._timeout = ClientTimeout(total=timeout)

        self.endpoints = {
            "quote": "/v2/quote",
            "transaction": "/v2/transaction",
        }

    async def _get_session(self) -> ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=self._timeout)
        return self._session

    async def close(self):
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        session = await self._get_session()

        try:
            async with session.request(method=method, url=url, params=params, json=data) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise BridgeError(f"Aggregator returned HTTP {response.status}: {body[:200]}")
                result = await response.json()
        except asyncio.TimeoutError:
            logger.error(f"Aggregator request timeout: {endpoint}")
            raise BridgeError("Bridge aggregator request timed out")
        except aiohttp.ClientConnectorError:
            logger.error(f"Aggregator connection error: {endpoint}")
            raise BridgeError("Could not connect to bridge aggregator")
        except (aiohttp.ContentTypeError, ValueError) as e:
            logger.error(f"Aggregator returned an unreadable body for {endpoint}: {e}")
            raise BridgeError("Bridge aggregator returned an invalid response")
        except ClientError as e:
            logger.error(f"Aggregator request failed: {e}")
            raise BridgeError(str(e) or "Bridge aggregator request failed")

        if not isinstance(result, dict):
            raise BridgeError("Bridge aggregator returned an invalid response")
        return result

    async def get_quote(self, request: QuoteRequest) -> BridgeQuote:
        """
        Fetch a route quote.

        Raises:
            BridgeError: If the aggregator rejects the request or is unreachable
        """
        if request.amount <= 0:
            raise ValueError(f"Invalid amount: {request.amount}")

        params = {
            "fromTokenAddress": request.from_token_address,
            "toTokenAddress": request.to_token_address,
            "amount": str(request.amount),
            "fromTokenChainId": request.from_chain_id,
            "toTokenChainId": request.to_chain_id,
            "partnerId": self.partner_id,
            "slippageTolerance": request.slippage_tolerance or DEFAULT_SLIPPAGE_TOLERANCE,
        }

        raw = await self._make_request("GET", self.endpoints["quote"], params=params)
        if not isinstance(raw, dict) or "error" in raw:
            message = raw.get("error") if isinstance(raw, dict) else None
            raise BridgeError(str(message or "Failed to get bridge quote"))

        logger.info(
            f"Quote {request.from_chain_id}->{request.to_chain_id} for {request.amount}: "
            f"{raw.get('destination', {}).get('tokenAmount')}"
        )
        return BridgeQuote(request=request, raw=raw)

    async def build_transaction(self, quote: BridgeQuote, sender_address: str, recipient_address: str) -> Dict[str, Any]:
        """Ask the aggregator to turn a quote into an unsigned transaction."""
        payload = dict(quote.raw)
        payload.update({
            "senderAddress": sender_address,
            "receiverAddress": recipient_address,
            "refundAddress": sender_address,
        })

        response = await self._make_request("POST", self.endpoints["transaction"], data=payload)
        transaction = response.get("txn") if isinstance(response, dict) else None
        if not transaction:
            raise BridgeError("Aggregator did not return a transaction")
        return transaction

    async def execute_bridge(self, quote: BridgeQuote, recipient_address: str) -> str:
        """
        Execute a quote, sending funds to ``recipient_address``.

        Returns:
            The source-chain transaction hash
        """
        if quote is None:
            raise BridgeError("No quote available. Please get a quote first.")
        if self._sender is None:
            raise BridgeError("Wallet not connected")

        transaction = await self.build_transaction(quote, self._sender.address, recipient_address)
        try:
            tx_hash = await self._sender.send_transaction(transaction)
        except BridgeError:
            raise
        except Exception as e:
            logger.error(f"Wallet rejected bridge transaction: {e}")
            raise BridgeError(str(e) or "Failed to execute bridge transaction") from e

        logger.info(f"Bridge transaction submitted: {tx_hash}")
        return tx_hash
