"""
Data models for Numora client.

This package contains all data structures used throughout the Numora client,
following the state-first principle with immutable data structures.
"""

from .actions import BulkCloseSummary, CloseOutcome, CloseResult
from .bridge import (
    BridgeAsset,
    BridgeChain,
    BridgeQuote,
    BridgeToken,
    DepositFlowState,
    PopupRequest,
    QuoteRequest,
)
from .config import (
    ConnectionConfig,
    DashboardConfig,
    PopupConfig,
    RefreshIntervals,
    RetryConfig,
    load_dashboard_config,
)
from .orders import OrderResponse, PredictionOrder
from .positions import Exchange, MarketType, Position, ProtectiveKind, ProtectiveOrder, Side
from .wallet import BalanceCheckResult, BalanceSnapshot, ChainBalance, EmbeddedWallet

__all__ = [
    # Configuration
    "ConnectionConfig",
    "RetryConfig",
    "DashboardConfig",
    "PopupConfig",
    "RefreshIntervals",
    "load_dashboard_config",
    # Positions
    "Exchange",
    "MarketType",
    "Side",
    "Position",
    "ProtectiveKind",
    "ProtectiveOrder",
    # Orders
    "PredictionOrder",
    "OrderResponse",
    # Close actions
    "CloseOutcome",
    "CloseResult",
    "BulkCloseSummary",
    # Wallet
    "ChainBalance",
    "BalanceSnapshot",
    "EmbeddedWallet",
    "BalanceCheckResult",
    # Bridge
    "BridgeAsset",
    "BridgeChain",
    "BridgeToken",
    "BridgeQuote",
    "QuoteRequest",
    "DepositFlowState",
    "PopupRequest",
]
