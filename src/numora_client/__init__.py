"""
Numora Client - Python client for the Numora trading dashboard backend.

This package aggregates positions across Hyperliquid, Orderly and
Polymarket, orchestrates close-all, gates prediction-market orders behind a
Polygon balance check and drives the cross-chain deposit flow.
"""

from .dashboard_client import NumoraClient, create_numora_client
from .adapters import UnsupportedVenueError, adapt, adapt_protective_order
from .aggregator import aggregate, summarize_by_exchange
from .balance_guard import BalanceGuard, check_balance
from .bridge_launcher import BridgeLauncher, PopupBlocked, PopupHandle
from .bulk_actions import BulkActionOrchestrator
from .deposit_flow import DepositDialog, DepositFlow, InvalidTransitionError
from .http_client import (
    BackendError,
    HttpClientClientError,
    HttpClientError,
    HttpServerError,
)
from .notifications import Notifier, Toast, ToastVariant
from .order_entry import PredictionOrderEntry, SubmitResult, SubmitStatus
from .pathfinder_client import BridgeError, PathfinderClient
from .polling import RefreshLoop
from .state import DashboardState
from .models import (
    # Configuration
    ConnectionConfig,
    RetryConfig,
    DashboardConfig,
    load_dashboard_config,
    # Positions
    Exchange,
    MarketType,
    Side,
    Position,
    ProtectiveKind,
    ProtectiveOrder,
    # Actions
    BulkCloseSummary,
    CloseOutcome,
    CloseResult,
    # Orders
    PredictionOrder,
    OrderResponse,
    # Wallet
    BalanceCheckResult,
    BalanceSnapshot,
    ChainBalance,
    EmbeddedWallet,
    # Bridge
    BridgeAsset,
    DepositFlowState,
)

__all__ = [
    # Main Client
    "NumoraClient",
    "create_numora_client",
    "DashboardState",
    "RefreshLoop",
    # Aggregation
    "adapt",
    "adapt_protective_order",
    "aggregate",
    "summarize_by_exchange",
    "UnsupportedVenueError",
    # Actions
    "BulkActionOrchestrator",
    "PredictionOrderEntry",
    "SubmitResult",
    "SubmitStatus",
    # Balance guard and bridging
    "BalanceGuard",
    "check_balance",
    "BridgeLauncher",
    "PopupHandle",
    "PopupBlocked",
    "DepositDialog",
    "DepositFlow",
    "InvalidTransitionError",
    "PathfinderClient",
    "BridgeError",
    # Notifications
    "Notifier",
    "Toast",
    "ToastVariant",
    # Errors
    "HttpClientError",
    "HttpServerError",
    "HttpClientClientError",
    "BackendError",
    # Models
    "ConnectionConfig",
    "RetryConfig",
    "DashboardConfig",
    "load_dashboard_config",
    "Exchange",
    "MarketType",
    "Side",
    "Position",
    "ProtectiveKind",
    "ProtectiveOrder",
    "BulkCloseSummary",
    "CloseOutcome",
    "CloseResult",
    "PredictionOrder",
    "OrderResponse",
    "BalanceCheckResult",
    "BalanceSnapshot",
    "ChainBalance",
    "EmbeddedWallet",
    "BridgeAsset",
    "DepositFlowState",
]

__version__ = "0.1.0"
