# -*- coding: utf-8 -*-
"""
Shared fixtures and utilities for testing Numora client.
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, Mock
from typing import Any, Dict, List

from numora_client.dashboard_client import NumoraClient
from numora_client.models import (
    BalanceSnapshot,
    ChainBalance,
    ConnectionConfig,
    DashboardConfig,
    EmbeddedWallet,
    RetryConfig,
)
from numora_client.notifications import Notifier
from numora_client.state import DashboardState

TEST_TOKEN = "test_session_token_0123456789"


# Configuration fixtures
@pytest.fixture
def connection_config() -> ConnectionConfig:
    """Connection config pointing at a test backend."""
    return ConnectionConfig(
        session_token=TEST_TOKEN,
        base_url="https://dashboard.example.com",
        timeout=10.0,
    )


@pytest.fixture
def retry_config() -> RetryConfig:
    """Fast retry config for tests."""
    return RetryConfig(max_retries=2, retry_delay=0.0, backoff_factor=1.0)


@pytest.fixture
def dashboard_config() -> DashboardConfig:
    return DashboardConfig()


@pytest.fixture
def numora_client(connection_config, retry_config) -> NumoraClient:
    """Create a NumoraClient instance for testing."""
    client = NumoraClient(connection_config, retry_config)
    yield client
    # Avoid the unclosed-client warning without touching a real session
    client._closed = True


# Raw venue records
@pytest.fixture
def hyperliquid_position_data() -> Dict[str, Any]:
    """Hyperliquid clearinghouse position (assetPositions[] form)."""
    return {
        "type": "oneWay",
        "position": {
            "coin": "ETH",
            "szi": "2.5",
            "entryPx": "3000",
            "positionValue": "8000",
            "unrealizedPnl": "500",
            "returnOnEquity": "0.25",
            "liquidationPx": "2400",
            "leverage": {"type": "cross", "value": 4},
        },
    }


@pytest.fixture
def orderly_position_data() -> Dict[str, Any]:
    return {
        "symbol": "PERP_SOL_USDC",
        "position_qty": -10,
        "average_open_price": 150,
        "mark_price": 140,
        "unsettled_pnl": 100,
        "est_liq_price": 175,
        "leverage": 5,
    }


@pytest.fixture
def polymarket_position_data() -> Dict[str, Any]:
    return {
        "asset_id": "71321045679252212594626385532706912750332728571942532289631379312455583992563",
        "marketQuestion": "Will it rain in London tomorrow?",
        "size": "100",
        "side": "BUY",
        "avgPrice": "0.40",
        "curPrice": "0.55",
        "cashPnl": "15",
    }


@pytest.fixture
def open_orders_data() -> List[Dict[str, Any]]:
    """Hyperliquid open orders as tagged by the backend."""
    return [
        {"coin": "ETH", "oid": 101, "reduceOnly": True, "tpsl": "sl", "triggerPx": "2800", "limitPx": "2790"},
        {"coin": "ETH", "oid": 102, "reduceOnly": True, "tpsl": "tp", "triggerPx": "3600"},
        {"coin": "ETH", "oid": 103, "reduceOnly": False, "tpsl": "sl", "triggerPx": "2500"},
        {"coin": "BTC", "oid": 104, "reduceOnly": True, "tpsl": "tp", "triggerPx": "70000"},
    ]


@pytest.fixture
def balances_response_data() -> Dict[str, Any]:
    return {
        "success": True,
        "balances": {
            "polygon": {"usdc": "5", "matic": "0.5"},
            "hyperliquid": {"withdrawable": "120.5"},
            "solana": {"usdc": "0", "sol": "1.25"},
            "totalUsd": "310.75",
        },
    }


@pytest.fixture
def close_all_response_data() -> Dict[str, Any]:
    return {
        "success": True,
        "results": {
            "closedPositions": ["BTC", "ETH"],
            "cancelledOrders": [123456],
            "errors": ["SOL: Insufficient margin"],
        },
    }


# Snapshots and collaborators
def make_snapshot(usdc: str = "0", matic: str = "0") -> BalanceSnapshot:
    return BalanceSnapshot(chains={"polygon": ChainBalance(Decimal(usdc), Decimal(matic))})


@pytest.fixture
def snapshot_factory():
    """Build a Polygon-only balance snapshot."""
    return make_snapshot


@pytest.fixture
def embedded_wallet() -> EmbeddedWallet:
    return EmbeddedWallet(
        hyperliquid_address="0x1111111111111111111111111111111111111111",
        polygon_address="0x2222222222222222222222222222222222222222",
    )


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def mock_dashboard_client(embedded_wallet):
    """Stand-in for NumoraClient used by the action orchestrators."""
    client = MagicMock()
    client.state = DashboardState()
    client.close_position = AsyncMock(return_value={"success": True})
    client.close_all = AsyncMock()
    client.refresh_trading = AsyncMock()
    client.get_embedded_wallet = AsyncMock(return_value=embedded_wallet)
    client.place_prediction_order = AsyncMock()
    return client


@pytest.fixture
def mock_window_opener():
    """WindowOpener returning an open pop-up."""
    opener = Mock()
    opener.open.return_value = Mock(closed=False)
    return opener
