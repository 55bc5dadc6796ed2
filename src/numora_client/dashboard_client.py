"""
Numora Client - Main orchestration module.

This module provides the NumoraClient class that coordinates all access to
the dashboard backend.

The client follows state-first design with clean separation of concerns:
- Data models are immutable structures in models/
- HTTP operations are handled by http_client.py
- Session management is handled by session_manager.py
- API methods are implemented in api_methods.py
- Cached positions, orders and balances live in state.py
- Polling is done by independent loops from polling.py
"""

import asyncio
import os
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union
from dotenv import load_dotenv

from .api_methods import APIMethods
from .constants import (
    DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_RETRY_DELAY,
    DEFAULT_MAX_RETRIES, SUCCESS_STATUS_CODE, ERROR_STATUS_CODE,
    CLOSE_ALL_ENDPOINT, CLOSE_POSITION_ENDPOINT, EMBEDDED_WALLET_ENDPOINT,
    OPEN_ORDERS_ENDPOINT, POSITIONS_ENDPOINTS, PREDICTION_ORDER_ENDPOINT,
    WALLET_BALANCES_ENDPOINT,
)
from .http_client import HttpClient, HttpClientError
from .models import (
    BalanceSnapshot, BulkCloseSummary, ConnectionConfig, DashboardConfig,
    EmbeddedWallet, Exchange, OrderResponse, Position, PredictionOrder,
    RetryConfig, load_dashboard_config,
)
from .monitoring import PerformanceMonitor
from .polling import RefreshLoop
from .session_manager import SessionManager
from .state import DashboardState

load_dotenv()
logger = logging.getLogger(__name__)


class NumoraClient:
    """
    Main Numora dashboard client orchestrator.

    Owns the backend session, the cached dashboard state and the refresh
    loops that keep it current.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        retry_config: Optional[RetryConfig] = None,
        dashboard_config: Optional[DashboardConfig] = None,
    ):
        """Initialize Numora client with configuration."""
        self._config = config
        self._dashboard_config = dashboard_config or DashboardConfig()
        self._session_manager = SessionManager(config)
        self._http_client = HttpClient(config, retry_config)
        self._api_methods = APIMethods(self._http_client)
        self._monitor = PerformanceMonitor()
        self._loops: List[RefreshLoop] = []
        self._closed = False
        self.state = DashboardState()

    @classmethod
    def from_env(cls, config_path: Optional[Union[str, Path]] = None) -> "NumoraClient":
        """Create client from environment variables."""
        session_token = os.getenv("NUMORA_SESSION_TOKEN", "")
        base_url = os.getenv("NUMORA_BASE_URL", DEFAULT_BASE_URL)
        timeout = float(os.getenv("NUMORA_TIMEOUT", str(DEFAULT_TIMEOUT)))

        config = ConnectionConfig(
            session_token=session_token,
            base_url=base_url.rstrip("/"),
            timeout=timeout,
        )

        config_path = config_path or os.getenv("NUMORA_CONFIG")
        dashboard_config = load_dashboard_config(config_path) if config_path else None

        return cls(config, dashboard_config=dashboard_config)

    @property
    def dashboard_config(self) -> DashboardConfig:
        return self._dashboard_config

    # Position and order methods
    async def get_raw_positions(self, exchange: Exchange) -> List[dict]:
        """Get venue-native position records for one exchange."""
        return await self._execute_with_monitoring(
            self._api_methods.get_raw_positions, "GET", POSITIONS_ENDPOINTS[exchange.value], exchange
        )

    async def get_open_orders(self) -> List[dict]:
        """Get Hyperliquid open orders."""
        return await self._execute_with_monitoring(
            self._api_methods.get_open_orders, "GET", OPEN_ORDERS_ENDPOINT
        )

    async def refresh_positions(self) -> None:
        """
        Refetch every venue's positions.

        Venues are fetched concurrently and the cache is replaced only when
        every venue answered. If any venue fails, the first error is raised
        and the previous snapshot stays in place as a whole.
        """
        exchanges = list(Exchange)
        results = await asyncio.gather(
            *(self.get_raw_positions(exchange) for exchange in exchanges),
            return_exceptions=True,
        )

        raw_by_exchange: Dict[Exchange, list] = {}
        errors: List[HttpClientError] = []

        for exchange, result in zip(exchanges, results):
            if isinstance(result, HttpClientError):
                logger.warning(f"Failed to fetch {exchange.value} positions: {result}")
                errors.append(result)
            elif isinstance(result, BaseException):
                raise result
            else:
                raw_by_exchange[exchange] = result

        if errors:
            raise errors[0]

        self.state.replace_positions(raw_by_exchange)

    async def refresh_orders(self) -> None:
        """Refetch protective orders."""
        orders = await self.get_open_orders()
        self.state.replace_orders(orders)

    async def refresh_trading(self) -> None:
        """Refetch positions and protective orders."""
        await asyncio.gather(self.refresh_positions(), self.refresh_orders())

    async def get_positions(self, refresh: bool = True) -> List[Position]:
        """Get the unified position list across all venues."""
        if refresh:
            await self.refresh_trading()
        return self.state.aggregated_positions()

    async def close_position(self, coin: str) -> dict:
        """Close one Hyperliquid position by its venue-native coin."""
        return await self._execute_with_monitoring(
            self._api_methods.close_position, "POST", CLOSE_POSITION_ENDPOINT, coin
        )

    async def close_all(self) -> BulkCloseSummary:
        """Close every Hyperliquid position and cancel every resting order."""
        return await self._execute_with_monitoring(
            self._api_methods.close_all, "POST", CLOSE_ALL_ENDPOINT
        )

    # Wallet methods
    async def get_balances(self) -> BalanceSnapshot:
        """Get embedded wallet balances per chain."""
        return await self._execute_with_monitoring(
            self._api_methods.get_balances, "GET", WALLET_BALANCES_ENDPOINT
        )

    async def refresh_balances(self) -> None:
        """Refetch balances into the cache."""
        snapshot = await self.get_balances()
        self.state.replace_balances(snapshot)

    async def get_embedded_wallet(self) -> EmbeddedWallet:
        """Get the user's custodial deposit addresses."""
        return await self._execute_with_monitoring(
            self._api_methods.get_embedded_wallet, "GET", EMBEDDED_WALLET_ENDPOINT
        )

    # Order methods
    async def place_prediction_order(self, order: PredictionOrder) -> OrderResponse:
        """Place a Polymarket order."""
        return await self._execute_with_monitoring(
            self._api_methods.place_prediction_order, "POST", PREDICTION_ORDER_ENDPOINT, order
        )

    # Polling
    async def start_polling(self) -> None:
        """Start one refresh loop per cache."""
        if self._closed:
            raise RuntimeError("Client is closed")
        if self._loops:
            return

        intervals = self._dashboard_config.refresh
        self._loops = [
            RefreshLoop("positions", intervals.positions, self.refresh_positions),
            RefreshLoop("orders", intervals.orders, self.refresh_orders),
            RefreshLoop("balances", intervals.balances, self.refresh_balances),
        ]
        for loop in self._loops:
            await loop.start()

    async def stop_polling(self) -> None:
        """Stop all refresh loops."""
        for loop in self._loops:
            await loop.stop()
        self._loops = []

    @property
    def is_polling(self) -> bool:
        return bool(self._loops)

    # Monitoring
    def get_statistics(self):
        """Get performance statistics."""
        return self._monitor.statistics

    def get_endpoint_stats(self, endpoint: str):
        """Get performance statistics for one endpoint."""
        return self._monitor.get_endpoint_stats(endpoint)

    def degraded_endpoints(self) -> List[str]:
        """Endpoints whose most recent call failed."""
        return self._monitor.degraded_endpoints()

    async def close(self) -> None:
        """Close client and cleanup resources."""
        if not self._closed:
            await self.stop_polling()
            await self._session_manager.close_session()
            self._closed = True
            logger.info("Numora client closed")

    async def _execute_with_monitoring(
        self, api_method, method: str, endpoint: str, *args, **kwargs
    ):
        """Execute API method with performance monitoring."""
        if self._closed:
            raise RuntimeError("Client is closed")

        start_time = asyncio.get_event_loop().time()
        session = await self._session_manager.create_session()

        try:
            result = await api_method(session, *args, **kwargs)
            duration_ms = (asyncio.get_event_loop().time() - start_time) * 1000

            # Record success metrics
            self._monitor.record_request(endpoint, method, SUCCESS_STATUS_CODE, duration_ms)
            return result

        except Exception as e:
            duration_ms = (asyncio.get_event_loop().time() - start_time) * 1000
            status_code = getattr(e, "status_code", None) or ERROR_STATUS_CODE

            # Record error metrics
            self._monitor.record_request(endpoint, method, status_code, duration_ms)
            raise

    # Context manager support
    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def __del__(self):
        """Cleanup on deletion."""
        if hasattr(self, '_closed') and not self._closed:
            logger.warning("NumoraClient not properly closed - call close() explicitly")


def create_numora_client(
    session_token: str,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
    dashboard_config: Optional[DashboardConfig] = None,
) -> NumoraClient:
    """
    Factory function to create Numora client with common configuration.

    Args:
        session_token: Dashboard session token
        base_url: Base URL of the dashboard backend
        timeout: Request timeout in seconds
        max_retries: Maximum number of retry attempts for read requests
        retry_delay: Initial delay between retries in seconds
        dashboard_config: Dashboard settings (gas reserve, bridge, polling)

    Returns:
        Configured NumoraClient instance
    """
    config = ConnectionConfig(
        session_token=session_token,
        base_url=base_url,
        timeout=timeout,
    )

    retry_config = RetryConfig(
        max_retries=max_retries,
        retry_delay=retry_delay,
    )

    return NumoraClient(config, retry_config, dashboard_config)
