"""
Configuration models for Numora client.

Immutable configuration structures following state-first design.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from ..constants import (
    BALANCES_REFRESH_INTERVAL,
    BRIDGE_HOST,
    BRIDGE_WINDOW_HEIGHT,
    BRIDGE_WINDOW_WIDTH,
    DEFAULT_BASE_URL,
    DEFAULT_SLIPPAGE_TOLERANCE,
    MINIMUM_MATIC_FOR_GAS,
    ORDERS_REFRESH_INTERVAL,
    POLYGON_CHAIN_ID,
    POSITIONS_REFRESH_INTERVAL,
)
from .bridge import BridgeChain, BridgeToken


@dataclass(frozen=True)
class ConnectionConfig:
    """Configuration for the dashboard backend connection."""
    session_token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_session_token()
        self._validate_base_url()

    def _validate_session_token(self):
        """Validate session token format."""
        if not self.session_token:
            raise ValueError("Session token cannot be empty")

        if len(self.session_token) < 16:
            raise ValueError(
                f"Session token appears to be too short (expected 16+ characters, got {len(self.session_token)})"
            )

    def _validate_base_url(self):
        """Validate backend URL format."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must be a valid HTTP/HTTPS URL, got {self.base_url!r}")


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for request retry behavior."""
    max_retries: int = 3
    retry_delay: float = 1.0
    backoff_factor: float = 2.0
    retry_on_status: tuple[int, ...] = (500, 502, 503, 504)


@dataclass(frozen=True)
class PopupConfig:
    """Bridging widget window settings."""
    bridge_host: str = BRIDGE_HOST
    destination_chain_id: int = POLYGON_CHAIN_ID
    width: int = BRIDGE_WINDOW_WIDTH
    height: int = BRIDGE_WINDOW_HEIGHT


@dataclass(frozen=True)
class RefreshIntervals:
    """Polling cadence per cache, in seconds."""
    positions: float = POSITIONS_REFRESH_INTERVAL
    orders: float = ORDERS_REFRESH_INTERVAL
    balances: float = BALANCES_REFRESH_INTERVAL


def _default_chains() -> Tuple[BridgeChain, ...]:
    return (
        BridgeChain(
            chain_id="1",
            name="Ethereum",
            tokens=(BridgeToken("USDC", "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", 6),),
        ),
        BridgeChain(
            chain_id="42161",
            name="Arbitrum",
            tokens=(BridgeToken("USDC", "0xaf88d065e77c8cC2239327C5EDb3A432268e5831", 6),),
        ),
        BridgeChain(
            chain_id="137",
            name="Polygon",
            tokens=(BridgeToken("USDC", "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359", 6),),
        ),
        BridgeChain(
            chain_id="8453",
            name="Base",
            tokens=(BridgeToken("USDC", "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913", 6),),
        ),
    )


@dataclass(frozen=True)
class DashboardConfig:
    """
    Dashboard-level settings loaded from YAML.

    Attributes:
        minimum_matic_for_gas: Native gas reserve required on Polygon before a trade
        slippage_tolerance: Slippage (percent) sent with every bridge quote
        popup: Bridging widget window settings
        refresh: Polling intervals per cache
        chains: Source chains and tokens offered by the deposit dialog
    """
    minimum_matic_for_gas: Decimal = field(default_factory=lambda: Decimal(MINIMUM_MATIC_FOR_GAS))
    slippage_tolerance: str = DEFAULT_SLIPPAGE_TOLERANCE
    popup: PopupConfig = field(default_factory=PopupConfig)
    refresh: RefreshIntervals = field(default_factory=RefreshIntervals)
    chains: Tuple[BridgeChain, ...] = field(default_factory=_default_chains)

    def find_chain(self, chain_id: str) -> Optional[BridgeChain]:
        """Look up a configured source chain by id."""
        for chain in self.chains:
            if chain.chain_id == str(chain_id):
                return chain
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardConfig":
        """Create from dictionary (e.g., from YAML config)."""
        defaults = cls()

        popup_data = data.get("popup") or {}
        popup = PopupConfig(
            bridge_host=popup_data.get("bridge_host", defaults.popup.bridge_host),
            destination_chain_id=int(popup_data.get("destination_chain_id", defaults.popup.destination_chain_id)),
            width=int(popup_data.get("width", defaults.popup.width)),
            height=int(popup_data.get("height", defaults.popup.height)),
        )

        refresh_data = data.get("refresh") or {}
        refresh = RefreshIntervals(
            positions=float(refresh_data.get("positions", defaults.refresh.positions)),
            orders=float(refresh_data.get("orders", defaults.refresh.orders)),
            balances=float(refresh_data.get("balances", defaults.refresh.balances)),
        )

        chains = defaults.chains
        if data.get("chains"):
            chains = tuple(BridgeChain.from_dict(chain) for chain in data["chains"])

        return cls(
            minimum_matic_for_gas=Decimal(str(data.get("minimum_matic_for_gas", defaults.minimum_matic_for_gas))),
            slippage_tolerance=str(data.get("slippage_tolerance", defaults.slippage_tolerance)),
            popup=popup,
            refresh=refresh,
            chains=chains,
        )


def load_dashboard_config(path: Union[str, Path]) -> DashboardConfig:
    """Load dashboard settings from a YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    return DashboardConfig.from_dict(data)
