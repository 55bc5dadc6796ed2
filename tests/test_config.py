# -*- coding: utf-8 -*-
"""
Tests for configuration models and utility helpers.
"""

import pytest
from decimal import Decimal

from numora_client.models import ConnectionConfig, DashboardConfig, load_dashboard_config
from numora_client.utils import (
    decimal_or_default,
    parse_decimal,
    shorten_address,
    strip_display_symbol,
    to_smallest_unit,
)

DASHBOARD_YAML = """
minimum_matic_for_gas: "0.02"
slippage_tolerance: "0.5"
popup:
  bridge_host: bridge.example.com
  width: 480
refresh:
  positions: 3
chains:
  - id: "10"
    name: Optimism
    tokens:
      - symbol: USDC
        address: "0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85"
        decimals: 6
"""


class TestConnectionConfig:
    """Test connection settings validation."""

    def test_valid(self):
        config = ConnectionConfig(session_token="a" * 16, base_url="https://numora.example.com")
        assert config.timeout == 30.0

    @pytest.mark.parametrize("token", ["", "short"])
    def test_invalid_token(self, token):
        with pytest.raises(ValueError):
            ConnectionConfig(session_token=token)

    def test_invalid_url(self):
        with pytest.raises(ValueError):
            ConnectionConfig(session_token="a" * 16, base_url="ftp://numora.example.com")


class TestDashboardConfig:
    """Test YAML-backed dashboard settings."""

    def test_defaults(self):
        config = DashboardConfig()

        assert config.minimum_matic_for_gas == Decimal("0.01")
        assert config.slippage_tolerance == "1"
        assert config.popup.bridge_host == "app.routernitro.com"
        assert config.popup.destination_chain_id == 137
        assert (config.popup.width, config.popup.height) == (500, 700)
        assert config.refresh.positions == 5.0
        assert config.refresh.balances == 10.0
        assert config.find_chain("42161").name == "Arbitrum"

    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "dashboard.yaml"
        path.write_text(DASHBOARD_YAML)

        config = load_dashboard_config(path)

        assert config.minimum_matic_for_gas == Decimal("0.02")
        assert config.slippage_tolerance == "0.5"
        assert config.popup.bridge_host == "bridge.example.com"
        assert config.popup.width == 480
        assert config.popup.height == 700
        assert config.refresh.positions == 3.0
        assert config.refresh.orders == 10.0
        assert [c.chain_id for c in config.chains] == ["10"]
        assert config.chains[0].tokens[0].decimals == 6

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_dashboard_config(path) == DashboardConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_dashboard_config(tmp_path / "missing.yaml")


class TestUtils:
    """Test parsing helpers."""

    @pytest.mark.parametrize("value,expected", [
        ("42000", Decimal("42000")),
        (1.5, Decimal("1.5")),
        ("", None),
        (None, None),
        ("abc", None),
        ("NaN", None),
        (True, None),
    ])
    def test_parse_decimal(self, value, expected):
        assert parse_decimal(value) == expected

    def test_decimal_or_default(self):
        assert decimal_or_default(None) == (Decimal("0"), True)
        assert decimal_or_default("bad") == (Decimal("0"), False)
        assert decimal_or_default("2") == (Decimal("2"), True)

    @pytest.mark.parametrize("symbol,expected", [
        ("BTC-PERP", "BTC"),
        ("ETH-USD", "ETH"),
        ("SOL", "SOL"),
    ])
    def test_strip_display_symbol(self, symbol, expected):
        assert strip_display_symbol(symbol) == expected

    def test_to_smallest_unit(self):
        assert to_smallest_unit("25.5", 6) == 25500000
        assert to_smallest_unit(Decimal("1"), 18) == 10 ** 18

    @pytest.mark.parametrize("amount", ["0", "-1", "abc", "0.0000001"])
    def test_to_smallest_unit_invalid(self, amount):
        with pytest.raises(ValueError):
            to_smallest_unit(amount, 6)

    def test_shorten_address(self):
        assert shorten_address("0x1234567890abcdef1234") == "0x1234...1234"
        assert shorten_address(None) == "Loading..."
