# -*- coding: utf-8 -*-
"""
Tests for the venue position adapters.
"""

import pytest
from decimal import Decimal

from numora_client.adapters import (
    UnsupportedVenueError,
    adapt,
    adapt_hyperliquid,
    adapt_orderly,
    adapt_polymarket,
    adapt_protective_order,
    normalize_leverage,
    side_from_label,
    split_orderly_symbol,
)
from numora_client.models import Exchange, MarketType, ProtectiveKind, Side


class TestHyperliquidAdapter:
    """Test Hyperliquid position normalization."""

    def test_short_from_negative_size(self):
        """Signed size gives side; magnitude gives size."""
        position = adapt(Exchange.HYPERLIQUID, {
            "coin": "BTC-PERP",
            "szi": "-0.5",
            "entryPx": "42000",
            "unrealizedPnl": "-150",
        })

        assert position.symbol == "BTC"
        assert position.raw_symbol == "BTC-PERP"
        assert position.exchange is Exchange.HYPERLIQUID
        assert position.side is Side.SHORT
        assert position.size == Decimal("0.5")
        assert position.entry_price == Decimal("42000")
        assert position.unrealized_pnl == Decimal("-150")
        assert position.liquidation_price is None
        assert not position.is_flagged

    def test_long_from_positive_size(self):
        position = adapt_hyperliquid({"coin": "ETH", "szi": "1.2", "entryPx": "3000"})
        assert position.side is Side.LONG
        assert position.size == Decimal("1.2")

    def test_nested_position_record(self, hyperliquid_position_data):
        """The assetPositions[] wrapper is unwrapped."""
        position = adapt_hyperliquid(hyperliquid_position_data)

        assert position.raw_symbol == "ETH"
        assert position.size == Decimal("2.5")
        assert position.position_value == Decimal("8000")
        assert position.current_price == Decimal("3200")
        assert position.roe == Decimal("0.25")
        assert position.roe_percent == Decimal("25")
        assert position.leverage == 4
        assert position.liquidation_price == Decimal("2400")
        assert position.liquidation_distance == Decimal("0.25")
        assert position.protection_applicable is True
        assert position.can_close is True

    def test_leverage_as_bare_number(self):
        position = adapt_hyperliquid({"coin": "SOL", "szi": "10", "entryPx": "150", "leverage": 10})
        assert position.leverage == 10

    def test_mark_price_preferred(self):
        position = adapt_hyperliquid({
            "coin": "SOL", "szi": "10", "entryPx": "150", "markPx": "160", "positionValue": "1500",
        })
        assert position.current_price == Decimal("160")
        assert position.position_value == Decimal("1500")

    def test_roe_derived_from_margin_when_missing(self):
        position = adapt_hyperliquid({
            "coin": "SOL", "szi": "10", "entryPx": "100", "positionValue": "1000",
            "unrealizedPnl": "50", "leverage": {"type": "cross", "value": 5},
        })
        # margin = 1000 / 5 = 200
        assert position.roe == Decimal("0.25")

    def test_missing_optional_fields_default(self):
        """Entry price, liquidation price and ROE default instead of raising."""
        position = adapt_hyperliquid({"coin": "DOGE", "szi": "100"})

        assert position.entry_price == Decimal("0")
        assert position.current_price == Decimal("0")
        assert position.roe == Decimal("0")
        assert position.liquidation_price is None
        assert position.liquidation_distance is None
        assert position.leverage == 1
        assert not position.is_flagged

    def test_malformed_size_is_flagged_not_dropped(self):
        position = adapt_hyperliquid({"coin": "BTC", "szi": "abc", "entryPx": "42000"})

        assert position.size == Decimal("0")
        assert position.is_flagged
        assert any("szi" in issue for issue in position.issues)

    def test_non_mapping_record_is_flagged(self):
        position = adapt(Exchange.HYPERLIQUID, "garbage")

        assert position.symbol == "UNKNOWN"
        assert position.is_flagged


class TestOrderlyAdapter:
    """Test Orderly position normalization."""

    def test_snake_case_perp(self, orderly_position_data):
        position = adapt_orderly(orderly_position_data)

        assert position.symbol == "SOL"
        assert position.raw_symbol == "PERP_SOL_USDC"
        assert position.market_type is MarketType.PERPETUAL
        assert position.side is Side.SHORT
        assert position.size == Decimal("10")
        assert position.entry_price == Decimal("150")
        assert position.current_price == Decimal("140")
        assert position.position_value == Decimal("1400")
        assert position.leverage == 5
        assert position.liquidation_price == Decimal("175")
        assert position.roe == Decimal("100") / Decimal("280")
        assert position.protection_applicable is False
        assert position.can_close is False

    def test_camel_case_spot_has_no_liquidation(self):
        position = adapt_orderly({
            "symbol": "SPOT_ETH_USDC",
            "positionQty": "2",
            "averageOpenPrice": "3000",
            "markPrice": "3100",
            "unrealizedPnl": "200",
            "liquidationPrice": "100",
        })

        assert position.symbol == "ETH"
        assert position.market_type is MarketType.SPOT
        assert position.side is Side.LONG
        assert position.liquidation_price is None

    def test_split_unknown_symbol_shape(self):
        assert split_orderly_symbol("ETH-PERP") == ("ETH", MarketType.PERPETUAL)


class TestPolymarketAdapter:
    """Test Polymarket position normalization."""

    def test_outcome_position(self, polymarket_position_data):
        position = adapt_polymarket(polymarket_position_data)

        assert position.symbol == "Will it rain in London tomorrow?"
        assert position.raw_symbol == polymarket_position_data["asset_id"]
        assert position.market_type is MarketType.PREDICTION
        assert position.side is Side.LONG
        assert position.size == Decimal("100")
        assert position.position_value == Decimal("55.00")
        assert position.roe == Decimal("0.375")
        assert position.leverage == 1
        assert position.liquidation_price is None

    def test_sell_side_label(self, polymarket_position_data):
        polymarket_position_data["side"] = "SELL"
        assert adapt_polymarket(polymarket_position_data).side is Side.SHORT

    def test_unknown_side_label_flagged(self, polymarket_position_data):
        polymarket_position_data["side"] = "sideways"
        position = adapt_polymarket(polymarket_position_data)

        assert position.side is Side.LONG
        assert position.is_flagged

    def test_missing_side_flagged(self, polymarket_position_data):
        del polymarket_position_data["side"]
        position = adapt_polymarket(polymarket_position_data)

        assert position.size == Decimal("100")
        assert "missing side" in position.issues


class TestFieldNormalizers:
    """Test per-field normalization helpers."""

    @pytest.mark.parametrize("raw,expected", [
        (10, (10, True)),
        ("20", (20, True)),
        ({"type": "isolated", "value": "3"}, (3, True)),
        ({"type": "cross", "value": 7}, (7, True)),
        (None, (1, True)),
        ("x", (1, False)),
        (0, (1, False)),
    ])
    def test_normalize_leverage(self, raw, expected):
        assert normalize_leverage(raw) == expected

    @pytest.mark.parametrize("label,expected", [
        ("BUY", Side.LONG),
        ("long", Side.LONG),
        ("Sell", Side.SHORT),
        ("short", Side.SHORT),
        ("hold", None),
        (None, None),
    ])
    def test_side_from_label(self, label, expected):
        assert side_from_label(label) is expected

    def test_unknown_venue_raises(self):
        with pytest.raises(UnsupportedVenueError):
            adapt("binance", {"coin": "BTC"})


class TestProtectiveOrderAdapter:
    """Test protective order normalization."""

    def test_stop_loss(self):
        order = adapt_protective_order(
            {"coin": "ETH", "oid": 101, "reduceOnly": True, "tpsl": "sl", "triggerPx": "2800"}
        )

        assert order is not None
        assert order.kind is ProtectiveKind.STOP_LOSS
        assert order.trigger_or_limit_price == Decimal("2800")
        assert order.order_id == "101"

    def test_limit_price_fallback(self):
        order = adapt_protective_order(
            {"coin": "ETH", "reduceOnly": True, "tpsl": "tp", "limitPx": "3600"}
        )
        assert order.kind is ProtectiveKind.TAKE_PROFIT
        assert order.trigger_or_limit_price == Decimal("3600")

    def test_zero_trigger_price_is_kept(self):
        order = adapt_protective_order(
            {"coin": "ETH", "reduceOnly": True, "tpsl": "sl", "triggerPx": "0", "limitPx": "2750"}
        )
        assert order.trigger_or_limit_price == Decimal("0")

    def test_not_reduce_only_is_ignored(self):
        assert adapt_protective_order(
            {"coin": "ETH", "reduceOnly": False, "tpsl": "sl", "triggerPx": "2800"}
        ) is None

    def test_untagged_order_is_ignored(self):
        assert adapt_protective_order({"coin": "ETH", "reduceOnly": True, "limitPx": "2800"}) is None

    def test_missing_price_is_ignored(self):
        assert adapt_protective_order({"coin": "ETH", "reduceOnly": True, "tpsl": "sl"}) is None
