# -*- coding: utf-8 -*-
"""
Tests for prediction-market order submission behind the balance guard.
"""

import pytest
from decimal import Decimal

from numora_client.bridge_launcher import BridgeLauncher, PopupBlocked, PopupHandle
from numora_client.http_client import BackendError, HttpServerError
from numora_client.models import BridgeAsset, EmbeddedWallet, OrderResponse, PredictionOrder
from numora_client.order_entry import PredictionOrderEntry, SubmitStatus, bridge_instructions
from numora_client.balance_guard import check_balance
from numora_client.notifications import ToastVariant

POLYGON_ADDRESS = "0x2222222222222222222222222222222222222222"


def make_order(**overrides) -> PredictionOrder:
    values = dict(
        event_id="0xcondition",
        outcome="Yes",
        token_id="12345",
        side="BUY",
        order_type="limit",
        price=Decimal("0.40"),
        size=Decimal("50"),
    )
    values.update(overrides)
    return PredictionOrder(**values)


@pytest.fixture
def entry(mock_dashboard_client, notifier, mock_window_opener):
    return PredictionOrderEntry(mock_dashboard_client, notifier, BridgeLauncher(mock_window_opener))


class TestValidation:
    """Test pre-submit validation toasts."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides,title", [
        ({"token_id": ""}, "Invalid Market"),
        ({"size": Decimal("0")}, "Invalid Size"),
        ({"price": Decimal("0")}, "Invalid Price"),
        ({"price": Decimal("1.01")}, "Invalid Price"),
    ])
    async def test_invalid_orders(self, entry, mock_dashboard_client, notifier, overrides, title):
        result = await entry.submit(make_order(**overrides))

        assert result.status is SubmitStatus.INVALID
        assert [t.title for t in notifier.history] == [title]
        mock_dashboard_client.place_prediction_order.assert_not_called()


class TestGating:
    """Test the insufficient-balance branch."""

    @pytest.mark.asyncio
    async def test_usdc_shortfall_opens_bridge(self, entry, mock_dashboard_client, notifier,
                                               mock_window_opener, snapshot_factory):
        mock_dashboard_client.state.replace_balances(snapshot_factory(usdc="5", matic="0.5"))

        result = await entry.submit(make_order())

        assert result.status is SubmitStatus.GATED
        assert result.check.required_usdc_amount == Decimal("15")
        assert isinstance(result.popup, PopupHandle)
        assert result.popup.asset is BridgeAsset.USDC
        url = mock_window_opener.open.call_args.args[0]
        assert f"destinationAddress={POLYGON_ADDRESS}" in url
        assert url.endswith("&amount=15")
        mock_dashboard_client.place_prediction_order.assert_not_called()

        assert [t.title for t in notifier.history] == ["Bridge Opened"]
        assert notifier.last.description == (
            "Need 15.00 more USDC. Bridge 15.00 USDC to complete your trade. Balances refresh every 10 seconds."
        )
        assert notifier.last.duration_ms == 10000

    @pytest.mark.asyncio
    async def test_gas_bridged_first(self, entry, mock_dashboard_client, notifier,
                                     mock_window_opener, snapshot_factory):
        mock_dashboard_client.state.replace_balances(snapshot_factory(usdc="5", matic="0"))

        result = await entry.submit(make_order())

        assert result.popup.asset is BridgeAsset.MATIC
        assert mock_window_opener.open.call_args.args[0].endswith("&amount=0.01")
        assert len(notifier.history) == 1
        assert notifier.last.description == (
            "Need 15.00 more USDC and Need 0.01 MATIC for gas. "
            "Bridge 0.0100 MATIC for gas first, then click Place Order again to bridge 15.00 USDC."
        )

    @pytest.mark.asyncio
    async def test_popup_blocked(self, entry, mock_dashboard_client, notifier,
                                 mock_window_opener, snapshot_factory):
        mock_dashboard_client.state.replace_balances(snapshot_factory(usdc="5", matic="0.5"))
        mock_window_opener.open.return_value = None

        result = await entry.submit(make_order())

        assert isinstance(result.popup, PopupBlocked)
        assert [t.title for t in notifier.history] == ["Popup Blocked"]
        assert notifier.last.description == (
            "Need 15.00 more USDC. Please allow popups and click Place Order again to bridge funds"
        )
        assert notifier.last.variant is ToastVariant.DESTRUCTIVE

    @pytest.mark.asyncio
    async def test_no_cached_balances_gates(self, entry, mock_dashboard_client):
        result = await entry.submit(make_order())

        assert result.status is SubmitStatus.GATED
        mock_dashboard_client.place_prediction_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_polygon_address(self, entry, mock_dashboard_client, notifier,
                                           mock_window_opener, snapshot_factory):
        mock_dashboard_client.state.replace_balances(snapshot_factory(usdc="5", matic="0.5"))
        mock_dashboard_client.get_embedded_wallet.return_value = EmbeddedWallet()

        result = await entry.submit(make_order())

        assert result.status is SubmitStatus.GATED
        assert result.popup is None
        mock_window_opener.open.assert_not_called()
        assert [t.title for t in notifier.history] == ["No Polygon Deposit Address"]
        assert notifier.last.variant is ToastVariant.DESTRUCTIVE
        assert notifier.last.description.startswith("Need 15.00 more USDC. ")

    @pytest.mark.asyncio
    async def test_wallet_lookup_failure(self, entry, mock_dashboard_client, notifier,
                                         mock_window_opener, snapshot_factory):
        mock_dashboard_client.state.replace_balances(snapshot_factory(usdc="5", matic="0.5"))
        mock_dashboard_client.get_embedded_wallet.side_effect = HttpServerError("down", status_code=503)

        result = await entry.submit(make_order())

        assert result.popup is None
        mock_window_opener.open.assert_not_called()
        assert [t.title for t in notifier.history] == ["No Polygon Deposit Address"]


class TestPlacement:
    """Test the sufficient-balance branch."""

    @pytest.mark.asyncio
    async def test_order_placed(self, entry, mock_dashboard_client, notifier, snapshot_factory):
        mock_dashboard_client.state.replace_balances(snapshot_factory(usdc="100", matic="1"))
        mock_dashboard_client.place_prediction_order.return_value = OrderResponse(success=True, order_id="0x1")
        order = make_order()

        result = await entry.submit(order)

        assert result.status is SubmitStatus.PLACED
        assert result.response.order_id == "0x1"
        mock_dashboard_client.place_prediction_order.assert_awaited_once_with(order)
        assert [t.title for t in notifier.history] == ["Order Placed"]
        assert notifier.last.description == "Yes order placed successfully"

    @pytest.mark.asyncio
    async def test_order_failed(self, entry, mock_dashboard_client, notifier, snapshot_factory):
        mock_dashboard_client.state.replace_balances(snapshot_factory(usdc="100", matic="1"))
        mock_dashboard_client.place_prediction_order.side_effect = BackendError("Market closed")

        result = await entry.submit(make_order())

        assert result.status is SubmitStatus.FAILED
        assert [t.title for t in notifier.history] == ["Order Failed"]
        assert notifier.last.description == "Market closed"


class TestBridgeInstructions:
    """Test instruction text for the opened widget."""

    def test_gas_only(self):
        check = check_balance(Decimal("1"), Decimal("10"), Decimal("0"), Decimal("0.01"))
        assert bridge_instructions(check) == (
            "Bridge 0.0100 MATIC for gas fees to complete your trade. Balances refresh every 10 seconds."
        )
