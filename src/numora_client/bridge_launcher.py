"""
Bridge Launcher - opens the external bridging widget in a pop-up.

The widget has no return channel: the launcher does not track completion.
The user retries the gated action once bridging is done, and the balance
refresh loop picks the new funds up.
"""

import logging
import webbrowser
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Protocol, Union
from urllib.parse import quote

from .constants import BRIDGE_WINDOW_NAME
from .models.bridge import BridgeAsset, PopupRequest
from .models.config import PopupConfig
from .utils import shorten_address

logger = logging.getLogger(__name__)

POPUP_BLOCKED_MESSAGE = "Please allow popups and click Place Order again to bridge funds"

_MISSING = object()


class WindowOpener(Protocol):
    """Anything that can open a named window, like ``window.open``."""

    def open(self, url: str, name: str, features: str) -> Optional[Any]:
        ...


@dataclass
class BrowserWindow:
    """Handle for a window opened through the system browser."""
    url: str
    closed: bool = False


class BrowserWindowOpener:
    """Opens the widget in a new browser window via ``webbrowser``."""

    def open(self, url: str, name: str, features: str) -> Optional[BrowserWindow]:
        if not webbrowser.open_new(url):
            return None
        return BrowserWindow(url=url)


@dataclass(frozen=True)
class PopupHandle:
    """An opened bridging widget window."""
    window: Any
    request: PopupRequest
    asset: BridgeAsset
    amount: Optional[Decimal]


@dataclass(frozen=True)
class PopupBlocked:
    """The pop-up could not be opened; the user must allow pop-ups and retry."""
    request: PopupRequest
    message: str = POPUP_BLOCKED_MESSAGE


def is_popup_blocked(popup: Any) -> bool:
    """
    True when a pop-up reference signals blocking.

    Browsers disagree on how they report it: a null reference, a window
    that is already closed, or a window whose ``closed`` is undefined.
    """
    if popup is None:
        return True
    closed = getattr(popup, "closed", _MISSING)
    if closed is _MISSING or closed is None:
        return True
    return bool(closed)


def format_amount(amount: Decimal) -> str:
    """Plain decimal notation without trailing zeros."""
    text = format(amount.normalize(), "f")
    return text


def build_bridge_url(
    destination_address: str,
    destination_chain_id: int,
    bridge_host: str,
    amount: Optional[Decimal] = None,
) -> str:
    """Widget URL with the destination pre-filled."""
    encoded = quote(destination_address, safe="")
    url = (
        f"https://{bridge_host}/swap?destinationAddress={encoded}"
        f"&destinationChainId={destination_chain_id}"
    )
    if amount:
        url += f"&amount={format_amount(amount)}"
    return url


class BridgeLauncher:
    """Opens the bridging widget pre-filled for one destination wallet."""

    def __init__(
        self,
        opener: Optional[WindowOpener] = None,
        popup_config: Optional[PopupConfig] = None,
    ):
        self._opener = opener or BrowserWindowOpener()
        self._config = popup_config or PopupConfig()

    def build_request(
        self,
        destination_address: str,
        minimum_amount: Optional[Decimal] = None,
    ) -> PopupRequest:
        if not destination_address:
            raise ValueError("Destination address is required")

        features = (
            f"width={self._config.width},height={self._config.height},"
            f"scrollbars=yes,resizable=yes"
        )
        return PopupRequest(
            url=build_bridge_url(
                destination_address,
                self._config.destination_chain_id,
                self._config.bridge_host,
                minimum_amount,
            ),
            window_name=BRIDGE_WINDOW_NAME,
            features=features,
        )

    def open(
        self,
        destination_address: str,
        asset: BridgeAsset,
        minimum_amount: Optional[Decimal] = None,
    ) -> Union[PopupHandle, PopupBlocked]:
        """Open the widget; returns PopupBlocked instead of failing silently."""
        request = self.build_request(destination_address, minimum_amount)
        popup = self._opener.open(request.url, request.window_name, request.features)

        if is_popup_blocked(popup):
            logger.warning(f"Bridge popup blocked for {asset.value}: {request.url}")
            return PopupBlocked(request=request)

        logger.info(f"Opened bridge popup for {asset.value} to {shorten_address(destination_address)}")
        return PopupHandle(window=popup, request=request, asset=asset, amount=minimum_amount)
