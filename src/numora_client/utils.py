"""
Utility functions for Numora client.

Helper functions and utilities following functional programming principles.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Tuple, Union

from .constants import DISPLAY_SYMBOL_SUFFIXES


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a JSON scalar into Decimal, returning None when absent or malformed."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not result.is_finite():
        return None
    return result


def decimal_or_default(value: Any, default: Decimal = Decimal("0")) -> Tuple[Decimal, bool]:
    """Parse a decimal field; returns (value, was_valid)."""
    parsed = parse_decimal(value)
    if parsed is None:
        return default, value is None or value == ""
    return parsed, True


def strip_display_symbol(symbol: str) -> str:
    """Remove venue decorations (e.g. ``-PERP``, ``-USD``) for display."""
    for suffix in DISPLAY_SYMBOL_SUFFIXES:
        if symbol.endswith(suffix):
            return symbol[: -len(suffix)]
    return symbol


def to_smallest_unit(amount: Union[Decimal, str], decimals: int) -> int:
    """
    Convert a token amount into an integer count of its smallest unit.

    Raises:
        ValueError: If the amount is not a positive number or would leave a
            fractional smallest unit
    """
    value = parse_decimal(amount)
    if value is None:
        raise ValueError(f"Invalid amount: {amount!r}")
    if value <= 0:
        raise ValueError(f"Amount must be positive, got {amount}")

    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(
            f"Amount {amount} has more precision than the token's {decimals} decimals"
        )
    return int(scaled)


def safe_get(data: Dict[str, Any], path: str, default: Any = None) -> Any:
    """Safely get nested dictionary values using dot notation."""
    keys = path.split(".")
    current = data

    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default

    return current


def validate_url(url: str) -> bool:
    """Validate URL format."""
    if not url or not isinstance(url, str):
        return False
    return url.startswith(("http://", "https://")) and "." in url


def shorten_address(address: Optional[str]) -> str:
    """Render a wallet address as ``0x1234...abcd``."""
    if not address:
        return "Loading..."
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"
