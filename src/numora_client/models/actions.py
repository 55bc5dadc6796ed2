"""
Close/cancel outcome models for Numora client.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class CloseOutcome(Enum):
    """Outcome of a single close or cancel attempt."""
    CLOSED = "closed"
    CANCELLED_ORDER = "cancelledOrder"
    FAILED = "failed"


@dataclass(frozen=True)
class CloseResult:
    """Result of closing one position or cancelling one order."""
    target: str
    outcome: CloseOutcome
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is not CloseOutcome.FAILED


@dataclass(frozen=True)
class BulkCloseSummary:
    """
    Three-way partition returned by close-all.

    Each reported target appears once, in the list the backend put it in.
    """
    closed_positions: Tuple[CloseResult, ...] = ()
    cancelled_orders: Tuple[CloseResult, ...] = ()
    errors: Tuple[CloseResult, ...] = ()

    @property
    def total(self) -> int:
        return len(self.closed_positions) + len(self.cancelled_orders) + len(self.errors)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def toast_text(self) -> str:
        """Summary line shown to the user; zero-count clauses are omitted."""
        parts = []
        if self.closed_positions:
            parts.append(f"Closed {len(self.closed_positions)} position(s).")
        if self.cancelled_orders:
            parts.append(f"Cancelled {len(self.cancelled_orders)} order(s).")
        if self.errors:
            parts.append(f"{len(self.errors)} error(s) occurred.")

        if not parts:
            return "No positions or orders to close"
        return " ".join(parts)
