"""
Dashboard state - independently owned caches.

Each cache is written only by its own fetch-and-replace cycle and read by
everyone else. A write swaps the whole value; nothing is merged or patched.
"""

import time
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .aggregator import aggregate
from .models.positions import Exchange, Position
from .models.wallet import BalanceSnapshot

T = TypeVar("T")


class CacheEntry(Generic[T]):
    """Single cached value with its own refresh bookkeeping."""

    def __init__(self, name: str):
        self.name = name
        self._value: Optional[T] = None
        self._updated_at: Optional[float] = None
        self._version = 0
        self._stale = True

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def updated_at(self) -> Optional[float]:
        return self._updated_at

    @property
    def version(self) -> int:
        """Incremented on every replacement."""
        return self._version

    @property
    def is_stale(self) -> bool:
        return self._stale

    def replace(self, value: T) -> None:
        """Swap in a freshly fetched value."""
        self._value = value
        self._updated_at = time.time()
        self._version += 1
        self._stale = False

    def invalidate(self) -> None:
        """Mark the value for refetch; the old value stays readable until then."""
        self._stale = True


class DashboardState:
    """Positions, protective orders and balances as last fetched."""

    def __init__(self):
        self.positions: CacheEntry[Dict[Exchange, Tuple[Mapping[str, Any], ...]]] = CacheEntry("positions")
        self.protective_orders: CacheEntry[Tuple[Mapping[str, Any], ...]] = CacheEntry("orders")
        self.balances: CacheEntry[BalanceSnapshot] = CacheEntry("balances")

    def replace_positions(self, raw_by_exchange: Mapping[Exchange, Sequence[Mapping[str, Any]]]) -> None:
        self.positions.replace({
            exchange: tuple(records) for exchange, records in raw_by_exchange.items()
        })

    def replace_orders(self, raw_orders: Sequence[Mapping[str, Any]]) -> None:
        self.protective_orders.replace(tuple(raw_orders))

    def replace_balances(self, snapshot: BalanceSnapshot) -> None:
        self.balances.replace(snapshot)

    def invalidate_trading(self) -> None:
        """Positions and orders must be refetched after a close."""
        self.positions.invalidate()
        self.protective_orders.invalidate()

    def aggregated_positions(self) -> List[Position]:
        """Join the latest positions with the latest protective orders."""
        raw_positions = self.positions.value or {}
        raw_orders = self.protective_orders.value or ()
        return aggregate(raw_positions, raw_orders)
