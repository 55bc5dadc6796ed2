"""
User-facing notifications.

Every mutating action reports its outcome as exactly one terminal toast.
The Notifier keeps them for the UI layer and mirrors them to the log.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class ToastVariant(Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Toast:
    """One notification shown to the user."""
    title: str
    description: str
    variant: ToastVariant = ToastVariant.DEFAULT
    duration_ms: Optional[int] = None


class Notifier:
    """Collects toasts and optionally forwards them to a UI sink."""

    def __init__(self, sink: Optional[Callable[[Toast], None]] = None):
        self._sink = sink
        self._history: List[Toast] = []

    def notify(
        self,
        title: str,
        description: str,
        variant: ToastVariant = ToastVariant.DEFAULT,
        duration_ms: Optional[int] = None,
    ) -> Toast:
        toast = Toast(title, description, variant, duration_ms)
        self._history.append(toast)

        if variant is ToastVariant.DESTRUCTIVE:
            logger.warning(f"{title}: {description}")
        else:
            logger.info(f"{title}: {description}")

        if self._sink is not None:
            self._sink(toast)
        return toast

    def error(self, title: str, description: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(title, description, ToastVariant.DESTRUCTIVE, duration_ms)

    @property
    def history(self) -> List[Toast]:
        return list(self._history)

    @property
    def last(self) -> Optional[Toast]:
        return self._history[-1] if self._history else None

    def clear(self) -> None:
        self._history.clear()
