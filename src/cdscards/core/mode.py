"""Interaction mode and the gate every side effect passes through.

In :attr:`Mode.DEMONSTRATION` cards still render with all their affordances,
but nothing leaves the process: no feedback is dispatched, the card store is
never asked to remove anything, and links are not opened. Handlers ask the
gate before each side effect instead of threading a boolean around.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .settings import get_logger

logger = get_logger(__name__)


class Mode(StrEnum):
    LIVE = "live"
    DEMONSTRATION = "demonstration"


@dataclass(frozen=True, slots=True)
class ModeGate:
    """Answers whether a named side effect may run in the current mode."""

    mode: Mode = Mode.LIVE

    @property
    def is_live(self) -> bool:
        return self.mode is Mode.LIVE

    def allows(self, action: str) -> bool:
        """Return True if ``action`` may run; log the suppression otherwise."""
        if self.is_live:
            return True
        logger.debug("Suppressed %s in demonstration mode", action)
        return False


__all__ = ["Mode", "ModeGate"]
