"""Dismissing (overriding) a card."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from cdscards.context import InteractionContext
from cdscards.core.contracts.card import Card, OverrideReason
from cdscards.core.settings import get_logger

logger = get_logger(__name__)


class DismissalOutcome(StrEnum):
    SUPPRESSED = "suppressed"
    UNFEEDBACKABLE = "unfeedbackable"
    DISMISSED = "dismissed"


@dataclass(slots=True)
class DismissalHandler:
    context: InteractionContext

    def dismiss(self, card: Card, reason: OverrideReason | None = None) -> DismissalOutcome:
        """Report ``card`` as overridden and ask the store to drop it.

        The removal request is issued right after the dispatch is scheduled
        and does not depend on whether the feedback is ever delivered. A card
        without a uuid has no key for either step and is left untouched.
        """
        if not self.context.gate.allows("card dismissal"):
            return DismissalOutcome.SUPPRESSED

        if not card.uuid:
            logger.error("Cannot dismiss a card without a uuid: %r", card.summary)
            return DismissalOutcome.UNFEEDBACKABLE

        record = self.context.composer.compose_overridden(card.uuid, reason)
        self.context.dispatcher.dispatch(card.service_url, record)

        self.context.store.remove_card(card.service_url, card.uuid)
        return DismissalOutcome.DISMISSED


__all__ = ["DismissalHandler", "DismissalOutcome"]
