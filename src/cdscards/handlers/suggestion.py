"""Accepting a card suggestion.

Flow
----
1. **Gate**: in demonstration mode nothing happens (``SUPPRESSED``).
2. **Validate**: a suggestion without a label is malformed. It is logged and
   dropped; no feedback, no callback (``MALFORMED``).
3. **Feedback**: with a suggestion uuid and a card uuid, an ``accepted``
   record is composed and dispatched. The dispatch is not awaited.
4. **Notify**: the caller's ``take_suggestion`` callback runs for every
   labelled suggestion, whether or not feedback could be sent
   (``ACCEPTED`` / ``ACCEPTED_WITHOUT_FEEDBACK``).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from cdscards.context import InteractionContext
from cdscards.core.contracts.card import Card, Suggestion
from cdscards.core.settings import get_logger

logger = get_logger(__name__)


class SuggestionOutcome(StrEnum):
    SUPPRESSED = "suppressed"
    MALFORMED = "malformed"
    ACCEPTED = "accepted"
    ACCEPTED_WITHOUT_FEEDBACK = "accepted_without_feedback"


@dataclass(slots=True)
class SuggestionHandler:
    context: InteractionContext
    take_suggestion: Callable[[Suggestion], object]

    def take(self, card: Card, suggestion: Suggestion) -> SuggestionOutcome:
        """Accept ``suggestion`` from ``card``; see the module docstring."""
        if not self.context.gate.allows("suggestion acceptance"):
            return SuggestionOutcome.SUPPRESSED

        if not suggestion.is_actionable:
            logger.error("There was no label on this suggestion: %r", suggestion)
            return SuggestionOutcome.MALFORMED

        record = self.context.composer.compose_accepted(suggestion, card.uuid)
        if record is not None:
            self.context.dispatcher.dispatch(card.service_url, record)

        self.take_suggestion(suggestion)

        if record is None:
            logger.info("Suggestion %r taken without feedback (missing uuid)", suggestion.label)
            return SuggestionOutcome.ACCEPTED_WITHOUT_FEEDBACK
        return SuggestionOutcome.ACCEPTED


__all__ = ["SuggestionHandler", "SuggestionOutcome"]
