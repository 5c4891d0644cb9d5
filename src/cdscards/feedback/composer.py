"""Build schema-correct feedback records for card outcomes.

Two outcomes exist:

- ``accepted``   : the user took one suggestion from the card.
- ``overridden`` : the user dismissed the card, optionally with a coded reason.

An accepted record needs both the suggestion uuid and the card uuid. When
either is missing the composer returns ``None``: the action is still valid for
the caller, there is simply nothing the service could correlate it with.

The timestamp is taken when the record is built. A clock can be injected so
tests get deterministic values.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from cdscards.core.contracts.card import OverrideReason, Suggestion
from cdscards.core.contracts.feedback import (
    AcceptedSuggestion,
    FeedbackRecord,
    OverrideReasonPayload,
    ReasonCoding,
    iso_timestamp,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class FeedbackComposer:
    clock: Callable[[], datetime] = field(default=_utc_now)

    def compose_accepted(
        self, suggestion: Suggestion, card_uuid: str | None
    ) -> FeedbackRecord | None:
        """Return an ``accepted`` record, or None when uuids are missing."""
        if not suggestion.uuid or not card_uuid:
            return None
        return FeedbackRecord(
            card=card_uuid,
            outcome="accepted",
            accepted_suggestions=(AcceptedSuggestion(id=suggestion.uuid),),
            outcome_timestamp=iso_timestamp(self.clock()),
        )

    def compose_overridden(
        self, card_uuid: str, reason: OverrideReason | None = None
    ) -> FeedbackRecord:
        """Return an ``overridden`` record, attaching ``reason`` when coded."""
        override_reason = None
        if reason is not None and reason.code:
            override_reason = OverrideReasonPayload(
                reason=ReasonCoding(code=reason.code, system=reason.system or None)
            )
        return FeedbackRecord(
            card=card_uuid,
            outcome="overridden",
            override_reason=override_reason,
            outcome_timestamp=iso_timestamp(self.clock()),
        )


__all__ = ["FeedbackComposer"]
