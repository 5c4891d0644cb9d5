"""Feedback contracts: what is POSTed back to a CDS service.

- `FeedbackRecord`   : how one card was resolved (`accepted` / `overridden`).
- `FeedbackEnvelope` : the `{feedback: [record]}` request body.

Contract notes
--------------
- `outcome="accepted"` records carry exactly one `acceptedSuggestions` entry.
- `outcome="overridden"` records never carry `acceptedSuggestions`.
- `overrideReason.reason.system` only exists next to a `code`; the nested
  model makes `code` required, so a system can never appear alone.
- Optional fields are omitted from the wire payload rather than sent as null;
  use :meth:`FeedbackRecord.to_wire`.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Outcome = Literal["accepted", "overridden"]


def iso_timestamp(moment: datetime | None = None) -> str:
    """Format ``moment`` (default: now) as UTC ISO-8601 with millis and `Z`."""
    moment = moment or datetime.now(UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _Wire(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AcceptedSuggestion(_Wire):
    id: str


class ReasonCoding(_Wire):
    code: str
    system: str | None = None


class OverrideReasonPayload(_Wire):
    reason: ReasonCoding


class FeedbackRecord(_Wire):
    """A single card outcome reported to the originating service."""

    card: str = Field(description="UUID of the card the outcome refers to.")
    outcome: Outcome
    outcome_timestamp: str = Field(alias="outcomeTimestamp")
    accepted_suggestions: tuple[AcceptedSuggestion, ...] | None = Field(
        default=None, alias="acceptedSuggestions"
    )
    override_reason: OverrideReasonPayload | None = Field(default=None, alias="overrideReason")

    @model_validator(mode="after")
    def _outcome_shape(self) -> FeedbackRecord:
        if self.outcome == "accepted":
            if self.accepted_suggestions is None or len(self.accepted_suggestions) != 1:
                raise ValueError("accepted feedback must name exactly one suggestion")
        elif self.accepted_suggestions is not None:
            raise ValueError("overridden feedback cannot carry acceptedSuggestions")
        return self

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase JSON payload with absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FeedbackEnvelope(_Wire):
    """Request body for `POST {serviceUrl}/feedback`."""

    feedback: tuple[FeedbackRecord, ...]

    @classmethod
    def single(cls, record: FeedbackRecord) -> FeedbackEnvelope:
        return cls(feedback=(record,))

    def to_wire(self) -> dict[str, Any]:
        return {"feedback": [record.to_wire() for record in self.feedback]}


__all__ = [
    "AcceptedSuggestion",
    "FeedbackEnvelope",
    "FeedbackRecord",
    "Outcome",
    "OverrideReasonPayload",
    "ReasonCoding",
    "iso_timestamp",
]
