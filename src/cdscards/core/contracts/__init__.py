"""Pydantic contracts for inbound cards and outbound feedback."""

from __future__ import annotations

from .card import Card, CardResponse, Link, OverrideReason, Severity, Source, Suggestion
from .feedback import (
    AcceptedSuggestion,
    FeedbackEnvelope,
    FeedbackRecord,
    OverrideReasonPayload,
    ReasonCoding,
    iso_timestamp,
)

__all__ = [
    "AcceptedSuggestion",
    "Card",
    "CardResponse",
    "FeedbackEnvelope",
    "FeedbackRecord",
    "Link",
    "OverrideReason",
    "OverrideReasonPayload",
    "ReasonCoding",
    "Severity",
    "Source",
    "Suggestion",
    "iso_timestamp",
]
