"""Card contracts: the inbound shape of a CDS service response.

This module defines Pydantic v2 models for everything the interaction engine
reads from a decision-support response:

- `Card`           : one advisory item with its suggestions, links and
  override reasons.
- `Suggestion`     : a proposed action the user may accept.
- `Link`           : an absolute or SMART link the user may launch.
- `OverrideReason` : a coded justification offered when dismissing a card.
- `Source`         : attribution shown under the card summary.
- `CardResponse`   : the `{cards: [...]}` envelope.

Contract notes
--------------
- Every model is frozen. Cards are shared between the store and every
  renderer, so they are read-only values rather than deep-copied on read.
- Wire names are camelCase (`serviceUrl`, `overrideReasons`); Python code may
  use either the alias or the snake_case field name.
- Only fields the engine consumes are validated. Unknown keys are ignored.
- A malformed nested item degrades on its own: an unknown link `type` is read
  as `absolute`, and an override reason without `display` shows its code.
- `indicator` is kept as the raw string. A missing or unknown indicator still
  renders and sorts (see :mod:`cdscards.core.ordering`).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cdscards.core.settings import get_logger

logger = get_logger(__name__)


class Severity(StrEnum):
    """Urgency classification of a card."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
    ERROR = "error"


class _Contract(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Source(_Contract):
    """Attribution for a card. Rendered only when `label` is present."""

    label: str | None = None
    url: str | None = None
    icon: str | None = Field(default=None, description="URL of an icon image.")


class Suggestion(_Contract):
    """A proposed action. Actionable only when it carries a `label`."""

    label: str | None = None
    uuid: str | None = None

    @property
    def is_actionable(self) -> bool:
        return bool(self.label)


class Link(_Contract):
    """A launchable link. `smart` links need a launch context to resolve."""

    label: str
    url: str | None = None
    type: Literal["absolute", "smart"] = "absolute"
    error: bool | None = Field(
        default=None,
        description="Pre-flagged error condition; launching is aborted when set.",
    )

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_as_absolute(cls, v: object) -> object:
        if v in ("absolute", "smart"):
            return v
        if v is not None:
            logger.warning("Unknown link type %r; treating it as absolute", v)
        return "absolute"

    @property
    def is_smart(self) -> bool:
        return self.type == "smart"


class OverrideReason(_Contract):
    """A coded reason a user can give when dismissing a card."""

    code: str | None = None
    system: str | None = None
    display: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _display_defaults_to_code(cls, data: object) -> object:
        if isinstance(data, dict) and not data.get("display"):
            return {**data, "display": data.get("code")}
        return data


class Card(_Contract):
    """A single advisory item returned by a decision-support service.

    A card without `uuid` can be displayed but can never be the subject of
    feedback: neither its suggestions nor its dismissal can be reported.
    """

    uuid: str | None = None
    indicator: str | None = None
    summary: str
    detail: str | None = None
    source: Source | None = None
    suggestions: tuple[Suggestion, ...] = ()
    links: tuple[Link, ...] = ()
    override_reasons: tuple[OverrideReason, ...] = Field(default=(), alias="overrideReasons")
    service_url: str = Field(default="", alias="serviceUrl")

    @field_validator("suggestions", "links", "override_reasons", mode="before")
    @classmethod
    def _null_as_empty(cls, v: object) -> object:
        """Services sometimes send `null` where an empty list is meant."""
        return () if v is None else v

    @property
    def severity(self) -> Severity | None:
        """Return the parsed severity, or None for a missing/unknown indicator."""
        try:
            return Severity(self.indicator) if self.indicator is not None else None
        except ValueError:
            return None

    @property
    def is_feedbackable(self) -> bool:
        return bool(self.uuid)


class CardResponse(_Contract):
    """The `{cards: [...]}` envelope returned by a CDS service."""

    cards: tuple[Card, ...] = ()


__all__ = [
    "Card",
    "CardResponse",
    "Link",
    "OverrideReason",
    "Severity",
    "Source",
    "Suggestion",
]
