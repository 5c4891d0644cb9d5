"""
Request and response schemas for the cdscards HTTP API.

Card views are flattened into JSON-friendly payloads here so the view module
stays free of transport concerns. Field names follow the camelCase style of
CDS Hooks on the wire.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from cdscards.links.resolver import LaunchResult
from cdscards.view.card_list import CardListView, CardView, NoCards


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --------------------------------------------------------------------------- #
# Requests
# --------------------------------------------------------------------------- #


class ServiceResponseIn(_Schema):
    """A CDS service response to load into the card store."""

    service_url: str = Field(alias="serviceUrl", min_length=1)
    cards: list[dict[str, Any]] = Field(default_factory=list)


class _CardAction(_Schema):
    service_url: str = Field(alias="serviceUrl")
    card_uuid: str = Field(alias="cardUuid")
    demo: bool = Field(default=False, description="Run this action in demonstration mode.")


class AcceptRequest(_CardAction):
    suggestion_index: int = Field(alias="suggestionIndex", ge=0)


class DismissRequest(_CardAction):
    reason_code: str | None = Field(default=None, alias="reasonCode")


class LaunchRequest(_CardAction):
    link_index: int = Field(alias="linkIndex", ge=0)


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


class LoadedOut(_Schema):
    service_url: str = Field(serialization_alias="serviceUrl")
    count: int


class LaunchOut(_Schema):
    url: str | None
    opened: bool
    error: str | None = None

    @classmethod
    def from_result(cls, result: LaunchResult) -> LaunchOut:
        return cls(url=result.url, opened=result.opened, error=result.error)


class ActionOut(_Schema):
    outcome: str
    launch: LaunchOut | None = None


class CardListOut(_Schema):
    status: Literal["ok", "no_cards"]
    message: str | None = None
    cards: list[dict[str, Any]] = Field(default_factory=list)


def card_view_payload(view: CardView) -> dict[str, Any]:
    """Flatten one :class:`CardView` into its JSON payload."""
    card = view.card
    return {
        "uuid": card.uuid,
        "serviceUrl": card.service_url,
        "indicator": card.indicator,
        "summary": view.summary,
        "color": view.color,
        "classes": list(view.classes),
        "source": (
            {"label": view.source.label, "href": view.source.href, "icon": view.source.icon}
            if view.source
            else None
        ),
        "detail": view.detail,
        "suggestions": [
            {"label": b.label, "uuid": b.suggestion.uuid} for b in view.suggestions
        ],
        "links": [
            {
                "label": b.label,
                "type": b.link.type,
                "disabled": b.disabled,
                "notice": b.notice,
            }
            for b in view.links
        ],
        "dismiss": (
            {
                "primaryLabel": view.dismiss.primary_label,
                "options": [
                    {"label": o.label, "code": o.reason.code} for o in view.dismiss.options
                ],
            }
            if view.dismiss
            else None
        ),
    }


def card_list_payload(view: CardListView | NoCards) -> CardListOut:
    if isinstance(view, NoCards):
        return CardListOut(status="no_cards", message=view.message)
    return CardListOut(status="ok", cards=[card_view_payload(v) for v in view.cards])


__all__ = [
    "AcceptRequest",
    "ActionOut",
    "CardListOut",
    "DismissRequest",
    "LaunchOut",
    "LaunchRequest",
    "LoadedOut",
    "ServiceResponseIn",
    "card_list_payload",
    "card_view_payload",
]
