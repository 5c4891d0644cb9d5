"""
Card list view: the display structure of an ordered card set.

Pixels and markup belong to whichever renderer consumes this module (the
Rich-based CLI, the JSON API). What is decided here is the *structure*:

- cards in severity order, each with its summary color and alert classes;
- the source line, only when the source has a label;
- one button per suggestion, one per link (disabled with a notice when a
  link is pre-flagged with an error or a SMART link has no launch context);
- a dismiss control for cards with a uuid, with an ``Override: ...`` option
  per override reason.

An empty card set yields :data:`NO_CARDS`, which is distinguishable from a
view that simply has not been built yet.

:class:`CardList` ties the view to the handlers so a renderer can route button
presses back into the engine.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Final

from cdscards.context import InteractionContext
from cdscards.core.contracts.card import Card, Link, OverrideReason, Severity, Suggestion
from cdscards.core.ordering import order_cards
from cdscards.handlers.dismissal import DismissalHandler, DismissalOutcome
from cdscards.handlers.suggestion import SuggestionHandler, SuggestionOutcome
from cdscards.links.resolver import LaunchResult

SUMMARY_COLORS: Final[dict[Severity, str]] = {
    Severity.INFO: "#0079be",
    Severity.WARNING: "#ffae42",
    Severity.CRITICAL: "#c00",
    Severity.ERROR: "#333",
}

DISMISS_LABEL: Final = "Dismiss"


@dataclass(frozen=True, slots=True)
class SourceView:
    label: str
    href: str
    icon: str | None = None


@dataclass(frozen=True, slots=True)
class SuggestionButton:
    label: str
    suggestion: Suggestion


@dataclass(frozen=True, slots=True)
class LinkButton:
    label: str
    link: Link
    disabled: bool
    notice: str


@dataclass(frozen=True, slots=True)
class OverrideOption:
    label: str
    reason: OverrideReason


@dataclass(frozen=True, slots=True)
class DismissControl:
    primary_label: str = DISMISS_LABEL
    options: tuple[OverrideOption, ...] = ()


@dataclass(frozen=True, slots=True)
class CardView:
    card: Card
    summary: str
    color: str | None
    classes: tuple[str, ...]
    source: SourceView | None = None
    detail: str | None = None
    suggestions: tuple[SuggestionButton, ...] = ()
    links: tuple[LinkButton, ...] = ()
    dismiss: DismissControl | None = None


@dataclass(frozen=True, slots=True)
class CardListView:
    cards: tuple[CardView, ...]

    def __len__(self) -> int:
        return len(self.cards)


class NoCards:
    """Marker for an empty card set. Use the :data:`NO_CARDS` singleton."""

    message: Final = "No Cards"

    def __repr__(self) -> str:
        return "NO_CARDS"


NO_CARDS: Final = NoCards()


def _source_view(card: Card, context: InteractionContext) -> SourceView | None:
    source = card.source
    if source is None or not source.label:
        return None
    href = (source.url or "#") if context.gate.is_live else "#"
    return SourceView(label=source.label, href=href, icon=source.icon)


def _dismiss_control(card: Card) -> DismissControl | None:
    if not card.uuid:
        return None
    return DismissControl(
        options=tuple(
            OverrideOption(label=f"Override: {reason.display or ''}", reason=reason)
            for reason in card.override_reasons
        )
    )


def build_card_view(card: Card, context: InteractionContext) -> CardView:
    """Build the display structure of a single card."""
    severity = card.severity
    classes = ("decision-card", "alert") + ((f"alert-{card.indicator}",) if severity else ())
    return CardView(
        card=card,
        summary=card.summary,
        color=SUMMARY_COLORS.get(severity) if severity else None,
        classes=classes,
        source=_source_view(card, context),
        detail=card.detail or None,
        suggestions=tuple(
            SuggestionButton(label=s.label or "", suggestion=s) for s in card.suggestions
        ),
        links=tuple(
            LinkButton(
                label=link.label,
                link=link,
                disabled=context.links.is_disabled(link),
                notice=context.links.notice_for(link),
            )
            for link in card.links
        ),
        dismiss=_dismiss_control(card),
    )


def build_card_list(cards: Iterable[Card], context: InteractionContext) -> CardListView | NoCards:
    """Order ``cards`` by severity and build their views."""
    views = tuple(build_card_view(card, context) for card in order_cards(cards))
    if not views:
        return NO_CARDS
    return CardListView(cards=views)


@dataclass(slots=True)
class CardList:
    """
    Interactive card list bound to an :class:`InteractionContext`.

    Parameters
    ----------
    context:
        Mode, feedback, store and link collaborators.
    take_suggestion:
        Required callback run when a suggestion is accepted.
    on_app_launch:
        Optional callback run after every link click attempt with the link and
        the launch result (``None`` in demonstration mode).
    service_urls:
        Services whose cards are shown; all services in the store when None.
    """

    context: InteractionContext
    take_suggestion: Callable[[Suggestion], object]
    on_app_launch: Callable[[Link, LaunchResult | None], object] | None = None
    service_urls: tuple[str, ...] | None = None
    _suggestions: SuggestionHandler = field(init=False)
    _dismissals: DismissalHandler = field(init=False)

    def __post_init__(self) -> None:
        self._suggestions = SuggestionHandler(self.context, self.take_suggestion)
        self._dismissals = DismissalHandler(self.context)

    def render(self) -> CardListView | NoCards:
        """Build the view of the cards currently in the store."""
        response = self.context.store.get_cards(self.service_urls)
        return build_card_list(response.cards, self.context)

    def take_suggestion_from(self, card: Card, suggestion: Suggestion) -> SuggestionOutcome:
        return self._suggestions.take(card, suggestion)

    def dismiss(self, card: Card, reason: OverrideReason | None = None) -> DismissalOutcome:
        return self._dismissals.dismiss(card, reason)

    def click_link(self, link: Link) -> LaunchResult | None:
        result = self.context.links.launch(link)
        if self.on_app_launch is not None:
            self.on_app_launch(link, result)
        return result


__all__ = [
    "NO_CARDS",
    "SUMMARY_COLORS",
    "CardList",
    "CardListView",
    "CardView",
    "DismissControl",
    "LinkButton",
    "NoCards",
    "OverrideOption",
    "SourceView",
    "SuggestionButton",
    "build_card_list",
    "build_card_view",
]
