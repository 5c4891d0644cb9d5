"""Severity ordering for card display.

Cards are shown most urgent first: ``error > critical > warning > info``.
A card whose indicator is missing or not one of the four known severities gets
rank ``-1`` and therefore sorts after every ``info`` card.

Equal ranks carry no ordering promise. ``sorted`` happens to be stable, but
callers must not depend on the relative order of equally severe cards.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .contracts.card import Card, Severity

SEVERITY_RANK: Mapping[Severity, int] = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.CRITICAL: 2,
    Severity.ERROR: 3,
}

#: Rank for cards with an absent or unrecognised indicator.
UNKNOWN_SEVERITY_RANK = -1


def severity_rank(card: Card) -> int:
    """Return the display rank of ``card``; higher is more urgent."""
    severity = card.severity
    if severity is None:
        return UNKNOWN_SEVERITY_RANK
    return SEVERITY_RANK[severity]


def order_cards(cards: Iterable[Card]) -> list[Card]:
    """Return ``cards`` ordered by severity, highest priority first."""
    return sorted(cards, key=severity_rank, reverse=True)


__all__ = ["SEVERITY_RANK", "UNKNOWN_SEVERITY_RANK", "order_cards", "severity_rank"]
