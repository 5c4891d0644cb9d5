from __future__ import annotations

from .card_list import (
    NO_CARDS,
    CardList,
    CardListView,
    CardView,
    NoCards,
    build_card_list,
    build_card_view,
)

__all__ = [
    "NO_CARDS",
    "CardList",
    "CardListView",
    "CardView",
    "NoCards",
    "build_card_list",
    "build_card_view",
]
