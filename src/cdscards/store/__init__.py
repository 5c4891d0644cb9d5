from __future__ import annotations

from .memory import CardStore, InMemoryCardStore, get_card_store

__all__ = ["CardStore", "InMemoryCardStore", "get_card_store"]
