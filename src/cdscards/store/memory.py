"""
Card store: the shared source of active cards.

Responsibilities
----------------
- **Ingest**: Keep the latest response of each CDS service, keyed by service URL.
- **Read**: Aggregate the active cards of some or all services for a rendering pass.
- **Remove**: Drop a single card by `(service_url, card_uuid)` after a dismissal.

The interaction engine only ever *requests* removal through :class:`CardStore`;
it never edits card collections itself. :class:`InMemoryCardStore` applies each
request under a lock, so a reader never observes a half-applied removal.

Note on Persistence
-------------------
This is a volatile memory store; a restart forgets every card. Hosts that keep
cards elsewhere implement the :class:`CardStore` protocol instead.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from typing import ClassVar, Protocol

from cdscards.core.contracts.card import Card, CardResponse


class CardStore(Protocol):
    def get_cards(self, service_urls: Iterable[str] | None = None) -> CardResponse: ...

    def remove_card(self, service_url: str, card_uuid: str) -> None: ...


class InMemoryCardStore:
    """
    A dictionary-backed store of card responses per service.
    """

    _instance: ClassVar[InMemoryCardStore | None] = None

    def __init__(self) -> None:
        self._responses: dict[str, tuple[Card, ...]] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> InMemoryCardStore:
        """Accessor for the process-wide instance used by the API."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def put_response(self, service_url: str, response: CardResponse) -> int:
        """
        Replace the active cards of ``service_url`` with ``response``.

        Each card is tagged with ``service_url`` so later feedback and
        removal requests can find their way back.

        Returns
        -------
        int
            Number of cards now active for the service.
        """
        tagged = tuple(card.model_copy(update={"service_url": service_url}) for card in response.cards)
        with self._lock:
            self._responses[service_url] = tagged
        return len(tagged)

    def get_cards(self, service_urls: Iterable[str] | None = None) -> CardResponse:
        """Return the active cards of the given services (all when None)."""
        with self._lock:
            urls = list(self._responses) if service_urls is None else list(service_urls)
            cards = [card for url in urls for card in self._responses.get(url, ())]
        return CardResponse(cards=tuple(cards))

    def remove_card(self, service_url: str, card_uuid: str) -> None:
        """Drop the card ``card_uuid`` of ``service_url``; unknown keys are ignored."""
        with self._lock:
            cards = self._responses.get(service_url)
            if cards is None:
                return
            self._responses[service_url] = tuple(c for c in cards if c.uuid != card_uuid)

    def services(self) -> list[str]:
        with self._lock:
            return list(self._responses)

    def clear(self) -> None:
        with self._lock:
            self._responses.clear()


def get_card_store() -> InMemoryCardStore:
    return InMemoryCardStore.get_instance()


__all__ = ["CardStore", "InMemoryCardStore", "get_card_store"]
