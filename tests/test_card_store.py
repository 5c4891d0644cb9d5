"""Unit tests for the in-memory card store."""

from __future__ import annotations

from cdscards.core.contracts.card import CardResponse
from cdscards.store.memory import InMemoryCardStore, get_card_store

from conftest import make_card

A = "https://cds.example/a"
B = "https://cds.example/b"


def test_put_response_tags_cards_with_service() -> None:
    store = InMemoryCardStore()
    count = store.put_response(A, CardResponse(cards=(make_card(uuid="1", serviceUrl=""),)))

    assert count == 1
    assert store.get_cards().cards[0].service_url == A


def test_get_cards_aggregates_and_filters_services() -> None:
    store = InMemoryCardStore()
    store.put_response(A, CardResponse(cards=(make_card(uuid="a1"),)))
    store.put_response(B, CardResponse(cards=(make_card(uuid="b1"), make_card(uuid="b2"))))

    assert {c.uuid for c in store.get_cards().cards} == {"a1", "b1", "b2"}
    assert [c.uuid for c in store.get_cards([A]).cards] == ["a1"]
    assert store.get_cards(["https://unknown"]).cards == ()
    assert store.services() == [A, B]


def test_remove_card_is_keyed_by_service_and_uuid() -> None:
    store = InMemoryCardStore()
    store.put_response(A, CardResponse(cards=(make_card(uuid="same"),)))
    store.put_response(B, CardResponse(cards=(make_card(uuid="same"),)))

    store.remove_card(A, "same")
    store.remove_card("https://unknown", "same")

    assert [c.service_url for c in store.get_cards().cards] == [B]


def test_put_response_replaces_previous_cards() -> None:
    store = InMemoryCardStore()
    store.put_response(A, CardResponse(cards=(make_card(uuid="old"),)))
    store.put_response(A, CardResponse(cards=(make_card(uuid="new"),)))
    assert [c.uuid for c in store.get_cards().cards] == ["new"]

    store.clear()
    assert store.get_cards().cards == ()


def test_get_card_store_is_singleton() -> None:
    assert get_card_store() is get_card_store()
