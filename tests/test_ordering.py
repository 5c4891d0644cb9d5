"""Tests for severity ordering of cards."""

from __future__ import annotations

from cdscards.core.ordering import UNKNOWN_SEVERITY_RANK, order_cards, severity_rank

from conftest import make_card


def test_orders_error_critical_warning_info() -> None:
    cards = [
        make_card(summary="i", indicator="info"),
        make_card(summary="e", indicator="error"),
        make_card(summary="w", indicator="warning"),
        make_card(summary="c", indicator="critical"),
    ]
    assert [c.indicator for c in order_cards(cards)] == ["error", "critical", "warning", "info"]


def test_unknown_and_missing_indicators_sort_last() -> None:
    cards = [
        make_card(summary="none", indicator=None),
        make_card(summary="info", indicator="info"),
        make_card(summary="odd", indicator="urgent"),
        make_card(summary="crit", indicator="critical"),
    ]
    ordered = order_cards(cards)

    assert [c.summary for c in ordered[:2]] == ["crit", "info"]
    assert {c.summary for c in ordered[2:]} == {"none", "odd"}
    assert severity_rank(ordered[-1]) == UNKNOWN_SEVERITY_RANK


def test_ordering_does_not_touch_input() -> None:
    cards = [make_card(indicator="info"), make_card(indicator="error")]
    snapshot = list(cards)
    order_cards(cards)
    assert cards == snapshot


def test_empty_input() -> None:
    assert order_cards([]) == []
