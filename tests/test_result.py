"""Unit tests for the Result container and the card response loader."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cdscards.core.loader import load_card_response, parse_card_response
from cdscards.core.result import Err, Result, err, ok


def test_ok_map_and_unwrap() -> None:
    """`Ok` should map and unwrap its value."""
    r: Result[int, str] = ok(10)
    assert r.map(lambda x: x + 5).unwrap() == 15
    assert r.is_ok() and not r.is_err()


def test_err_propagation() -> None:
    """`Err` should pass through map and expose its error."""
    r: Result[int, str] = err("boom")
    mapped = r.map(lambda x: x + 1)
    assert isinstance(mapped, Err) and mapped.unwrap_err() == "boom"
    assert r.get_or(7) == 7
    with pytest.raises(RuntimeError):
        r.unwrap()


def test_parse_card_response_tags_service_url() -> None:
    """Cards without a serviceUrl inherit the one given to the parser."""
    payload = {
        "cards": [
            {"summary": "A", "indicator": "info"},
            {"summary": "B", "indicator": "warning", "serviceUrl": "https://other.example"},
        ]
    }
    cards = parse_card_response(payload, service_url="https://cds.example").unwrap().cards

    assert cards[0].service_url == "https://cds.example"
    assert cards[1].service_url == "https://other.example"


def test_parse_card_response_reports_invalid_payload() -> None:
    """A card without a summary is reported as Err, not raised."""
    result = parse_card_response({"cards": [{"indicator": "info"}]})
    assert result.is_err()
    assert "Invalid card response" in result.unwrap_err()


def test_load_card_response_handles_bad_files(tmp_path: Path) -> None:
    """Unreadable JSON and non-object JSON both come back as Err."""
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    listing = tmp_path / "list.json"
    listing.write_text(json.dumps([1, 2]), encoding="utf-8")

    assert load_card_response(broken).is_err()
    assert load_card_response(listing).is_err()
