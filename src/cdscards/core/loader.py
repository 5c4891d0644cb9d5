"""Load CDS service responses without raising at the user-facing boundary.

Both the CLI and the API accept card payloads from outside the process. These
helpers validate them into :class:`CardResponse` and report failures as
``Err(message)`` so that callers decide how to surface them (exit code, HTTP
status) instead of catching exceptions.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .contracts.card import CardResponse
from .result import Result, err, ok


def parse_card_response(
    payload: Mapping[str, Any], service_url: str | None = None
) -> Result[CardResponse, str]:
    """Validate a decoded `{cards: [...]}` payload.

    Parameters
    ----------
    payload:
        The JSON object returned by a CDS service.
    service_url:
        When given, every card is tagged with this service URL unless the
        card already names one.
    """
    try:
        response = CardResponse.model_validate(payload)
    except ValidationError as exc:
        return err(f"Invalid card response: {exc.error_count()} error(s); {exc.errors()[0]['msg']}")

    if service_url is None:
        return ok(response)

    tagged = tuple(
        card if card.service_url else card.model_copy(update={"service_url": service_url})
        for card in response.cards
    )
    return ok(CardResponse(cards=tagged))


def load_card_response(path: Path, service_url: str | None = None) -> Result[CardResponse, str]:
    """Read and validate a JSON card response from ``path``."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        return err(f"Could not read {path}: {exc}")

    if not isinstance(data, dict):
        return err(f"{path} does not contain a JSON object")
    return parse_card_response(data, service_url=service_url)


__all__ = ["load_card_response", "parse_card_response"]
