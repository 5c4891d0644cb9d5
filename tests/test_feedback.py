"""Tests for feedback composition and the fire-and-forget dispatcher."""

from __future__ import annotations

import threading

import pytest
from typing import Any

from cdscards.core.contracts.card import OverrideReason, Suggestion
from cdscards.core.settings import Settings
from cdscards.feedback.composer import FeedbackComposer
import cdscards.feedback.dispatcher as dispatcher_module
from cdscards.feedback.dispatcher import FeedbackDispatcher, feedback_endpoint
from cdscards.feedback.signing import StaticTokenSigner, TokenSigner

from conftest import FIXED_NOW, SERVICE_URL

composer = FeedbackComposer(clock=lambda: FIXED_NOW)


# --------------------------------------------------------------------------- #
# Composer
# --------------------------------------------------------------------------- #


def test_compose_accepted_record() -> None:
    """Suggestion `s1` on card `c1` yields the canonical accepted record."""
    record = composer.compose_accepted(Suggestion(label="Order", uuid="s1"), "c1")

    assert record is not None
    assert record.to_wire() == {
        "card": "c1",
        "outcome": "accepted",
        "acceptedSuggestions": [{"id": "s1"}],
        "outcomeTimestamp": "2024-05-01T12:30:00.123Z",
    }


def test_compose_accepted_skips_without_uuids() -> None:
    """Missing suggestion uuid or card uuid means there is nothing to report."""
    assert composer.compose_accepted(Suggestion(label="Order"), "c1") is None
    assert composer.compose_accepted(Suggestion(label="Order", uuid="s1"), None) is None


def test_compose_overridden_without_reason() -> None:
    wire = composer.compose_overridden("c1").to_wire()
    assert wire == {
        "card": "c1",
        "outcome": "overridden",
        "outcomeTimestamp": "2024-05-01T12:30:00.123Z",
    }
    assert "overrideReason" not in wire
    assert "acceptedSuggestions" not in wire


def test_compose_overridden_with_code_and_system() -> None:
    reason = OverrideReason(code="X", system="Y", display="Not relevant")
    wire = composer.compose_overridden("c1", reason).to_wire()
    assert wire["overrideReason"] == {"reason": {"code": "X", "system": "Y"}}


def test_compose_overridden_with_code_only_has_no_system_key() -> None:
    reason = OverrideReason(code="X", display="Not relevant")
    wire = composer.compose_overridden("c1", reason).to_wire()
    assert wire["overrideReason"] == {"reason": {"code": "X"}}
    assert "system" not in wire["overrideReason"]["reason"]


def test_compose_overridden_ignores_reason_without_code() -> None:
    reason = OverrideReason(code="", system="Y", display="Blank")
    wire = composer.compose_overridden("c1", reason).to_wire()
    assert "overrideReason" not in wire


def test_default_clock_stamps_construction_time() -> None:
    record = FeedbackComposer().compose_overridden("c1")
    assert record.outcome_timestamp.endswith("Z")
    assert "T" in record.outcome_timestamp


# --------------------------------------------------------------------------- #
# Dispatcher
# --------------------------------------------------------------------------- #


class _EndpointSigner:
    def __init__(self) -> None:
        self.endpoints: list[str] = []

    def sign(self, endpoint: str) -> str:
        self.endpoints.append(endpoint)
        return f"token-for:{endpoint}"


def test_feedback_endpoint_appends_path() -> None:
    assert feedback_endpoint("https://cds.example/svc") == "https://cds.example/svc/feedback"
    assert feedback_endpoint("https://cds.example/svc/") == "https://cds.example/svc/feedback"


def test_dispatch_posts_signed_envelope(monkeypatch: Any) -> None:
    """The POST carries JSON headers, a bearer token and a one-element list."""
    captured: dict[str, Any] = {}

    def fake_post(
        self: FeedbackDispatcher,
        *,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> int:
        captured.update(url=url, headers=headers, payload=payload)
        return 200

    monkeypatch.setattr(FeedbackDispatcher, "_post", fake_post)

    signer = _EndpointSigner()
    dispatcher = FeedbackDispatcher(signer)
    record = composer.compose_overridden("c1")

    dispatcher.dispatch(SERVICE_URL, record).result(timeout=5)
    dispatcher.shutdown()

    endpoint = f"{SERVICE_URL}/feedback"
    assert signer.endpoints == [endpoint]
    assert captured["url"] == endpoint
    assert captured["headers"] == {
        "Content-Type": "application/json",
        "Authorization": f"Bearer token-for:{endpoint}",
    }
    assert captured["payload"] == {"feedback": [record.to_wire()]}


def test_dispatch_returns_before_delivery(monkeypatch: Any) -> None:
    """`dispatch()` does not wait for the network call to finish."""
    release = threading.Event()

    def slow_post(self: FeedbackDispatcher, **_: Any) -> int:
        release.wait(timeout=5)
        return 200

    monkeypatch.setattr(FeedbackDispatcher, "_post", slow_post)
    dispatcher = FeedbackDispatcher(StaticTokenSigner("t"))

    future = dispatcher.dispatch(SERVICE_URL, composer.compose_overridden("c1"))
    assert not future.done()

    release.set()
    future.result(timeout=5)
    dispatcher.shutdown()


def test_transmission_failure_is_swallowed(monkeypatch: Any) -> None:
    """Network errors are logged inside the worker and never surface."""

    def failing_post(self: FeedbackDispatcher, **_: Any) -> int:
        raise RuntimeError("network error: connection refused")

    monkeypatch.setattr(FeedbackDispatcher, "_post", failing_post)
    dispatcher = FeedbackDispatcher(StaticTokenSigner("t"))

    future = dispatcher.dispatch(SERVICE_URL, composer.compose_overridden("c1"))
    assert future.result(timeout=5) is None
    assert future.exception() is None
    dispatcher.shutdown()


def test_post_rejects_url_without_scheme() -> None:
    dispatcher = FeedbackDispatcher(StaticTokenSigner("t"))
    with pytest.raises(RuntimeError, match="invalid feedback URL"):
        dispatcher._post(url="cds.example.org/svc/feedback", headers={}, payload={})
    dispatcher.shutdown()


def test_url_without_scheme_is_logged_not_raised(monkeypatch: Any) -> None:
    warnings: list[tuple[Any, ...]] = []
    monkeypatch.setattr(dispatcher_module.logger, "warning", lambda *args: warnings.append(args))
    dispatcher = FeedbackDispatcher(StaticTokenSigner("t"))

    future = dispatcher.dispatch("cds.example.org/svc", composer.compose_overridden("c1"))

    assert future.result(timeout=5) is None
    assert future.exception() is None
    dispatcher.shutdown()
    assert len(warnings) == 1
    assert warnings[0][1] == "cds.example.org/svc/feedback"


def test_from_settings_uses_configured_token() -> None:
    cfg = Settings(CDSCARDS_BEARER_TOKEN="abc", CDSCARDS_FEEDBACK_TIMEOUT=3.0)
    dispatcher = FeedbackDispatcher.from_settings(cfg)

    assert isinstance(dispatcher.signer, TokenSigner)
    assert dispatcher.signer.sign("https://x/feedback") == "abc"
    assert dispatcher.timeout_seconds == 3.0
    dispatcher.shutdown()
