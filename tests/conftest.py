"""Shared fixtures: recording collaborators so no test touches the network."""

from __future__ import annotations

from concurrent.futures import Future
from datetime import UTC, datetime
from typing import Any

import pytest

from cdscards.context import InteractionContext
from cdscards.core.contracts.card import Card
from cdscards.core.contracts.feedback import FeedbackRecord
from cdscards.core.mode import Mode, ModeGate
from cdscards.feedback.composer import FeedbackComposer
from cdscards.links.resolver import LaunchContext, LinkResolver
from cdscards.store.memory import InMemoryCardStore

SERVICE_URL = "https://cds.example.org/cds-services/med-check"
FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0, 123000, tzinfo=UTC)


class RecordingSink:
    """Feedback sink that records dispatches and completes immediately."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, FeedbackRecord]] = []

    def dispatch(self, service_url: str, record: FeedbackRecord) -> Future[None]:
        self.calls.append((service_url, record))
        done: Future[None] = Future()
        done.set_result(None)
        return done


class RecordingStore(InMemoryCardStore):
    """In-memory store that also remembers every removal request."""

    def __init__(self) -> None:
        super().__init__()
        self.removals: list[tuple[str, str]] = []

    def remove_card(self, service_url: str, card_uuid: str) -> None:
        self.removals.append((service_url, card_uuid))
        super().remove_card(service_url, card_uuid)


class RecordingLauncher:
    def __init__(self) -> None:
        self.opened: list[str] = []

    def __call__(self, url: str) -> None:
        self.opened.append(url)


def make_card(**fields: Any) -> Card:
    fields.setdefault("summary", "Example card")
    fields.setdefault("indicator", "info")
    fields.setdefault("serviceUrl", SERVICE_URL)
    return Card.model_validate(fields)


def build_context(
    mode: Mode = Mode.LIVE,
    *,
    launch_context: LaunchContext | None = None,
) -> tuple[InteractionContext, RecordingSink, RecordingStore, RecordingLauncher]:
    sink = RecordingSink()
    store = RecordingStore()
    launcher = RecordingLauncher()
    gate = ModeGate(mode)
    context = InteractionContext(
        gate=gate,
        dispatcher=sink,
        store=store,
        composer=FeedbackComposer(clock=lambda: FIXED_NOW),
        resolver=LinkResolver(gate=gate, context=launch_context, launcher=launcher),
    )
    return context, sink, store, launcher


@pytest.fixture  # type: ignore[misc]
def live() -> tuple[InteractionContext, RecordingSink, RecordingStore, RecordingLauncher]:
    return build_context(
        Mode.LIVE, launch_context=LaunchContext(iss="https://fhir.example.org/r4", launch="abc123")
    )


@pytest.fixture  # type: ignore[misc]
def demo() -> tuple[InteractionContext, RecordingSink, RecordingStore, RecordingLauncher]:
    return build_context(
        Mode.DEMONSTRATION,
        launch_context=LaunchContext(iss="https://fhir.example.org/r4", launch="abc123"),
    )
