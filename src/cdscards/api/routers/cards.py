"""
API Routes for card display and card actions.

Endpoints
---------
- `PUT  /services/responses`: Load a CDS service response into the card store.
- `GET  /cards`: Ordered card views, or `{"status": "no_cards"}`.
- `POST /cards/accept`: Accept a suggestion (sends `accepted` feedback).
- `POST /cards/dismiss`: Dismiss a card (sends `overridden` feedback, removes it).
- `POST /cards/launch`: Resolve a link launch for the client to open.

Design Decisions
----------------
- **Client-side navigation**: The server never opens a browser. A launch
  returns the resolved URL and the client navigates to it.
- **Per-call demonstration mode**: Any action may set `demo: true` to get the
  normal response shape without feedback, store mutation or launch.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from cdscards.api.schemas import (
    AcceptRequest,
    ActionOut,
    CardListOut,
    DismissRequest,
    LaunchOut,
    LaunchRequest,
    LoadedOut,
    ServiceResponseIn,
    card_list_payload,
)
from cdscards.context import InteractionContext
from cdscards.core.contracts.card import Card
from cdscards.core.loader import parse_card_response
from cdscards.core.mode import Mode
from cdscards.handlers.dismissal import DismissalHandler
from cdscards.handlers.suggestion import SuggestionHandler
from cdscards.store.memory import InMemoryCardStore
from cdscards.view.card_list import build_card_list

router = APIRouter(tags=["Cards"])


def get_context(request: Request) -> InteractionContext:
    context: InteractionContext = request.app.state.context
    return context


ContextDep = Annotated[InteractionContext, Depends(get_context)]


def _scoped(context: InteractionContext, demo: bool) -> InteractionContext:
    return context.with_mode(Mode.DEMONSTRATION) if demo else context


def _find_card(context: InteractionContext, service_url: str, card_uuid: str) -> Card:
    for card in context.store.get_cards([service_url]).cards:
        if card.uuid == card_uuid:
            return card
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Card {card_uuid} not found for {service_url}",
    )


@router.put("/services/responses", response_model=LoadedOut, summary="Load a service response")
async def load_response(body: ServiceResponseIn, context: ContextDep) -> LoadedOut:
    """Replace the active cards of one CDS service."""
    parsed = parse_card_response({"cards": body.cards}, service_url=body.service_url)
    if parsed.is_err():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=parsed.unwrap_err()
        )

    store = context.store
    if not isinstance(store, InMemoryCardStore):
        raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail="Read-only store")
    count = store.put_response(body.service_url, parsed.unwrap())
    return LoadedOut(service_url=body.service_url, count=count)


@router.get("/cards", response_model=CardListOut, summary="List cards in severity order")
async def list_cards(
    context: ContextDep,
    service_url: Annotated[list[str] | None, Query(alias="serviceUrl")] = None,
    demo: bool = False,
) -> CardListOut:
    """
    Return the active cards as display structures.

    An empty store answers `status="no_cards"` rather than an empty list.
    """
    scoped = _scoped(context, demo)
    response = scoped.store.get_cards(service_url)
    return card_list_payload(build_card_list(response.cards, scoped))


@router.post("/cards/accept", response_model=ActionOut, summary="Accept a suggestion")
async def accept_suggestion(body: AcceptRequest, context: ContextDep) -> ActionOut:
    card = _find_card(context, body.service_url, body.card_uuid)
    if body.suggestion_index >= len(card.suggestions):
        raise HTTPException(status_code=404, detail="Suggestion not found")

    # Acceptance is reported back in the response itself.
    handler = SuggestionHandler(_scoped(context, body.demo), take_suggestion=lambda _s: None)
    outcome = handler.take(card, card.suggestions[body.suggestion_index])
    return ActionOut(outcome=outcome.value)


@router.post("/cards/dismiss", response_model=ActionOut, summary="Dismiss a card")
async def dismiss_card(body: DismissRequest, context: ContextDep) -> ActionOut:
    card = _find_card(context, body.service_url, body.card_uuid)

    reason = None
    if body.reason_code is not None:
        reason = next((r for r in card.override_reasons if r.code == body.reason_code), None)
        if reason is None:
            raise ValueError(f"Card offers no override reason '{body.reason_code}'")

    outcome = DismissalHandler(_scoped(context, body.demo)).dismiss(card, reason)
    return ActionOut(outcome=outcome.value)


@router.post("/cards/launch", response_model=ActionOut, summary="Launch a card link")
async def launch_link(body: LaunchRequest, context: ContextDep) -> ActionOut:
    card = _find_card(context, body.service_url, body.card_uuid)
    if body.link_index >= len(card.links):
        raise HTTPException(status_code=404, detail="Link not found")

    result = _scoped(context, body.demo).links.launch(card.links[body.link_index])
    if result is None:
        return ActionOut(outcome="suppressed")
    return ActionOut(
        outcome="launched" if result.opened else "unlaunchable",
        launch=LaunchOut.from_result(result),
    )


__all__ = ["router"]
