# scripts/smoke.py
"""
Smoke Test Script for the cdscards interaction engine.

Loads a CDS service response, renders it in demonstration mode and walks
through every action (accept, dismiss, launch). Demonstration mode guarantees
that nothing is sent and no browser is opened.

Usage
-----
    $ python scripts/smoke.py
    $ python scripts/smoke.py --file samples/response.json --service-url https://cds.example.org/svc
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from cdscards.context import InteractionContext
from cdscards.core.loader import load_card_response
from cdscards.core.mode import Mode
from cdscards.store.memory import InMemoryCardStore
from cdscards.view.card_list import CardList, NoCards

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("smoke")


def main() -> int:
    parser = argparse.ArgumentParser(description="cdscards demonstration-mode smoke test")
    parser.add_argument("--file", type=Path, default=Path("samples/response.json"))
    parser.add_argument("--service-url", default="https://cds.example.org/cds-services/smoke")
    args = parser.parse_args()

    loaded = load_card_response(args.file, service_url=args.service_url)
    if loaded.is_err():
        logger.error(loaded.unwrap_err())
        return 1

    store = InMemoryCardStore()
    store.put_response(args.service_url, loaded.unwrap())
    context = InteractionContext.from_settings(store, mode=Mode.DEMONSTRATION)
    cards = CardList(
        context,
        take_suggestion=lambda s: logger.info("take_suggestion(%s)", s.label),
        on_app_launch=lambda link, result: logger.info("on_app_launch(%s) -> %s", link.label, result),
    )

    view = cards.render()
    if isinstance(view, NoCards):
        logger.info(view.message)
        return 0

    for card_view in view.cards:
        card = card_view.card
        logger.info("[%s] %s (color=%s)", card.indicator, card_view.summary, card_view.color)
        for button in card_view.suggestions:
            logger.info("  accept %r -> %s", button.label, cards.take_suggestion_from(card, button.suggestion))
        for link_button in card_view.links:
            logger.info("  link %r disabled=%s %s", link_button.label, link_button.disabled, link_button.notice)
            cards.click_link(link_button.link)
        if card_view.dismiss:
            logger.info("  dismiss -> %s", cards.dismiss(card))

    remaining = cards.render()
    count = 0 if isinstance(remaining, NoCards) else len(remaining)
    logger.info("Cards still active after demonstration run: %d", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
