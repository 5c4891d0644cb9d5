# src/cdscards/cli.py
"""
cdscards Command Line Interface (CLI).

This module implements the terminal front-end using `typer` and `rich`. It
loads a CDS service response from a JSON file, renders its cards in severity
order and lets the user act on them exactly like a card UI would.

Features
--------
- **Card Rendering**: Summary colors, source line, Markdown detail, buttons.
- **Feedback**: `accept` and `dismiss` send signed feedback to the service.
- **SMART Launch**: `launch` opens a link with the configured launch context.
- **Demonstration Mode**: `--demo` renders everything but sends nothing.

Usage
-----
    $ cdscards show response.json --service-url https://cds.example.org/cds-services/abc
    $ cdscards accept response.json --card 1 --suggestion 1
    $ cdscards dismiss response.json --card 8b1c... --reason not-relevant
    $ cdscards launch response.json --card 2 --link 1 --demo
"""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from cdscards.context import InteractionContext
from cdscards.core.contracts.card import Card, CardResponse, Link, Suggestion
from cdscards.core.loader import load_card_response
from cdscards.core.mode import Mode
from cdscards.feedback.dispatcher import FeedbackDispatcher
from cdscards.links.resolver import LaunchResult, open_in_browser
from cdscards.store.memory import InMemoryCardStore
from cdscards.view.card_list import CardList, CardListView, CardView, NoCards

load_dotenv()

app = typer.Typer(
    help="cdscards: review CDS Hooks cards, send feedback and launch SMART apps.",
    rich_markup_mode="markdown",
)
console = Console()

ResponseFile = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a CDS service response (`{\"cards\": [...]}`).",
    ),
]
ServiceUrlOption = Annotated[
    str | None,
    typer.Option(
        "--service-url",
        "-s",
        help="Base URL of the CDS service that returned the cards.",
    ),
]
DemoOption = Annotated[
    bool,
    typer.Option("--demo", help="Demonstration mode: render only, no side effects."),
]
CardOption = Annotated[
    str,
    typer.Option("--card", "-c", help="Card uuid, or its 1-based position as shown."),
]


# --------------------------------------------------------------------------- #
# Helpers: Loading & Rendering
# --------------------------------------------------------------------------- #


def _print_taken(suggestion: Suggestion) -> None:
    console.print(f"[bold green]✅ Suggestion taken:[/bold green] {suggestion.label}")


def _print_launch(link: Link, result: LaunchResult | None) -> None:
    if result is None:
        console.print(f"[dim]Launch of '{link.label}' suppressed (demonstration mode).[/dim]")
    elif result.opened:
        console.print(f"[bold green]🚀 Launched:[/bold green] {result.url}")
    else:
        console.print(f"[bold red]⚠️ Could not launch '{link.label}'[/bold red] {result.error or ''}")


def _open_card_list(file: Path, service_url: str | None, demo: bool) -> CardList:
    """
    Helper: Load ``file`` into a fresh store and bind a CardList to it.

    Cards are grouped by the service they name so that each group's
    feedback and removal requests go back to its own service.
    """
    loaded = load_card_response(file, service_url=service_url)
    if loaded.is_err():
        console.print(f"[bold red]❌ {loaded.unwrap_err()}[/bold red]")
        raise typer.Exit(code=1)

    groups: dict[str, list[Card]] = defaultdict(list)
    for card in loaded.unwrap().cards:
        groups[card.service_url].append(card)

    store = InMemoryCardStore()
    for url, cards in groups.items():
        store.put_response(url, CardResponse(cards=tuple(cards)))

    context = InteractionContext.from_settings(
        store,
        mode=Mode.DEMONSTRATION if demo else None,
        launcher=open_in_browser,
    )
    return CardList(context, take_suggestion=_print_taken, on_app_launch=_print_launch)


def _rich_color(color: str | None) -> str | None:
    """Helper: Expand CSS shorthand hex (`#c00`) into the `#cc0000` form Rich parses."""
    if color and len(color) == 4 and color.startswith("#"):
        return "#" + "".join(ch * 2 for ch in color[1:])
    return color


def _render_card(index: int, view: CardView) -> Panel:
    """Helper: Build the Rich panel for one card view."""
    parts: list[Text | Markdown] = []

    if view.source:
        parts.append(Text(f"Source: {view.source.label} ({view.source.href})", style="dim"))
    if view.detail:
        parts.append(Markdown(view.detail))

    for i, button in enumerate(view.suggestions, start=1):
        parts.append(Text(f"[suggestion {i}] {button.label or '(no label)'}", style="bold cyan"))

    for i, button in enumerate(view.links, start=1):
        style = "dim strike" if button.disabled else "bold blue"
        parts.append(Text(f"[link {i}] {button.label}", style=style))
        if button.notice:
            parts.append(Text(f"    {button.notice}", style="italic red"))

    if view.dismiss:
        options = ", ".join(o.label for o in view.dismiss.options)
        parts.append(Text(f"[{view.dismiss.primary_label}] {options}".rstrip(), style="magenta"))

    uuid = view.card.uuid or "no uuid"
    color = _rich_color(view.color)
    return Panel(
        Group(*parts) if parts else Text(""),
        title=Text(view.summary, style=f"bold {color}" if color else "bold"),
        subtitle=f"#{index} · {view.card.indicator or 'unknown'} · {uuid}",
        title_align="left",
        border_style=color or "white",
    )


def _render_card_list(view: CardListView | NoCards) -> None:
    if isinstance(view, NoCards):
        console.print(Panel.fit(view.message, border_style="dim"))
        return
    for index, card_view in enumerate(view.cards, start=1):
        console.print(_render_card(index, card_view))


def _select_card(view: CardListView | NoCards, ref: str) -> CardView:
    """Helper: Find a card by uuid or by its 1-based display position."""
    if isinstance(view, NoCards):
        console.print("[bold red]❌ The response contains no cards.[/bold red]")
        raise typer.Exit(code=1)

    for card_view in view.cards:
        if card_view.card.uuid and card_view.card.uuid == ref:
            return card_view
    if ref.isdigit() and 1 <= int(ref) <= len(view.cards):
        return view.cards[int(ref) - 1]

    console.print(f"[bold red]❌ No card matches '{ref}'.[/bold red]")
    raise typer.Exit(code=1)


def _pick(items: tuple[object, ...], position: int, what: str) -> int:
    if not 1 <= position <= len(items):
        console.print(f"[bold red]❌ Card has no {what} #{position}.[/bold red]")
        raise typer.Exit(code=1)
    return position - 1


def _require_service(card_view: CardView) -> None:
    if not card_view.card.service_url:
        console.print("[bold red]❌ Card has no service URL; pass --service-url.[/bold red]")
        raise typer.Exit(code=1)


def _flush(cards: CardList) -> None:
    """Helper: Let detached feedback dispatches finish before the process exits."""
    dispatcher = cards.context.dispatcher
    if isinstance(dispatcher, FeedbackDispatcher):
        dispatcher.shutdown(wait=True)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def show(file: ResponseFile, service_url: ServiceUrlOption = None, demo: DemoOption = False) -> None:
    """Render the cards of a response in severity order."""
    cards = _open_card_list(file, service_url, demo)
    _render_card_list(cards.render())


@app.command()  # type: ignore[misc]
def accept(
    file: ResponseFile,
    card: CardOption,
    suggestion: Annotated[
        int, typer.Option("--suggestion", "-g", help="1-based suggestion number.")
    ],
    service_url: ServiceUrlOption = None,
    demo: DemoOption = False,
) -> None:
    """Accept a suggestion and send `accepted` feedback to the service."""
    cards = _open_card_list(file, service_url, demo)
    target = _select_card(cards.render(), card)
    _require_service(target)
    button = target.suggestions[_pick(target.suggestions, suggestion, "suggestion")]

    outcome = cards.take_suggestion_from(target.card, button.suggestion)
    _flush(cards)
    console.print(f"[dim]Outcome: {outcome.value}[/dim]")


@app.command()  # type: ignore[misc]
def dismiss(
    file: ResponseFile,
    card: CardOption,
    reason: Annotated[
        str | None,
        typer.Option("--reason", "-r", help="Override reason code offered by the card."),
    ] = None,
    service_url: ServiceUrlOption = None,
    demo: DemoOption = False,
) -> None:
    """Dismiss a card, optionally with an override reason, and show what remains."""
    cards = _open_card_list(file, service_url, demo)
    target = _select_card(cards.render(), card)
    _require_service(target)

    override = None
    if reason is not None:
        matches = [r for r in target.card.override_reasons if r.code == reason]
        if not matches:
            console.print(f"[bold red]❌ Card offers no override reason '{reason}'.[/bold red]")
            raise typer.Exit(code=1)
        override = matches[0]

    outcome = cards.dismiss(target.card, override)
    _flush(cards)
    console.print(f"[dim]Outcome: {outcome.value}[/dim]\n")
    _render_card_list(cards.render())


@app.command()  # type: ignore[misc]
def launch(
    file: ResponseFile,
    card: CardOption,
    link: Annotated[int, typer.Option("--link", "-l", help="1-based link number.")],
    service_url: ServiceUrlOption = None,
    demo: DemoOption = False,
) -> None:
    """Launch a card link (SMART links get the configured launch context)."""
    cards = _open_card_list(file, service_url, demo)
    target = _select_card(cards.render(), card)
    button = target.links[_pick(target.links, link, "link")]
    cards.click_link(button.link)


if __name__ == "__main__":
    app()
