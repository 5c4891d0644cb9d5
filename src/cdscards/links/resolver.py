"""Resolve and launch card links.

Two link types exist:

- ``smart``    : needs a SMART launch context (``iss`` + ``launch``) appended to
  its URL before it can be opened. Without a configured context, or without a
  URL, it resolves to ``None`` and is shown disabled with
  :data:`UNLAUNCHABLE_NOTICE`.
- ``absolute`` : currently always resolves to ``None``. Only context-bound
  launches are supported; absolute links render enabled but clicking them
  opens nothing and logs a warning. This asymmetry is deliberate for now and
  is tracked in DESIGN.md rather than changed here.

``launch`` never raises. In demonstration mode it does nothing and returns
``None``; otherwise it returns a :class:`LaunchResult` describing what
happened.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import urlencode

import typer

from cdscards.core.contracts.card import Link
from cdscards.core.mode import ModeGate
from cdscards.core.settings import Settings, get_logger, load_settings

logger = get_logger(__name__)

UNLAUNCHABLE_NOTICE = "Cannot launch SMART link without a SMART-enabled FHIR server"
LINK_ERROR_NOTICE = "This SMART link cannot be launched securely"

Launcher = Callable[[str], object]


def open_in_browser(url: str) -> object:
    """Open ``url`` in a new browser context without keeping a handle to it."""
    return typer.launch(url, wait=False)


@dataclass(frozen=True, slots=True)
class LaunchContext:
    """SMART launch parameters appended to smart link URLs."""

    iss: str
    launch: str

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> LaunchContext | None:
        """Return the configured context, or None when either value is empty."""
        cfg = cfg or load_settings()
        if not cfg.has_launch_context:
            return None
        return cls(iss=str(cfg.smart_iss), launch=str(cfg.smart_launch))

    def query(self) -> str:
        return urlencode({"iss": self.iss, "launch": self.launch})


@dataclass(frozen=True, slots=True)
class ResolvedLink:
    url: str | None


@dataclass(frozen=True, slots=True)
class LaunchResult:
    """Outcome of a launch attempt handed to ``on_app_launch``.

    Attributes
    ----------
    url : str | None
        The resolved URL, when there was one.
    opened : bool
        True if the launcher was asked to open ``url``.
    error : str | None
        Inline notice to display when the launch was aborted.
    """

    url: str | None
    opened: bool
    error: str | None = None


@dataclass(slots=True)
class LinkResolver:
    gate: ModeGate = field(default_factory=ModeGate)
    context: LaunchContext | None = None
    launcher: Launcher = open_in_browser

    def resolve(self, link: Link) -> ResolvedLink:
        """Return the launchable URL for ``link`` (``None`` if unresolvable)."""
        if not link.is_smart or not link.url or self.context is None:
            return ResolvedLink(url=None)
        separator = "&" if "?" in link.url else "?"
        return ResolvedLink(url=f"{link.url}{separator}{self.context.query()}")

    def is_unlaunchable(self, link: Link) -> bool:
        """True for smart links that cannot be given a launch context."""
        return link.is_smart and self.resolve(link).url is None

    def is_disabled(self, link: Link) -> bool:
        """True for links pre-flagged with an error or that are unlaunchable."""
        return bool(link.error) or self.is_unlaunchable(link)

    def notice_for(self, link: Link) -> str:
        if link.error:
            return LINK_ERROR_NOTICE
        return UNLAUNCHABLE_NOTICE if self.is_unlaunchable(link) else ""

    def launch(self, link: Link) -> LaunchResult | None:
        """Open ``link`` in a new browser context when the mode allows it."""
        if not self.gate.allows("link launch"):
            return None

        if link.error:
            return LaunchResult(url=None, opened=False, error=LINK_ERROR_NOTICE)

        url = self.resolve(link).url
        if url is None:
            logger.warning("Link %r has no launchable URL (type=%s)", link.label, link.type)
            return LaunchResult(url=None, opened=False, error=self.notice_for(link) or None)

        self.launcher(url)
        return LaunchResult(url=url, opened=True)


__all__ = [
    "LINK_ERROR_NOTICE",
    "UNLAUNCHABLE_NOTICE",
    "LaunchContext",
    "LaunchResult",
    "Launcher",
    "LinkResolver",
    "ResolvedLink",
    "open_in_browser",
]
