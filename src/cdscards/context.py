"""Interaction context shared by handlers, the link resolver and the view.

The context bundles the collaborators every user action needs: the mode gate,
the feedback composer and sink, the card store and the link resolver. Handlers
receive it explicitly; nothing reads module-level state at action time.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cdscards.core.mode import Mode, ModeGate
from cdscards.core.settings import Settings, load_settings
from cdscards.feedback.composer import FeedbackComposer
from cdscards.feedback.dispatcher import FeedbackDispatcher, FeedbackSink
from cdscards.feedback.signing import TokenSigner
from cdscards.links.resolver import LaunchContext, Launcher, LinkResolver, open_in_browser
from cdscards.store.memory import CardStore


@dataclass(slots=True)
class InteractionContext:
    gate: ModeGate
    dispatcher: FeedbackSink
    store: CardStore
    composer: FeedbackComposer = field(default_factory=FeedbackComposer)
    resolver: LinkResolver | None = None

    def __post_init__(self) -> None:
        if self.resolver is None:
            self.resolver = LinkResolver(gate=self.gate)

    @property
    def mode(self) -> Mode:
        return self.gate.mode

    @property
    def links(self) -> LinkResolver:
        assert self.resolver is not None
        return self.resolver

    @classmethod
    def from_settings(
        cls,
        store: CardStore,
        *,
        cfg: Settings | None = None,
        mode: Mode | None = None,
        signer: TokenSigner | None = None,
        dispatcher: FeedbackSink | None = None,
        launcher: Launcher = open_in_browser,
    ) -> InteractionContext:
        """Wire a context from configuration, with optional overrides."""
        cfg = cfg or load_settings()
        gate = ModeGate(mode if mode is not None else Mode(cfg.mode))
        return cls(
            gate=gate,
            dispatcher=dispatcher or FeedbackDispatcher.from_settings(cfg, signer=signer),
            store=store,
            resolver=LinkResolver(
                gate=gate, context=LaunchContext.from_settings(cfg), launcher=launcher
            ),
        )

    def with_mode(self, mode: Mode) -> InteractionContext:
        """Return a copy of this context running in ``mode``."""
        gate = ModeGate(mode)
        return InteractionContext(
            gate=gate,
            dispatcher=self.dispatcher,
            store=self.store,
            composer=self.composer,
            resolver=LinkResolver(
                gate=gate, context=self.links.context, launcher=self.links.launcher
            ),
        )


__all__ = ["InteractionContext"]
