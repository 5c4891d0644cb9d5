from __future__ import annotations

from .composer import FeedbackComposer
from .dispatcher import FeedbackDispatcher, FeedbackSink, feedback_endpoint
from .signing import StaticTokenSigner, TokenSigner

__all__ = [
    "FeedbackComposer",
    "FeedbackDispatcher",
    "FeedbackSink",
    "StaticTokenSigner",
    "TokenSigner",
    "feedback_endpoint",
]
