from __future__ import annotations

from .dismissal import DismissalHandler, DismissalOutcome
from .suggestion import SuggestionHandler, SuggestionOutcome

__all__ = [
    "DismissalHandler",
    "DismissalOutcome",
    "SuggestionHandler",
    "SuggestionOutcome",
]
