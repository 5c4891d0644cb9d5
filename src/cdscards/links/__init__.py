from __future__ import annotations

from .resolver import (
    LINK_ERROR_NOTICE,
    UNLAUNCHABLE_NOTICE,
    LaunchContext,
    LaunchResult,
    LinkResolver,
    ResolvedLink,
)

__all__ = [
    "LINK_ERROR_NOTICE",
    "UNLAUNCHABLE_NOTICE",
    "LaunchContext",
    "LaunchResult",
    "LinkResolver",
    "ResolvedLink",
]
