"""cdscards: client-side interaction engine for CDS Hooks cards.

Orders incoming decision-support cards by severity, turns user actions into
signed feedback messages for the originating service, resolves SMART link
launches, and honours a demonstration mode in which nothing leaves the process.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
