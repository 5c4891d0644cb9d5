"""Token signing seam for feedback requests.

Producing the bearer token is a trust boundary owned by the host
application: it receives the exact endpoint URL the token will be presented
to and returns an opaque string. This module only defines that protocol and a
configuration-backed signer for deployments that hand out pre-signed tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class TokenSigner(Protocol):
    def sign(self, endpoint: str) -> str:
        """Return a bearer token addressed to ``endpoint``."""
        ...


@dataclass(frozen=True, slots=True)
class StaticTokenSigner:
    """Signer that returns the same pre-provisioned token for every endpoint."""

    token: str

    def sign(self, endpoint: str) -> str:
        return self.token


__all__ = ["StaticTokenSigner", "TokenSigner"]
