# -----------------------------------------------------------------------------
# Fire-and-forget transport for card feedback.
#
# A dispatch:
#   - builds the endpoint `{serviceUrl}/feedback`
#   - asks the token signer for a bearer token addressed to that endpoint
#   - POSTs `{"feedback": [record]}` as JSON on a worker thread
#
# `dispatch()` returns a Future immediately. Nothing in the interaction engine
# waits on it; it exists so tests and hosts can observe completion. Failures
# are logged inside the worker and never propagate. There is no retry and no
# deduplication: callers own double-submission.
#
# The HTTP call uses only the standard library (`urllib.request`). Unit tests
# patch `_post()` so no real network I/O happens.
# -----------------------------------------------------------------------------
from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.request
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Protocol

from cdscards.core.contracts.feedback import FeedbackEnvelope, FeedbackRecord
from cdscards.core.settings import Settings, get_logger, load_settings

from .signing import StaticTokenSigner, TokenSigner

logger = get_logger(__name__)

FEEDBACK_PATH = "/feedback"


class FeedbackSink(Protocol):
    """Anything that accepts a composed record for delivery."""

    def dispatch(self, service_url: str, record: FeedbackRecord) -> Future[None]: ...


def feedback_endpoint(service_url: str) -> str:
    """Return the feedback endpoint for a CDS service base URL."""
    return service_url.rstrip("/") + FEEDBACK_PATH


class FeedbackDispatcher:
    """Signs and transmits feedback records on a background thread pool.

    Parameters
    ----------
    signer:
        Produces the bearer token for each endpoint.
    timeout_seconds:
        Network timeout for a single POST.
    max_workers:
        Number of worker threads available for concurrent dispatches.
    """

    def __init__(
        self,
        signer: TokenSigner,
        *,
        timeout_seconds: float = 10.0,
        max_workers: int = 4,
    ) -> None:
        self.signer = signer
        self.timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="cdscards-feedback"
        )

    @classmethod
    def from_settings(
        cls, cfg: Settings | None = None, signer: TokenSigner | None = None
    ) -> FeedbackDispatcher:
        """Construct a dispatcher from configuration.

        Without an explicit ``signer`` the static signer is used with
        ``CDSCARDS_BEARER_TOKEN``.
        """
        cfg = cfg or load_settings()
        if signer is None:
            if not cfg.bearer_token:
                logger.warning("CDSCARDS_BEARER_TOKEN is not set; feedback will carry an empty token")
            signer = StaticTokenSigner(cfg.bearer_token or "")
        return cls(
            signer,
            timeout_seconds=cfg.feedback_timeout_seconds,
            max_workers=cfg.dispatch_workers,
        )

    def dispatch(self, service_url: str, record: FeedbackRecord) -> Future[None]:
        """Schedule delivery of ``record`` and return without waiting."""
        endpoint = feedback_endpoint(service_url)
        token = self.signer.sign(endpoint)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }
        payload = FeedbackEnvelope.single(record).to_wire()
        return self._executor.submit(self._deliver, endpoint, headers, payload)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting dispatches; optionally wait for in-flight ones."""
        self._executor.shutdown(wait=wait)

    def _deliver(self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]) -> None:
        # Runs on a worker thread. Transmission failures end here.
        try:
            status = self._post(url=url, headers=headers, payload=payload)
        except RuntimeError as exc:
            logger.warning("Feedback to %s was not delivered: %s", url, exc)
            return
        logger.debug("Feedback delivered to %s (HTTP %s)", url, status)

    def _post(
        self,
        *,
        url: str,
        headers: Mapping[str, str],
        payload: Mapping[str, Any],
    ) -> int:
        """Perform the HTTP POST and return the status code.

        This is the seam tests patch to avoid network I/O.

        Raises
        ------
        RuntimeError
            If the request fails at the HTTP or network layer.
        """
        body = json.dumps(payload).encode("utf-8")
        try:
            request = urllib.request.Request(
                url=url,
                data=body,
                headers=dict(headers),
                method="POST",
            )
        except ValueError as exc:
            raise RuntimeError(f"invalid feedback URL: {exc}") from exc

        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                return int(resp.status)
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise RuntimeError(f"HTTP error {exc.code}: {exc.reason}; body={detail!r}") from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise RuntimeError(f"network error: {exc}") from exc


__all__ = ["FEEDBACK_PATH", "FeedbackDispatcher", "FeedbackSink", "feedback_endpoint"]
