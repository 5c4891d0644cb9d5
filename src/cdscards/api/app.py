"""
FastAPI Application Factory & Configuration.

This module initializes the cdscards HTTP API. It is responsible for:
1.  **Middleware Setup**: CORS for browser-based card renderers.
2.  **Exception Handling**: Global handlers so every error returns structured JSON.
3.  **Routing**: Mounting the card router and the health probe.
4.  **Lifecycle**: Wiring the interaction context on startup and draining
    pending feedback dispatches on shutdown.

Design Pattern
--------------
An **Application Factory** (`create_app`) lets tests build isolated apps with
their own store and feedback sink.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cdscards import __version__
from cdscards.api.routers import cards
from cdscards.context import InteractionContext
from cdscards.core.settings import get_logger, load_settings
from cdscards.feedback.dispatcher import FeedbackDispatcher
from cdscards.store.memory import get_card_store

logger = get_logger(__name__)


def _client_side_launch(url: str) -> None:
    """Launcher for the API: navigation happens in the client, not here."""
    logger.debug("Launch of %s handed back to the client", url)


def create_app(context: InteractionContext | None = None) -> FastAPI:
    """
    Construct and configure the cdscards FastAPI application.

    Parameters
    ----------
    context:
        Interaction context to serve. When omitted one is built from settings
        around the process-wide in-memory card store.
    """
    if context is None:
        context = InteractionContext.from_settings(get_card_store(), launcher=_client_side_launch)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("cdscards API starting in %s mode", context.mode.value)
        yield
        dispatcher = context.dispatcher
        if isinstance(dispatcher, FeedbackDispatcher):
            dispatcher.shutdown(wait=True)
        logger.info("cdscards API stopped")

    app = FastAPI(
        title="cdscards API",
        description="CDS Hooks card interaction: ordering, feedback and SMART launch",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    app.include_router(cards.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Liveness probe."""
        return {
            "status": "ok",
            "version": __version__,
            "environment": load_settings().environment,
            "mode": context.mode.value,
        }

    return app


__all__ = ["create_app"]
