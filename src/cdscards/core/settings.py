"""Centralized configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod

The SMART launch defaults point at the public SMART sandbox so that smart
links are launchable out of the box; set ``CDSCARDS_SMART_LAUNCH`` to an empty
string to run without a launch context.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ModeName = Literal["live", "demonstration"]

DEFAULT_SMART_ISS = "https://launch.smarthealthit.org/v/r4/fhir"
DEFAULT_SMART_LAUNCH = (
    "WzAsIiIsImZkN2E3MzdlLTFhYzUtNGM0ZS04OWNkLTFjMDdkYTRjYTFjMiIsIkFVVE8iLDAsMCwwLCIiLCIiLCIiLCIiLCIiLCIiLCIiLDAsMV0"
)


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `CDSCARDS_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    mode : ModeName
        Interaction mode; `demonstration` suppresses every side effect.
        Maps from `CDSCARDS_MODE`.
    bearer_token : Optional[str]
        Pre-signed token handed to feedback endpoints by the static signer.
        Maps from `CDSCARDS_BEARER_TOKEN`.
    smart_iss / smart_launch : Optional[str]
        SMART launch context appended to smart links. Either one empty means
        no context is configured.
    feedback_timeout_seconds : float
        Per-request HTTP timeout for feedback POSTs.
    dispatch_workers : int
        Size of the thread pool running detached feedback dispatches.
    """

    environment: EnvName = Field(default="dev", alias="CDSCARDS_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    mode: ModeName = Field(default="live", alias="CDSCARDS_MODE")
    bearer_token: str | None = Field(default=None, alias="CDSCARDS_BEARER_TOKEN")
    smart_iss: str | None = Field(default=DEFAULT_SMART_ISS, alias="CDSCARDS_SMART_ISS")
    smart_launch: str | None = Field(default=DEFAULT_SMART_LAUNCH, alias="CDSCARDS_SMART_LAUNCH")
    feedback_timeout_seconds: float = Field(default=10.0, gt=0, alias="CDSCARDS_FEEDBACK_TIMEOUT")
    dispatch_workers: int = Field(default=4, ge=1, alias="CDSCARDS_DISPATCH_WORKERS")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_demonstration(self) -> bool:
        """Return True if side effects are configured off."""
        return self.mode == "demonstration"

    @property
    def has_launch_context(self) -> bool:
        """Return True if both SMART launch parameters are non-empty."""
        return bool(self.smart_iss) and bool(self.smart_launch)

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests force a rebuild via `load_settings.cache_clear()` after mutating
    `os.environ`.
    """
    os.environ.setdefault("CDSCARDS_ENV", "dev")
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "cdscards") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
