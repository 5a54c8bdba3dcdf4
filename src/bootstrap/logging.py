"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

import os

from src.infrastructure.observability import configure_structlog as _configure_structlog

ENVIRONMENT_ENV = "ENVIRONMENT"


def configure_structlog(environment: str | None = None) -> None:
    """Configure structlog; the environment defaults to $ENVIRONMENT or production."""
    _configure_structlog(
        environment=environment or os.environ.get(ENVIRONMENT_ENV, "production")
    )


__all__ = ["configure_structlog"]
