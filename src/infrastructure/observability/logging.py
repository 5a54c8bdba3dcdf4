"""Structured logging configuration for the petition dual-store.

Production emits one JSON object per line for log aggregation;
development uses the coloured console renderer.

Log Entry Format:
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "warning",
        "event": "petition_save_warning",
        "correlation_id": "uuid",
        "kind": "relational_write_failed",
        "backend": "relational_store",
        "legacy_id": "65f0c0ffee0000000000abcd",
        ...
    }

Environment Variables:
- LOG_LEVEL: Minimum level (default: INFO)
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from src.infrastructure.observability.correlation import correlation_id_processor

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
PRODUCTION_ENVIRONMENT = "production"


def _get_log_level() -> int:
    """Return the configured logging level, INFO when unset or unknown."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def build_processors(environment: str = PRODUCTION_ENVIRONMENT) -> list[Processor]:
    """Return the processor chain for an environment.

    Args:
        environment: 'production' for JSON output, anything else for console.

    Returns:
        Processors ending with the environment's renderer.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if environment == PRODUCTION_ENVIRONMENT:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_structlog(environment: str = PRODUCTION_ENVIRONMENT) -> None:
    """Configure structlog once at process start.

    Args:
        environment: 'production' for JSON output, 'development' for console.
    """
    structlog.configure(
        processors=build_processors(environment),
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
