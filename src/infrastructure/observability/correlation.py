"""Correlation ID tracking for dual-store calls.

Every facade call runs inside a correlation scope so that the log lines of
the save, load and delete pipelines (and of the backends they touch) can be
grouped together. The ID lives in a ContextVar and therefore follows the
call across awaits and into tasks started with asyncio.gather.

Usage:
    with correlation_scope() as correlation_id:
        await orchestrator.save(petition)

    # In structlog configuration
    processors = [..., correlation_id_processor, ...]
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Optional
from uuid import uuid4

# Empty string means "no scope active"
_correlation_id: ContextVar[str] = ContextVar("petition_correlation_id", default="")


def generate_correlation_id() -> str:
    """Return a new UUID4 correlation ID."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Return the current correlation ID, or an empty string outside a scope."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    Prefer correlation_scope(), which restores the previous value on exit.
    """
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Run a block under a correlation ID.

    An ID already active in the context is reused so nested facade calls
    (for example a save issued by the backfill job) share one ID.

    Args:
        correlation_id: Explicit ID to use. Generated when omitted and no
            ID is active.

    Yields:
        The correlation ID in effect inside the block.
    """
    active = correlation_id or get_correlation_id() or generate_correlation_id()
    token = _correlation_id.set(active)
    try:
        yield active
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding correlation_id to every entry inside a scope."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
