# simple_finance/utils/context.py
"""
Request-scoped context for Simple Finance.

Holds the correlation ID of the request being served so log records
emitted anywhere (routers, services, provider threads started from the
request) can be tied back to it. Backed by contextvars, so values follow
async tasks and are copied into worker threads via contextvars.copy_context().

Usage:
    from simple_finance.utils.context import get_correlation_id, set_correlation_id

    set_correlation_id("abc-123")
    get_correlation_id()  # "abc-123"
"""

from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the current correlation ID, or None outside a request."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current request.

    Called by CorrelationIdMiddleware at the start of each request.

    Args:
        correlation_id: Unique identifier for this request
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Reset the correlation ID once the request has finished."""
    _correlation_id_var.set(None)
