# simple_finance/schemas/errors.py
"""
Error bodies emitted by the exception handlers in main.py.

Domain errors carry the exception class name in `error` and the offending
field, symbol or holding id in `details`. The snapshot trigger keeps its
bare {"error": "..."} contract with the scheduler.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """4xx/5xx body for domain errors, HTTP errors and rate limiting."""

    error: str = Field(..., description="Exception name, e.g. 'TickerNotFoundError'")
    message: str
    details: dict[str, Any] | None = None


class ValidationErrorDetail(ErrorDetail):
    """422 body: one {field, message, type} entry per rejected input."""

    error: str = "ValidationError"
    message: str = "Request validation failed"
    details: list[dict[str, str]]


class TriggerError(BaseModel):
    """Failure body of POST /cron/snapshot."""

    error: str
