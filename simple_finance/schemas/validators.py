# simple_finance/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

- Symbol normalization (trim, uppercase, 1-10 chars)
- Holding names (trimmed, non-blank)
- Dates that must not lie in the future
"""

from datetime import date, datetime, timezone

SYMBOL_MAX_LENGTH = 10


def validate_symbol(value: str) -> str:
    """
    Trim and uppercase a market symbol.

    Symbols are free-form (e.g., "AAPL", "SAP.DE", "BTC-EUR", "^GSPC").

    Raises:
        ValueError: If empty after trimming or longer than 10 characters
    """
    normalized = (value or "").strip().upper()
    if not normalized:
        raise ValueError("Symbol is required")
    if len(normalized) > SYMBOL_MAX_LENGTH:
        raise ValueError(f"Symbol too long (max {SYMBOL_MAX_LENGTH} characters)")
    return normalized


def validate_name(value: str) -> str:
    """Trim a holding name; blank names are rejected."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Name is required")
    return stripped


def validate_not_future(value: date, label: str = "Date") -> date:
    """
    Reject dates after today (UTC).

    Raises:
        ValueError: If value is in the future
    """
    if value > datetime.now(timezone.utc).date():
        raise ValueError(f"{label} cannot be in the future")
    return value
