# simple_finance/utils/date_utils.py
"""
Date utility functions for Simple Finance.

Shared date helpers used by the valuation and history calculators so that
day counting and month bucketing behave the same everywhere.

Usage:
    from simple_finance.utils.date_utils import elapsed_days

    days = elapsed_days(date(2024, 1, 1), date(2024, 12, 31))  # 365
"""

from datetime import date, datetime, timezone


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def as_date(value: date | datetime) -> date:
    """
    Normalize a date or datetime to a calendar date.

    Datetimes are truncated to their date component (time of day dropped).

    Args:
        value: Date or datetime

    Returns:
        The calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def elapsed_days(start: date | datetime, end: date | datetime) -> int:
    """
    Count whole calendar days from start to end.

    Negative when end precedes start. Time of day is ignored, so any
    partial day is truncated.

    Args:
        start: First date
        end: Second date

    Returns:
        Number of days between the two dates

    Example:
        >>> elapsed_days(date(2024, 1, 1), date(2024, 12, 31))
        365
    """
    return (as_date(end) - as_date(start)).days


def month_key(d: date) -> tuple[int, int]:
    """Return the (year, month) bucket a date belongs to."""
    return d.year, d.month


def month_label(key: tuple[int, int]) -> str:
    """Format a (year, month) bucket as YYYY-MM."""
    year, month = key
    return f"{year:04d}-{month:02d}"
