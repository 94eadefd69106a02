# simple_finance/services/constants.py
"""
Business constants shared by the valuation services.

Usage:
    from simple_finance.services.constants import (
        CALENDAR_DAYS_PER_YEAR,
        round_cents,
    )
"""

from decimal import Decimal, ROUND_HALF_UP


# =============================================================================
# CALENDAR
# =============================================================================

# Fixed-rate instruments compound daily over a 365-day year
CALENDAR_DAYS_PER_YEAR: int = 365

# Profit-rate projection periods, in days
DAYS_PER_WEEK: int = 7
DAYS_PER_MONTH: int = 30


# =============================================================================
# MONEY
# =============================================================================

REPORTING_CURRENCY: str = "EUR"

CENT: Decimal = Decimal("0.01")
HUNDRED: Decimal = Decimal("100")

# Lowest allowed annual rate: -100%
MIN_ANNUAL_RATE: Decimal = Decimal("-1")


def round_cents(amount: Decimal) -> Decimal:
    """Round to 2 decimals, half away from zero."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


# =============================================================================
# RATE LIMITS (slowapi syntax)
# =============================================================================

RATE_LIMIT_DEFAULT: str = "200/minute"
RATE_LIMIT_QUOTES: str = "60/minute"
RATE_LIMIT_CRON: str = "10/minute"
