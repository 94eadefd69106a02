# simple_finance/services/valuation/calculators.py
"""
Pure calculators used by the valuation core.

- FixedRateCalculator: present value of a daily-compounded fixed-rate instrument
- ReturnCalculator: return and day-over-day change figures

Design Principles:
- Stateless; every input is passed explicitly
- Decimal throughout, rounded to the cent half away from zero
- Invalid input raises ValidationError immediately, never corrected silently

Usage:
    calc = FixedRateCalculator()
    value = calc.current_value(
        principal=Decimal("920"),
        annual_rate=Decimal("0.05"),
        investment_date=date(2024, 1, 1),
        evaluation_date=date(2024, 12, 31),
    )  # Decimal("967.17")
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING

from simple_finance.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    HUNDRED,
    MIN_ANNUAL_RATE,
    round_cents,
)
from simple_finance.services.exceptions import ValidationError
from simple_finance.utils.date_utils import elapsed_days

if TYPE_CHECKING:
    from simple_finance.services.fx_rate_service import FXRateService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")


# =============================================================================
# FIXED-RATE CALCULATOR
# =============================================================================

class FixedRateCalculator:
    """
    Values a fixed-rate instrument by daily compounding.

    Formula:
        days = whole days from investment_date to evaluation_date
        value = principal × (1 + annual_rate / 365) ^ days

    On the investment date itself (days == 0) the principal is returned
    unchanged. The principal may be in EUR already (`current_value`) or in
    USD, converted at the investment date's rate first
    (`current_value_from_foreign`). The compounding is the same either way.
    """

    def current_value(
            self,
            principal: Decimal,
            annual_rate: Decimal,
            investment_date: date | datetime,
            evaluation_date: date | datetime | None = None,
    ) -> Decimal:
        """
        Present value of a principal compounded daily.

        Args:
            principal: Amount invested, reporting currency (> 0)
            annual_rate: Decimal fraction, 0.05 = 5% (>= -1)
            investment_date: Start of accrual
            evaluation_date: Valuation date (default: today, UTC)

        Returns:
            Value rounded to the cent

        Raises:
            ValidationError: Non-positive principal, rate below -100%, or
                             investment date after the evaluation date
        """
        days = self._validate(principal, annual_rate, investment_date, evaluation_date)
        return self._compound(principal, annual_rate, days)

    def current_value_from_foreign(
            self,
            principal_usd: Decimal,
            annual_rate: Decimal,
            investment_date: date,
            fx_service: FXRateService,
            evaluation_date: date | datetime | None = None,
    ) -> Decimal:
        """
        Present value of a USD principal, reported in EUR.

        The principal is converted at the investment date's USD->EUR rate
        (historical, then current, then fallback) and then compounded.

        Raises:
            ValidationError: Same rules as current_value
        """
        days = self._validate(principal_usd, annual_rate, investment_date, evaluation_date)
        principal_eur = fx_service.convert_to_reporting_currency_historical(
            principal_usd, investment_date
        )
        return self._compound(principal_eur, annual_rate, days)

    @staticmethod
    def daily_rate(annual_rate: Decimal) -> Decimal:
        """Annual rate spread over a 365-day year."""
        return Decimal(annual_rate) / CALENDAR_DAYS_PER_YEAR

    def _compound(self, principal: Decimal, annual_rate: Decimal, days: int) -> Decimal:
        if days == 0:
            return Decimal(principal)
        factor = (ONE + self.daily_rate(annual_rate)) ** days
        return round_cents(Decimal(principal) * factor)

    @staticmethod
    def _validate(
            principal: Decimal,
            annual_rate: Decimal,
            investment_date: date | datetime,
            evaluation_date: date | datetime | None,
    ) -> int:
        """Check inputs and return the elapsed whole days."""
        if principal <= ZERO:
            raise ValidationError(
                "Initial investment must be positive",
                field="initial_investment",
            )
        if annual_rate < MIN_ANNUAL_RATE:
            raise ValidationError(
                "Annual return rate cannot be less than -100%",
                field="annual_return_rate",
            )

        if evaluation_date is None:
            evaluation_date = datetime.now(timezone.utc).date()
        days = elapsed_days(investment_date, evaluation_date)
        if days < 0:
            raise ValidationError(
                "Investment date cannot be in the future",
                field="investment_date",
            )
        return days


# =============================================================================
# RETURN CALCULATOR
# =============================================================================

class ReturnCalculator:
    """
    Return and change figures.

    Formulas:
        total_return = value - invested
        return_pct = total_return / invested × 100   (0 if invested == 0)
        daily_change = current - previous
        daily_change_pct = daily_change / previous × 100   (0 if previous == 0)
    """

    @staticmethod
    def total_return(current_value: Decimal, invested: Decimal) -> Decimal:
        return round_cents(current_value - invested)

    @staticmethod
    def return_percentage(current_value: Decimal, invested: Decimal) -> Decimal:
        if invested == ZERO:
            return round_cents(ZERO)
        return round_cents((current_value - invested) / invested * HUNDRED)

    @staticmethod
    def daily_change(current_value: Decimal, previous_value: Decimal) -> Decimal:
        return round_cents(current_value - previous_value)

    @staticmethod
    def daily_change_percentage(current_value: Decimal, previous_value: Decimal) -> Decimal:
        if previous_value == ZERO:
            return round_cents(ZERO)
        return round_cents((current_value - previous_value) / previous_value * HUNDRED)
