# tests/services/test_calculators.py
"""
Tests for the fixed-rate and return calculators.

This module tests:
- Daily compounding (gain, loss, same day)
- Input validation messages
- Monotonicity in elapsed days
- USD principals converted before compounding
- Return and daily change helpers
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from simple_finance.services.exceptions import ValidationError
from simple_finance.services.fx_rate_service import FXRateService
from simple_finance.services.valuation.calculators import (
    FixedRateCalculator,
    ReturnCalculator,
)
from tests.conftest import MockExchangeRateProvider


@pytest.fixture
def calculator() -> FixedRateCalculator:
    return FixedRateCalculator()


# =============================================================================
# FIXED RATE CALCULATOR
# =============================================================================

class TestFixedRateValue:
    """Tests for FixedRateCalculator.current_value."""

    def test_positive_rate_over_a_year(self, calculator):
        """920 at 5% for 365 days compounds to 967.17."""
        value = calculator.current_value(
            Decimal("920"), Decimal("0.05"), date(2024, 1, 1), date(2024, 12, 31)
        )

        assert value == Decimal("967.17")

    def test_negative_rate_over_a_year(self, calculator):
        """920 at -5% for 365 days shrinks to 875.13."""
        value = calculator.current_value(
            Decimal("920"), Decimal("-0.05"), date(2024, 1, 1), date(2024, 12, 31)
        )

        assert value == Decimal("875.13")

    def test_same_day_returns_principal_exactly(self, calculator):
        """No elapsed day → principal unchanged."""
        value = calculator.current_value(
            Decimal("1000"), Decimal("0.05"), date(2024, 1, 1), date(2024, 1, 1)
        )

        assert value == Decimal("1000")

    def test_same_day_keeps_unrounded_principal(self, calculator):
        """Same-day value is the principal itself, not a rounded copy."""
        value = calculator.current_value(
            Decimal("100.005"), Decimal("0.10"), date(2024, 5, 5), date(2024, 5, 5)
        )

        assert value == Decimal("100.005")

    def test_minus_hundred_percent_allowed(self, calculator):
        """A rate of exactly -1 is valid."""
        value = calculator.current_value(
            Decimal("1000"), Decimal("-1"), date(2024, 1, 1), date(2024, 1, 11)
        )

        assert value < Decimal("1000")

    def test_datetimes_count_calendar_days(self, calculator):
        """Time of day is ignored when counting days."""
        start = datetime(2024, 1, 1, 23, 59, tzinfo=timezone.utc)
        end = datetime(2024, 1, 2, 0, 1, tzinfo=timezone.utc)

        by_datetime = calculator.current_value(Decimal("1000"), Decimal("0.365"), start, end)
        by_date = calculator.current_value(
            Decimal("1000"), Decimal("0.365"), date(2024, 1, 1), date(2024, 1, 2)
        )

        assert by_datetime == by_date == Decimal("1001.00")

    def test_defaults_to_today(self, calculator):
        """Without an evaluation date, today is used."""
        today = datetime.now(timezone.utc).date()

        assert calculator.current_value(Decimal("500"), Decimal("0.05"), today) == Decimal("500")


class TestFixedRateValidation:
    """Tests for the fixed-rate input checks."""

    def test_negative_principal(self, calculator):
        with pytest.raises(ValidationError, match="Initial investment must be positive"):
            calculator.current_value(
                Decimal("-1000"), Decimal("0.05"), date(2024, 1, 1), date(2024, 6, 1)
            )

    def test_zero_principal(self, calculator):
        with pytest.raises(ValidationError, match="Initial investment must be positive"):
            calculator.current_value(
                Decimal("0"), Decimal("0.05"), date(2024, 1, 1), date(2024, 6, 1)
            )

    def test_rate_below_minus_hundred_percent(self, calculator):
        with pytest.raises(ValidationError, match="Annual return rate cannot be less than -100%"):
            calculator.current_value(
                Decimal("1000"), Decimal("-1.5"), date(2024, 1, 1), date(2024, 6, 1)
            )

    def test_future_investment_date(self, calculator):
        """An investment date after now is rejected."""
        with pytest.raises(ValidationError, match="Investment date cannot be in the future"):
            calculator.current_value(Decimal("1000"), Decimal("0.05"), date(2099, 1, 1))

    def test_error_names_field(self, calculator):
        """ValidationError carries the offending field."""
        with pytest.raises(ValidationError) as exc_info:
            calculator.current_value(
                Decimal("1000"), Decimal("-2"), date(2024, 1, 1), date(2024, 6, 1)
            )

        assert exc_info.value.field == "annual_return_rate"


class TestFixedRateMonotonicity:
    """Value moves in one direction as days accumulate."""

    @pytest.mark.parametrize("days", [0, 1, 30, 180, 365, 1000])
    def test_increasing_for_positive_rate(self, calculator, days):
        start = date(2020, 1, 1)
        base = calculator.current_value(
            Decimal("1000"), Decimal("0.04"), start, date.fromordinal(start.toordinal() + days)
        )
        later = calculator.current_value(
            Decimal("1000"), Decimal("0.04"), start, date.fromordinal(start.toordinal() + days + 30)
        )

        assert later > base

    @pytest.mark.parametrize("days", [0, 1, 30, 180, 365])
    def test_decreasing_for_negative_rate(self, calculator, days):
        start = date(2020, 1, 1)
        base = calculator.current_value(
            Decimal("1000"), Decimal("-0.04"), start, date.fromordinal(start.toordinal() + days)
        )
        later = calculator.current_value(
            Decimal("1000"), Decimal("-0.04"), start, date.fromordinal(start.toordinal() + days + 30)
        )

        assert later < base


class TestFixedRateFromForeign:
    """Tests for current_value_from_foreign."""

    def test_converts_at_investment_date_rate(self, calculator):
        """USD principal is converted at the historical rate, then compounded."""
        provider = MockExchangeRateProvider(current="0.80")
        provider.add_historical(date(2024, 1, 1), "0.92")
        fx_service = FXRateService(provider=provider)

        value = calculator.current_value_from_foreign(
            Decimal("1000"), Decimal("0.05"), date(2024, 1, 1), fx_service, date(2024, 12, 31)
        )
        expected = calculator.current_value(
            Decimal("920.00"), Decimal("0.05"), date(2024, 1, 1), date(2024, 12, 31)
        )

        assert value == expected

    def test_same_formula_as_reporting_currency_path(self, calculator):
        """With the constant fallback the two modes agree on the converted principal."""
        fx_service = FXRateService(provider=MockExchangeRateProvider())

        value = calculator.current_value_from_foreign(
            Decimal("1000"), Decimal("0.05"), date(2024, 1, 1), fx_service, date(2024, 1, 1)
        )

        assert value == Decimal("920.00")

    def test_validates_before_fetching_rates(self, calculator):
        """Invalid input fails without touching the rate provider."""
        provider = MockExchangeRateProvider(current="0.90")
        fx_service = FXRateService(provider=provider)

        with pytest.raises(ValidationError):
            calculator.current_value_from_foreign(
                Decimal("0"), Decimal("0.05"), date(2024, 1, 1), fx_service, date(2024, 2, 1)
            )
        assert provider.historical_calls == []


# =============================================================================
# RETURN CALCULATOR
# =============================================================================

class TestReturnCalculator:
    """Tests for ReturnCalculator helpers."""

    def test_total_return(self):
        assert ReturnCalculator.total_return(Decimal("1200"), Decimal("1000")) == Decimal("200.00")

    def test_return_percentage(self):
        assert ReturnCalculator.return_percentage(
            Decimal("1200"), Decimal("1000")
        ) == Decimal("20.00")

    def test_return_percentage_zero_invested(self):
        """No invested amount → 0%, not an error."""
        assert ReturnCalculator.return_percentage(Decimal("50"), Decimal("0")) == Decimal("0")

    def test_daily_change(self):
        assert ReturnCalculator.daily_change(Decimal("980.50"), Decimal("1000")) == Decimal("-19.50")

    def test_daily_change_percentage(self):
        assert ReturnCalculator.daily_change_percentage(
            Decimal("1010"), Decimal("1000")
        ) == Decimal("1.00")

    def test_daily_change_percentage_zero_previous(self):
        assert ReturnCalculator.daily_change_percentage(
            Decimal("10"), Decimal("0")
        ) == Decimal("0")
