# tests/services/test_fx_rate_service.py
"""
Tests for the FXRateService.

This module tests:
- Current rate lookup and the constant fallback
- Historical rate lookup (historical → current → constant)
- Conversion rounding and the revert helper
- Providers that raise instead of returning a failure
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from simple_finance.services.fx_rate_service import DEFAULT_FALLBACK_RATE, FXRateService
from tests.conftest import MockExchangeRateProvider


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def down_provider() -> MockExchangeRateProvider:
    """Provider that never has a rate."""
    return MockExchangeRateProvider()


@pytest.fixture
def down_service(down_provider) -> FXRateService:
    return FXRateService(provider=down_provider)


# =============================================================================
# CURRENT RATE
# =============================================================================

class TestCurrentRate:
    """Tests for get_current_exchange_rate."""

    def test_returns_live_rate(self, fx_service):
        """Should return the provider's rate when available."""
        rate = fx_service.get_current_exchange_rate()

        assert rate.rate == Decimal("0.90")
        assert rate.from_currency == "USD"
        assert rate.to_currency == "EUR"
        assert rate.is_fallback is False

    def test_fallback_when_provider_fails(self, down_service):
        """Should use the constant rate, stamped with the present time."""
        before = datetime.now(timezone.utc)
        rate = down_service.get_current_exchange_rate()
        after = datetime.now(timezone.utc)

        assert rate.rate == DEFAULT_FALLBACK_RATE == Decimal("0.92")
        assert rate.is_fallback is True
        assert before <= rate.observed_at <= after

    def test_fallback_when_provider_raises(self, down_provider, down_service):
        """A provider that raises is treated like one that failed."""
        down_provider.raise_on_fetch(RuntimeError("socket closed"))

        rate = down_service.get_current_exchange_rate()

        assert rate.is_fallback is True
        assert rate.rate == Decimal("0.92")

    def test_custom_fallback_rate(self, down_provider):
        """Configured fallback rate replaces the default."""
        service = FXRateService(provider=down_provider, fallback_rate=Decimal("0.95"))

        assert service.get_current_exchange_rate().rate == Decimal("0.95")


# =============================================================================
# HISTORICAL RATE
# =============================================================================

class TestHistoricalRate:
    """Tests for get_historical_exchange_rate."""

    def test_returns_historical_rate(self, rate_provider, fx_service):
        """Should use the rate published for the date."""
        rate_provider.add_historical(date(2024, 1, 15), "0.91")

        rate = fx_service.get_historical_exchange_rate(date(2024, 1, 15))

        assert rate.rate == Decimal("0.91")
        assert rate.is_fallback is False
        assert rate_provider.current_calls == 0

    def test_falls_back_to_current_rate(self, rate_provider, fx_service):
        """Missing historical rate → current rate, not the constant."""
        rate = fx_service.get_historical_exchange_rate(date(2024, 1, 15))

        assert rate.rate == Decimal("0.90")
        assert rate.is_fallback is False
        assert rate_provider.historical_calls == [date(2024, 1, 15)]
        assert rate_provider.current_calls == 1

    def test_constant_fallback_stamped_with_requested_date(self, down_service):
        """Constant fallback carries the requested date, not now."""
        rate = down_service.get_historical_exchange_rate(date(2023, 3, 10))

        assert rate.is_fallback is True
        assert rate.rate == Decimal("0.92")
        assert rate.observed_at == datetime(2023, 3, 10, tzinfo=timezone.utc)

    def test_provider_raising_on_historical(self, down_provider, down_service):
        """Exceptions on the historical path end in the constant fallback."""
        down_provider.raise_on_fetch(ValueError("bad payload"))

        rate = down_service.get_historical_exchange_rate(date(2024, 2, 1))

        assert rate.is_fallback is True


# =============================================================================
# CONVERSION
# =============================================================================

class TestConversion:
    """Tests for amount conversion."""

    def test_fallback_law(self, down_service):
        """With no rate available, 100 USD is always 92.00 EUR."""
        assert down_service.convert_to_reporting_currency(Decimal("100")) == Decimal("92.00")
        assert down_service.convert_to_reporting_currency(Decimal("100")) == Decimal("92.00")

    def test_converts_at_live_rate(self, fx_service):
        """Should multiply by the current rate."""
        assert fx_service.convert_to_reporting_currency(Decimal("250")) == Decimal("225.00")

    def test_zero_amount(self, fx_service):
        """Zero converts to zero."""
        assert fx_service.convert_to_reporting_currency(Decimal("0")) == Decimal("0.00")

    def test_negative_amount(self, fx_service):
        """Negative amounts scale the same way."""
        assert fx_service.convert_to_reporting_currency(Decimal("-100")) == Decimal("-90.00")

    def test_historical_conversion(self, rate_provider, fx_service):
        """Historical conversion uses the dated rate."""
        rate_provider.add_historical(date(2024, 1, 2), "0.9137")

        result = fx_service.convert_to_reporting_currency_historical(
            Decimal("1000"), date(2024, 1, 2)
        )

        assert result == Decimal("913.70")

    def test_rounds_half_away_from_zero(self):
        """Half cents round away from zero on both signs."""
        assert FXRateService.convert_amount(Decimal("0.05"), Decimal("0.5")) == Decimal("0.03")
        assert FXRateService.convert_amount(Decimal("-0.05"), Decimal("0.5")) == Decimal("-0.03")

    def test_round_trip_within_one_cent(self):
        """Converting and reverting with the same rate recovers the amount."""
        rate = Decimal("0.9173")
        for amount in (Decimal("0.01"), Decimal("19.99"), Decimal("1234.56"), Decimal("-87.65")):
            eur = FXRateService.convert_amount(amount, rate)
            back = FXRateService.revert_amount(eur, rate)
            assert abs(back - amount) <= Decimal("0.01")

    def test_revert_rejects_zero_rate(self):
        """Reverting with a zero rate is an error."""
        with pytest.raises(ValueError):
            FXRateService.revert_amount(Decimal("10"), Decimal("0"))
