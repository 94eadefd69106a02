# simple_finance/services/fx_rate_service.py
"""
Currency conversion into the reporting currency (EUR).

This service handles:
- Converting USD amounts to EUR at the current rate
- Converting USD amounts to EUR at the rate of a past date
- Exposing the rate actually used (with provenance) for presentation

=============================================================================
FX RATE CONVENTION
=============================================================================

    rate = "1 USD = X EUR"

    EUR_amount = USD_amount × rate
    USD_amount = EUR_amount ÷ rate

Results are rounded to the cent with ROUND_HALF_UP.

=============================================================================
FALLBACK CHAIN
=============================================================================

The provider reports failure through a FetchResult; this service never
raises on provider failure and never retries (retries live in the provider).

    current rate:     live → fallback constant (stamped now)
    historical rate:  historical → live → fallback constant (stamped with the
                      requested date)

Usage:
    from simple_finance.services.fx_rate_service import FXRateService

    service = FXRateService(provider)
    eur = service.convert_to_reporting_currency(Decimal("100"))
    eur = service.convert_to_reporting_currency_historical(Decimal("100"), date(2024, 1, 1))
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal

from simple_finance.services.constants import REPORTING_CURRENCY, round_cents
from simple_finance.services.market_data.base import ExchangeRateProvider, FetchResult, RawRate

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_RATE = Decimal("0.92")
SOURCE_CURRENCY = "USD"


@dataclass(frozen=True)
class ExchangeRate:
    """
    A USD->EUR rate together with where it came from.

    Not persisted; lives only for the conversion that requested it.

    Attributes:
        from_currency: Always "USD"
        to_currency: Always "EUR"
        rate: EUR per 1 USD
        observed_at: Provider timestamp, or the stamp given to a fallback
        is_fallback: True if the constant fallback rate was used
    """

    from_currency: str
    to_currency: str
    rate: Decimal
    observed_at: datetime
    is_fallback: bool = False


class FXRateService:
    """
    Converts USD amounts into EUR with caching handled by the provider.

    Attributes:
        _provider: Exchange rate collaborator
        _fallback_rate: Constant used when no rate can be fetched

    Example:
        service = FXRateService(provider, fallback_rate=Decimal("0.92"))
        service.convert_to_reporting_currency(Decimal("100"))  # 92.00 if provider is down
    """

    def __init__(
            self,
            provider: ExchangeRateProvider,
            fallback_rate: Decimal = DEFAULT_FALLBACK_RATE,
    ) -> None:
        self._provider = provider
        self._fallback_rate = fallback_rate
        logger.info(
            f"FXRateService initialized (provider={provider.name}, "
            f"fallback_rate={fallback_rate})"
        )

    # =========================================================================
    # RATE LOOKUP
    # =========================================================================

    def get_current_exchange_rate(self) -> ExchangeRate:
        """
        Return the live USD->EUR rate, or the fallback stamped with now.

        Returns:
            ExchangeRate (never raises on provider failure)
        """
        live = self._fetch_current()
        if live is not None:
            return live

        logger.warning(f"Using fallback USD/EUR rate {self._fallback_rate}")
        return self._fallback(datetime.now(timezone.utc))

    def get_historical_exchange_rate(self, on_date: date) -> ExchangeRate:
        """
        Return the USD->EUR rate for a past date.

        Falls back to the live rate, then to the constant. A constant
        fallback is stamped with the requested date, not the present time.

        Args:
            on_date: Date the rate is wanted for

        Returns:
            ExchangeRate (never raises on provider failure)
        """
        result = self._call(self._provider.fetch_historical, on_date)
        if result.ok:
            return self._from_raw(result.value)

        logger.info(
            f"Historical USD/EUR rate for {on_date} unavailable "
            f"({result.reason}), trying current rate"
        )
        live = self._fetch_current()
        if live is not None:
            return live

        logger.warning(
            f"Using fallback USD/EUR rate {self._fallback_rate} for {on_date}"
        )
        return self._fallback(datetime.combine(on_date, time.min, tzinfo=timezone.utc))

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def convert_to_reporting_currency(self, amount_usd: Decimal) -> Decimal:
        """
        Convert a USD amount to EUR at the current rate.

        Args:
            amount_usd: Amount in USD (negative allowed)

        Returns:
            EUR amount rounded to the cent
        """
        return self.convert_amount(amount_usd, self.get_current_exchange_rate().rate)

    def convert_to_reporting_currency_historical(
            self,
            amount_usd: Decimal,
            on_date: date,
    ) -> Decimal:
        """
        Convert a USD amount to EUR at the rate of a past date.

        Args:
            amount_usd: Amount in USD (negative allowed)
            on_date: Date whose rate applies

        Returns:
            EUR amount rounded to the cent
        """
        rate = self.get_historical_exchange_rate(on_date)
        return self.convert_amount(amount_usd, rate.rate)

    @staticmethod
    def convert_amount(amount: Decimal, rate: Decimal) -> Decimal:
        """Multiply by the rate and round to the cent (half away from zero)."""
        return round_cents(Decimal(amount) * rate)

    @staticmethod
    def revert_amount(amount: Decimal, rate: Decimal) -> Decimal:
        """
        Convert an EUR amount back to USD with the same rate.

        Raises:
            ValueError: If rate is zero
        """
        if rate == 0:
            raise ValueError("Cannot revert with a zero rate")
        return round_cents(Decimal(amount) / rate)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _fetch_current(self) -> ExchangeRate | None:
        result = self._call(self._provider.fetch_current)
        if result.ok:
            return self._from_raw(result.value)
        logger.info(f"Current USD/EUR rate unavailable: {result.reason}")
        return None

    def _call(self, fetch, *args) -> FetchResult[RawRate]:
        """Invoke a provider method, treating an exception like a failed result."""
        try:
            return fetch(*args)
        except Exception as e:
            logger.error(f"Exchange rate provider raised: {e}", exc_info=True)
            return FetchResult.failure(str(e))

    def _fallback(self, stamp: datetime) -> ExchangeRate:
        return ExchangeRate(
            from_currency=SOURCE_CURRENCY,
            to_currency=REPORTING_CURRENCY,
            rate=self._fallback_rate,
            observed_at=stamp,
            is_fallback=True,
        )

    @staticmethod
    def _from_raw(raw: RawRate) -> ExchangeRate:
        return ExchangeRate(
            from_currency=SOURCE_CURRENCY,
            to_currency=REPORTING_CURRENCY,
            rate=raw.rate,
            observed_at=raw.observed_at,
        )
