# simple_finance/services/valuation/quote_resolver.py
"""
Market quote resolution into the reporting currency.

QuoteResolver asks the market data provider for a live quote and
normalizes its price into EUR:

- EUR quotes pass through unchanged
- every other currency is converted at the current USD->EUR rate

The second rule treats GBP, CHF, JPY... quotes as if they were USD. This is
a known approximation of the system and is kept deliberately: changing it
changes reported values. Such conversions are logged at WARNING.

An empty symbol or an unavailable quote yields None; the resolver never
raises for provider failures.
"""

import logging

from simple_finance.services.constants import REPORTING_CURRENCY
from simple_finance.services.fx_rate_service import FXRateService, SOURCE_CURRENCY
from simple_finance.services.market_data.base import MarketDataProvider
from simple_finance.services.valuation.types import Quote

logger = logging.getLogger(__name__)


class QuoteResolver:
    """
    Resolves a symbol to a EUR-normalized Quote.

    Example:
        resolver = QuoteResolver(YahooFinanceProvider(), fx_service)
        quote = resolver.resolve_quote("AAPL")
        if quote is None:
            ...  # treat as unpriced
    """

    def __init__(self, provider: MarketDataProvider, fx_service: FXRateService) -> None:
        self._provider = provider
        self._fx_service = fx_service

    def resolve_quote(self, symbol: str | None) -> Quote | None:
        """
        Fetch a live quote and express its price in EUR.

        Args:
            symbol: Provider symbol (case-insensitive; blank returns None)

        Returns:
            Quote, or None when the symbol is blank or no price is available
        """
        if symbol is None or not symbol.strip():
            return None
        symbol = symbol.strip().upper()

        try:
            result = self._provider.fetch_quote(symbol)
        except Exception as e:
            logger.error(f"Quote provider raised for {symbol}: {e}", exc_info=True)
            return None
        if not result.ok:
            logger.warning(f"No quote for {symbol}: {result.reason}")
            return None

        raw = result.value
        provider_currency = raw.currency.upper()

        if provider_currency == REPORTING_CURRENCY:
            return Quote(
                symbol=symbol,
                price=raw.price,
                provider_price=raw.price,
                provider_currency=provider_currency,
                observed_at=raw.observed_at,
                display_name=raw.display_name,
            )

        if provider_currency != SOURCE_CURRENCY:
            logger.warning(
                f"{symbol} is quoted in {provider_currency}; converting as if "
                f"{SOURCE_CURRENCY}"
            )

        rate = self._fx_service.get_current_exchange_rate()
        return Quote(
            symbol=symbol,
            price=FXRateService.convert_amount(raw.price, rate.rate),
            provider_price=raw.price,
            provider_currency=provider_currency,
            observed_at=raw.observed_at,
            display_name=raw.display_name,
            exchange_rate=rate.rate,
        )
