# tests/services/test_quote_resolver.py
"""
Tests for QuoteResolver.

This module tests:
- EUR quotes passing through unchanged
- USD quotes converted at the current rate
- Other currencies converted as USD (with a warning)
- Blank symbols and provider failures resolving to None
"""

import logging
from decimal import Decimal

import pytest

from simple_finance.services.fx_rate_service import FXRateService
from simple_finance.services.exceptions import ProviderUnavailableError
from simple_finance.services.valuation.quote_resolver import QuoteResolver
from tests.conftest import OBSERVED_AT, MockExchangeRateProvider


@pytest.fixture
def resolver(market_provider, fx_service) -> QuoteResolver:
    return QuoteResolver(market_provider, fx_service)


class TestResolveQuote:
    """Tests for resolve_quote."""

    def test_eur_quote_unchanged(self, market_provider, resolver):
        """EUR prices are used as-is, with no exchange rate."""
        market_provider.add_quote("SAP.DE", "181.24", currency="EUR", display_name="SAP SE")

        quote = resolver.resolve_quote("SAP.DE")

        assert quote.price == Decimal("181.24")
        assert quote.provider_currency == "EUR"
        assert quote.exchange_rate is None
        assert quote.display_name == "SAP SE"
        assert quote.observed_at == OBSERVED_AT

    def test_usd_quote_converted(self, market_provider, resolver):
        """USD prices are multiplied by the current rate and rounded."""
        market_provider.add_quote("AAPL", "150.00")

        quote = resolver.resolve_quote("AAPL")

        assert quote.price == Decimal("135.00")
        assert quote.provider_price == Decimal("150.00")
        assert quote.provider_currency == "USD"
        assert quote.exchange_rate == Decimal("0.90")

    def test_symbol_normalized(self, market_provider, resolver):
        """Lowercase and padded symbols are uppercased before lookup."""
        market_provider.add_quote("AAPL", "10")

        quote = resolver.resolve_quote("  aapl ")

        assert quote.symbol == "AAPL"
        assert market_provider.calls == ["AAPL"]

    def test_other_currency_treated_as_usd(self, market_provider, resolver, caplog):
        """GBP prices go through the USD rate and a warning is logged."""
        market_provider.add_quote("VOD.L", "72.00", currency="GBp")

        with caplog.at_level(logging.WARNING):
            quote = resolver.resolve_quote("VOD.L")

        assert quote.price == Decimal("64.80")
        assert quote.provider_currency == "GBP"
        assert "converting as if USD" in caplog.text

    def test_fallback_rate_when_fx_unavailable(self, market_provider):
        """Without a live rate the constant 0.92 is applied."""
        market_provider.add_quote("MSFT", "100")
        resolver = QuoteResolver(market_provider, FXRateService(MockExchangeRateProvider()))

        assert resolver.resolve_quote("MSFT").price == Decimal("92.00")


class TestUnavailableQuotes:
    """Cases that resolve to None."""

    @pytest.mark.parametrize("symbol", [None, "", "   "])
    def test_blank_symbol(self, market_provider, resolver, symbol):
        """Blank symbols are never sent to the provider."""
        assert resolver.resolve_quote(symbol) is None
        assert market_provider.calls == []

    def test_unknown_symbol(self, resolver):
        assert resolver.resolve_quote("NOPE") is None

    def test_provider_raises(self, market_provider, resolver):
        """A provider exception is absorbed, not propagated."""
        market_provider.add_error("AAPL", ProviderUnavailableError("yahoo", "timeout"))

        assert resolver.resolve_quote("AAPL") is None
