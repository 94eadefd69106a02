# simple_finance/services/market_data/__init__.py
"""
External data collaborators.

- base.py: provider interfaces, FetchResult, RawQuote/RawRate, retry helper
- yahoo.py: live quotes via yfinance
- exchange_rate_api.py: USD->EUR rates via exchangerate-api.com

Architecture:
    MarketDataProvider (ABC)
    └── YahooFinanceProvider

    ExchangeRateProvider (ABC)
    └── ExchangeRateApiProvider
"""

from simple_finance.services.market_data.base import (
    ExchangeRateProvider,
    FetchResult,
    MarketDataProvider,
    RawQuote,
    RawRate,
)
from simple_finance.services.market_data.exchange_rate_api import ExchangeRateApiProvider
from simple_finance.services.market_data.yahoo import YahooFinanceProvider

__all__ = [
    # Interfaces
    "MarketDataProvider",
    "ExchangeRateProvider",
    # Data classes
    "FetchResult",
    "RawQuote",
    "RawRate",
    # Implementations
    "YahooFinanceProvider",
    "ExchangeRateApiProvider",
]
