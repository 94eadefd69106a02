# simple_finance/services/market_data/yahoo.py
"""
Yahoo Finance market data provider implementation.

Implements MarketDataProvider with the yfinance library. Only the live
quote is used: `regularMarketPrice`, `regularMarketTime`, `currency` and
the short/long display name from `Ticker.info`.

Limitations:
- Rate limits exist but are not documented
- Prices may be delayed 15-20 minutes for some markets
"""

import contextvars
import logging
import math
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import yfinance as yf

from simple_finance.services.exceptions import (
    MarketDataError,
    ProviderUnavailableError,
    TickerNotFoundError,
    RateLimitError,
)
from simple_finance.services.market_data.base import (
    FetchResult,
    MarketDataProvider,
    RawQuote,
)

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_CURRENCY = "USD"
LOOKUP_WORKERS = 8


class YahooFinanceProvider(MarketDataProvider):
    """
    Yahoo Finance implementation of MarketDataProvider.

    Configuration:
        timeout: Upper bound in seconds on one Ticker.info lookup (default: 10).
                 A lookup that overruns it counts as ProviderUnavailableError.

    Retry Behavior (inherited):
        - Retries on ProviderUnavailableError and RateLimitError
        - Does NOT retry on TickerNotFoundError
        - Exponential backoff 1s -> 2s -> 4s, at most 3 attempts

    Example:
        provider = YahooFinanceProvider(timeout=15)
        result = provider.fetch_quote("AAPL")
        if result.ok:
            print(result.value.price, result.value.currency)
    """

    def __init__(self, timeout: float = 10) -> None:
        self._timeout = timeout
        self._lookups = ThreadPoolExecutor(
            max_workers=LOOKUP_WORKERS, thread_name_prefix="yahoo-lookup"
        )
        logger.info(f"YahooFinanceProvider initialized (timeout={timeout}s)")

    @property
    def name(self) -> str:
        return "yahoo"

    def fetch_quote(self, symbol: str) -> FetchResult[RawQuote]:
        """
        Fetch the latest quote for a symbol from Yahoo Finance.

        Args:
            symbol: Yahoo symbol (case-insensitive)

        Returns:
            FetchResult with RawQuote, or failure with the reason
        """
        symbol = (symbol or "").strip().upper()
        if not symbol:
            return FetchResult.failure("empty symbol")

        try:
            quote = self._execute_with_retry(self._fetch_quote, symbol)
        except MarketDataError as e:
            logger.warning(f"Quote unavailable for {symbol}: {e}")
            return FetchResult.failure(str(e))

        return FetchResult.success(quote)

    def _fetch_quote(self, symbol: str) -> RawQuote:
        """Fetch and map one quote (called by the retry wrapper)."""
        logger.debug(f"Fetching quote for {symbol}")

        ctx = contextvars.copy_context()
        lookup = self._lookups.submit(ctx.run, self._load_info, symbol)
        try:
            info = lookup.result(timeout=self._timeout)
        except FutureTimeoutError:
            lookup.cancel()
            logger.error(f"Yahoo Finance lookup for {symbol} timed out after {self._timeout}s")
            raise ProviderUnavailableError(
                provider=self.name, reason=f"timed out after {self._timeout}s"
            )
        except Exception as e:
            error_str = str(e).lower()
            if "not found" in error_str or "no data" in error_str:
                raise TickerNotFoundError(ticker=symbol, provider=self.name)
            if "rate limit" in error_str or "too many requests" in error_str:
                raise RateLimitError(provider=self.name)

            logger.error(f"Yahoo Finance error for {symbol}: {e}")
            raise ProviderUnavailableError(provider=self.name, reason=str(e))

        price = self._to_decimal((info or {}).get("regularMarketPrice"))
        if price is None:
            raise TickerNotFoundError(ticker=symbol, provider=self.name)

        return self._map_to_quote(info, symbol, price)

    @staticmethod
    def _load_info(symbol: str) -> dict:
        return yf.Ticker(symbol).info

    def _map_to_quote(self, info: dict, symbol: str, price: Decimal) -> RawQuote:
        currency = (info.get("currency") or DEFAULT_QUOTE_CURRENCY).upper()
        return RawQuote(
            symbol=symbol,
            price=price,
            currency=currency,
            observed_at=self._to_datetime(info.get("regularMarketTime")),
            display_name=info.get("shortName") or info.get("longName"),
        )

    # =========================================================================
    # CONVERSION HELPERS
    # =========================================================================

    @staticmethod
    def _to_decimal(value: Any) -> Decimal | None:
        """Convert a value to Decimal, returning None for NaN/None."""
        if value is None:
            return None
        try:
            if math.isnan(float(value)):
                return None
            return Decimal(str(value)).quantize(Decimal("0.00000001"))
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _to_datetime(epoch_seconds: Any) -> datetime:
        """Epoch seconds to an aware UTC datetime; now when missing."""
        if epoch_seconds is None:
            return datetime.now(timezone.utc)
        try:
            return datetime.fromtimestamp(int(epoch_seconds), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            return datetime.now(timezone.utc)
