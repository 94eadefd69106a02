# simple_finance/services/market_data/base.py
"""
Abstract interfaces for the external data collaborators.

Two kinds of provider feed the valuation core:
- MarketDataProvider: live quote for an externally-tracked symbol
- ExchangeRateProvider: current and historical USD->EUR rates

Both hand their outcome back as a FetchResult: either a value or a failure
reason. Network errors, rate limits and malformed payloads never cross the
provider boundary as exceptions, so callers map a failed result to their
documented fallback without try/except.

Retries (tenacity, exponential backoff) and timeouts are owned here, by the
providers. The valuation core never retries.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Generic, TypeVar

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from simple_finance.services.exceptions import (
    ProviderUnavailableError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


# =============================================================================
# FETCH RESULT
# =============================================================================

@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Outcome of a single collaborator call.

    Exactly one of `value` / `reason` is set. Build with `success()` or
    `failure()` rather than the constructor.

    Attributes:
        value: Fetched payload (None on failure)
        reason: Why the fetch failed (None on success)
    """

    value: T | None = None
    reason: str | None = None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: str) -> "FetchResult[T]":
        return cls(reason=reason)

    @property
    def ok(self) -> bool:
        return self.value is not None


# =============================================================================
# PAYLOADS
# =============================================================================

@dataclass(frozen=True)
class RawQuote:
    """
    Live quote as reported by a market data provider, in its own currency.

    Attributes:
        symbol: Symbol the quote was fetched for (uppercase)
        price: Last price in `currency`
        currency: ISO 4217 code the provider quotes the symbol in
        observed_at: When the provider observed the price
        display_name: Human-readable instrument name (if known)
    """

    symbol: str
    price: Decimal
    currency: str
    observed_at: datetime
    display_name: str | None = None

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("symbol is required")
        if not self.currency:
            raise ValueError("currency is required")


@dataclass(frozen=True)
class RawRate:
    """
    USD->EUR rate as reported by the exchange rate provider.

    Attributes:
        rate: EUR per 1 USD
        observed_at: When the provider published the rate
    """

    rate: Decimal
    observed_at: datetime

    def __post_init__(self) -> None:
        if self.rate <= 0:
            raise ValueError(f"rate must be positive, got {self.rate}")


# =============================================================================
# RETRY SUPPORT
# =============================================================================

class RetryingProvider(ABC):
    """
    Shared retry behavior for external providers.

    `_execute_with_retry` retries transient failures with exponential
    backoff. Subclasses tune it through class attributes:

        - MAX_RETRY_ATTEMPTS: Total attempts (default: 3)
        - RETRY_MIN_WAIT: Minimum wait in seconds (default: 1)
        - RETRY_MAX_WAIT: Maximum wait in seconds (default: 10)
        - RETRY_MULTIPLIER: Exponential multiplier (default: 1)

    Retryable: ProviderUnavailableError, RateLimitError.
    Everything else (unknown ticker, malformed payload) fails immediately.
    """

    MAX_RETRY_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: int = 1
    RETRY_MAX_WAIT: int = 10
    RETRY_MULTIPLIER: int = 1

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier used in logs and error messages."""
        pass

    def _execute_with_retry(
            self,
            func: Callable[..., T],
            *args: Any,
            **kwargs: Any,
    ) -> T:
        """
        Call func, retrying transient provider failures.

        Returns:
            Return value of func

        Raises:
            The last exception if all attempts fail
        """

        @retry(
            stop=stop_after_attempt(self.MAX_RETRY_ATTEMPTS),
            wait=wait_exponential(
                multiplier=self.RETRY_MULTIPLIER,
                min=self.RETRY_MIN_WAIT,
                max=self.RETRY_MAX_WAIT,
            ),
            retry=retry_if_exception_type((ProviderUnavailableError, RateLimitError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        def _inner() -> T:
            return func(*args, **kwargs)

        return _inner()


# =============================================================================
# ABSTRACT PROVIDERS
# =============================================================================

class MarketDataProvider(RetryingProvider):
    """
    Source of live quotes for market-tracked holdings.

    Implementations must not raise from `fetch_quote`: every failure
    (unknown symbol, missing price, network error after retries) comes
    back as `FetchResult.failure(reason)`.
    """

    @abstractmethod
    def fetch_quote(self, symbol: str) -> FetchResult[RawQuote]:
        """
        Fetch the latest quote for a symbol.

        Args:
            symbol: Provider symbol (e.g., "AAPL", "SAP.DE")

        Returns:
            FetchResult with a RawQuote on success
        """
        pass


class ExchangeRateProvider(RetryingProvider):
    """
    Source of USD->EUR exchange rates.

    Like MarketDataProvider, implementations report failure through the
    returned FetchResult and own any caching and timeouts.
    """

    @abstractmethod
    def fetch_current(self) -> FetchResult[RawRate]:
        """Fetch the latest published USD->EUR rate."""
        pass

    @abstractmethod
    def fetch_historical(self, on_date: date) -> FetchResult[RawRate]:
        """
        Fetch the USD->EUR rate published for a past date.

        Args:
            on_date: Calendar date of the rate

        Returns:
            FetchResult with the rate for that date
        """
        pass
