# simple_finance/services/market_data/exchange_rate_api.py
"""
exchangerate-api.com implementation of ExchangeRateProvider.

Endpoints (USD base):
    GET {base}/latest/USD              -> {"rates": {"EUR": 0.92, ...}, "time_last_updated": 1717200000}
    GET {base}/history/USD/YYYY-MM-DD  -> {"rates": {"EUR": 0.91, ...}}

Fetched rates are cached in-process: the current rate for an hour and each
historical date for a day. The free tier may not serve historical rates;
that simply yields a failed FetchResult and the FX service falls back to
the current rate.
"""

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation

import httpx

from simple_finance.services.exceptions import (
    FXProviderError,
    FXRateError,
    ProviderUnavailableError,
    RateLimitError,
)
from simple_finance.services.market_data.base import (
    ExchangeRateProvider,
    FetchResult,
    RawRate,
)
from simple_finance.utils.cache import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.exchangerate-api.com/v4"
TARGET_CURRENCY = "EUR"


class ExchangeRateApiProvider(ExchangeRateProvider):
    """
    USD->EUR rates from exchangerate-api.com over httpx.

    Configuration:
        base_url: API root (default: https://api.exchangerate-api.com/v4)
        timeout: Request timeout in seconds
        current_ttl: Seconds a current rate is reused (default: 3600)
        historical_ttl: Seconds a historical rate is reused (default: 86400)
        client: Pre-built httpx.Client (tests pass one with a MockTransport)
    """

    def __init__(
            self,
            base_url: str = DEFAULT_BASE_URL,
            timeout: float = 10.0,
            current_ttl: int = 3600,
            historical_ttl: int = 86400,
            client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)
        self._current_cache = TTLCache(ttl_seconds=current_ttl, maxsize=1)
        self._historical_cache = TTLCache(ttl_seconds=historical_ttl)

    @property
    def name(self) -> str:
        return "exchangerate-api"

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def fetch_current(self) -> FetchResult[RawRate]:
        cached = self._current_cache.get("latest")
        if cached is not None:
            logger.debug("Current USD/EUR rate served from cache")
            return FetchResult.success(cached)

        try:
            payload = self._execute_with_retry(self._get_json, "/latest/USD")
            rate = RawRate(
                rate=self._extract_eur_rate(payload),
                observed_at=self._parse_epoch(payload.get("time_last_updated")),
            )
        except (FXRateError, ProviderUnavailableError, RateLimitError) as e:
            logger.warning(f"Current USD/EUR rate unavailable: {e}")
            return FetchResult.failure(str(e))

        self._current_cache.set("latest", rate)
        return FetchResult.success(rate)

    def fetch_historical(self, on_date: date) -> FetchResult[RawRate]:
        cached = self._historical_cache.get(on_date)
        if cached is not None:
            logger.debug(f"USD/EUR rate for {on_date} served from cache")
            return FetchResult.success(cached)

        date_str = on_date.isoformat()
        try:
            payload = self._execute_with_retry(self._get_json, f"/history/USD/{date_str}")
            rate = RawRate(
                rate=self._extract_eur_rate(payload),
                observed_at=datetime.combine(on_date, time.min, tzinfo=timezone.utc),
            )
        except (FXRateError, ProviderUnavailableError, RateLimitError) as e:
            logger.warning(f"Historical USD/EUR rate for {date_str} unavailable: {e}")
            return FetchResult.failure(str(e))

        self._historical_cache.set(on_date, rate)
        return FetchResult.success(rate)

    def close(self) -> None:
        self._client.close()

    # =========================================================================
    # HTTP & PARSING
    # =========================================================================

    def _get_json(self, path: str) -> dict:
        """GET a path and decode the JSON body, classifying failures."""
        url = f"{self._base_url}{path}"
        try:
            response = self._client.get(url)
        except httpx.RequestError as e:
            raise ProviderUnavailableError(provider=self.name, reason=str(e))

        if response.status_code == 429:
            raise RateLimitError(provider=self.name)
        if response.status_code >= 500:
            raise ProviderUnavailableError(
                provider=self.name,
                reason=f"HTTP {response.status_code}",
            )
        if response.status_code != 200:
            raise FXProviderError(self.name, f"HTTP {response.status_code} for {path}")

        try:
            payload = response.json()
        except ValueError as e:
            raise FXProviderError(self.name, f"invalid JSON: {e}")
        if not isinstance(payload, dict):
            raise FXProviderError(self.name, "unexpected payload shape")
        return payload

    def _extract_eur_rate(self, payload: dict) -> Decimal:
        rates = payload.get("rates")
        if not isinstance(rates, dict) or not rates.get(TARGET_CURRENCY):
            raise FXProviderError(self.name, "missing EUR rate in response")
        try:
            rate = Decimal(str(rates[TARGET_CURRENCY]))
        except (InvalidOperation, ValueError) as e:
            raise FXProviderError(self.name, f"invalid EUR rate: {e}")
        if not rate.is_finite() or rate <= 0:
            raise FXProviderError(self.name, f"invalid EUR rate: {rate}")
        return rate

    @staticmethod
    def _parse_epoch(value) -> datetime:
        if value is None:
            return datetime.now(timezone.utc)
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            return datetime.now(timezone.utc)
