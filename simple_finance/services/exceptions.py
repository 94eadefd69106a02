# simple_finance/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The router layer is responsible for mapping these to appropriate HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── NotFoundError
    │   └── HoldingNotFoundError
    ├── HoldingKindChangeError
    ├── MarketDataError
    │   ├── ProviderUnavailableError
    │   ├── TickerNotFoundError
    │   └── RateLimitError
    └── FXRateError
        └── FXProviderError

Market data and FX errors are raised inside the provider collaborators
(where they drive retries) and are turned into failed FetchResults before
they reach the valuation core.
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when input to a calculation or service call is invalid.

    Request payloads are validated by Pydantic first; this covers the rules
    the calculators enforce themselves (non-positive principal, rate below
    -100%, investment date after the evaluation date).

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Holding")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: int | str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class HoldingNotFoundError(NotFoundError):
    """Raised when a holding id does not exist."""

    def __init__(self, holding_id: int) -> None:
        self.holding_id = holding_id
        super().__init__(
            f"Holding {holding_id} not found",
            resource_type="Holding",
            resource_id=holding_id,
        )


class HoldingKindChangeError(ServiceError):
    """
    Raised when an update tries to change a holding's kind.

    The two kinds carry disjoint detail records, so a holding must be
    deleted and recreated to switch kind.
    """

    def __init__(self, holding_id: int, current_kind: str, requested_kind: str) -> None:
        self.holding_id = holding_id
        self.current_kind = current_kind
        self.requested_kind = requested_kind
        super().__init__(
            f"Holding {holding_id} is {current_kind}; kind cannot be changed to "
            f"{requested_kind}. Delete and recreate the holding instead."
        )


# =============================================================================
# MARKET DATA ERRORS
# =============================================================================


class MarketDataError(ServiceError):
    """
    Base exception for market data provider failures.

    Attributes:
        provider: Name of the market data provider
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)


class ProviderUnavailableError(MarketDataError):
    """Raised when a provider cannot be reached (network error, timeout, outage)."""

    def __init__(self, provider: str, reason: str | None = None) -> None:
        self.reason = reason
        message = f"Market data provider '{provider}' is unavailable"
        if reason:
            message += f": {reason}"
        super().__init__(message, provider=provider)


class TickerNotFoundError(MarketDataError):
    """Raised when the provider does not know a symbol."""

    def __init__(self, ticker: str, provider: str | None = None) -> None:
        self.ticker = ticker
        super().__init__(f"Ticker '{ticker}' not found", provider=provider)


class RateLimitError(MarketDataError):
    """
    Raised when a provider rate limit is hit.

    Attributes:
        retry_after: Seconds until the request may be retried (if known)
    """

    def __init__(self, provider: str, retry_after: int | None = None) -> None:
        self.retry_after = retry_after
        message = f"Rate limit exceeded for provider '{provider}'"
        if retry_after:
            message += f". Retry after {retry_after} seconds"
        super().__init__(message, provider=provider)


# =============================================================================
# FX RATE ERRORS
# =============================================================================


class FXRateError(ServiceError):
    """
    Base exception for exchange rate failures.

    Attributes:
        base_currency: Currency converted from
        quote_currency: Currency converted to
    """

    def __init__(
            self,
            message: str,
            base_currency: str | None = None,
            quote_currency: str | None = None,
    ) -> None:
        self.base_currency = base_currency
        self.quote_currency = quote_currency
        super().__init__(message)


class FXProviderError(FXRateError):
    """Raised when the exchange rate provider fails or returns a malformed payload."""

    def __init__(self, provider: str, reason: str | None = None) -> None:
        self.provider = provider
        self.reason = reason
        message = f"FX rate provider '{provider}' failed"
        if reason:
            message += f": {reason}"
        super().__init__(message)


__all__ = [
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "HoldingNotFoundError",
    "HoldingKindChangeError",
    "MarketDataError",
    "ProviderUnavailableError",
    "TickerNotFoundError",
    "RateLimitError",
    "FXRateError",
    "FXProviderError",
]
