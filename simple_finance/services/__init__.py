# simple_finance/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive their collaborators (stores, providers) as constructor arguments
- Are easily testable with in-memory fakes

Usage:
    from simple_finance.services import FXRateService
    from simple_finance.services import (
        HoldingNotFoundError,
        ValidationError,
    )

    # Orchestrators import their own modules directly:
    from simple_finance.services.holding_service import HoldingService
    from simple_finance.services.snapshot_recorder import SnapshotRecorder

Architecture:
    services/
    ├── __init__.py              # This file - main exports
    ├── exceptions.py            # Domain exceptions
    ├── constants.py             # Business constants, rounding, rate limits
    ├── protocols.py             # Store interfaces (Protocol classes)
    ├── fx_rate_service.py       # USD->EUR rates with fallback chain
    ├── holding_service.py       # Holding CRUD
    ├── snapshot_recorder.py     # Daily snapshot orchestration
    ├── market_data/             # External collaborators
    │   ├── base.py              # Provider interfaces, FetchResult, retries
    │   ├── yahoo.py             # Live quotes (yfinance)
    │   └── exchange_rate_api.py # Exchange rates (httpx)
    └── valuation/               # Valuation core
        ├── types.py             # Valuation data types
        ├── calculators.py       # Fixed-rate compounding, returns
        ├── quote_resolver.py    # Quotes normalized to EUR
        ├── holding_valuer.py    # Per-holding valuation, fan-out
        ├── aggregator.py        # Portfolio statistics
        ├── profit_rates.py      # Fixed-rate profit projection
        └── history_calculator.py # Time series from snapshots
"""

# Exceptions
from simple_finance.services.exceptions import (
    # Base exceptions
    ServiceError,
    ValidationError,
    NotFoundError,
    # Holding exceptions
    HoldingNotFoundError,
    HoldingKindChangeError,
    # Market data exceptions
    MarketDataError,
    ProviderUnavailableError,
    TickerNotFoundError,
    RateLimitError,
    # FX rate exceptions
    FXRateError,
    FXProviderError,
)
# FX Rate Service
from simple_finance.services.fx_rate_service import ExchangeRate, FXRateService

__all__ = [
    # ==========================================================================
    # Services
    # ==========================================================================
    "FXRateService",
    "ExchangeRate",

    # ==========================================================================
    # Exceptions
    # ==========================================================================
    # Base
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    # Holdings
    "HoldingNotFoundError",
    "HoldingKindChangeError",
    # Market data
    "MarketDataError",
    "ProviderUnavailableError",
    "TickerNotFoundError",
    "RateLimitError",
    # FX rate
    "FXRateError",
    "FXProviderError",
]
