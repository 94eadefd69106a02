# simple_finance/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.

- errors: Error response formats
- holdings: Holding CRUD
- snapshots: Snapshot trigger responses
- validators: Reusable field validators (symbol, dates)
- valuation: Quotes, exchange rates, portfolio summary and history

Usage:
    from simple_finance.schemas import HoldingCreate, HoldingResponse
    from simple_finance.schemas import PortfolioSummaryResponse
"""

from simple_finance.schemas.errors import ErrorDetail, TriggerError, ValidationErrorDetail
from simple_finance.schemas.holdings import (
    FixedRateDetailIn,
    HoldingCreate,
    HoldingResponse,
    HoldingUpdate,
    MarketTrackedDetailIn,
)
from simple_finance.schemas.snapshots import (
    SnapshotCreatedResponse,
    SnapshotSkippedResponse,
)
from simple_finance.schemas.valuation import (
    ExchangeRateResponse,
    PortfolioHistoryResponse,
    PortfolioSummaryResponse,
    QuoteResponse,
)

__all__ = [
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    "TriggerError",
    # Holdings
    "HoldingCreate",
    "HoldingUpdate",
    "HoldingResponse",
    "MarketTrackedDetailIn",
    "FixedRateDetailIn",
    # Snapshots
    "SnapshotCreatedResponse",
    "SnapshotSkippedResponse",
    # Valuation
    "QuoteResponse",
    "ExchangeRateResponse",
    "PortfolioSummaryResponse",
    "PortfolioHistoryResponse",
]
