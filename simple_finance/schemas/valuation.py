# simple_finance/schemas/valuation.py
"""
Pydantic schemas for quotes, exchange rates and portfolio valuation.

All amounts are EUR unless the field name says otherwise
(provider_price is in provider_currency).
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from simple_finance.models import HoldingKind


# =============================================================================
# QUOTES & RATES
# =============================================================================

class QuoteResponse(BaseModel):
    """Live quote normalized to EUR."""

    symbol: str
    price: Decimal = Field(..., description="Price per unit in EUR")
    currency: str = Field(default="EUR")
    provider_price: Decimal = Field(..., description="Price as quoted by the provider")
    provider_currency: str
    observed_at: dt.datetime
    display_name: str | None = None
    exchange_rate: Decimal | None = Field(
        default=None,
        description="USD->EUR rate applied (None when quoted in EUR)"
    )


class ExchangeRateResponse(BaseModel):
    """USD->EUR rate with provenance."""

    from_currency: str
    to_currency: str
    rate: Decimal = Field(..., description="EUR per 1 USD")
    observed_at: dt.datetime
    is_fallback: bool = Field(
        ...,
        description="True when the constant fallback rate was used"
    )


# =============================================================================
# PORTFOLIO SUMMARY
# =============================================================================

class ValuedHoldingResponse(BaseModel):
    """One holding with its current value."""

    id: int
    kind: HoldingKind
    name: str
    quantity: Decimal
    symbol: str | None = None
    unit_value: Decimal
    total_value: Decimal
    unit_cost_basis: Decimal
    total_cost_basis: Decimal
    total_return: Decimal
    total_return_percentage: Decimal
    is_priced: bool
    quote: QuoteResponse | None = None
    warnings: list[str] = Field(default_factory=list)


class PortfolioStatisticsResponse(BaseModel):
    total_value: Decimal
    total_cost_basis: Decimal
    total_return: Decimal
    total_return_percentage: Decimal
    holding_count: int
    unpriced_count: int
    daily_change: Decimal
    daily_change_percentage: Decimal


class ProfitRatesResponse(BaseModel):
    """Projected profit of fixed-rate holdings only."""

    daily: Decimal
    weekly: Decimal
    monthly: Decimal
    annual: Decimal


class PortfolioSummaryResponse(BaseModel):
    """Current valuation of the whole portfolio."""

    reporting_currency: str = "EUR"
    valuation_date: dt.date
    holdings: list[ValuedHoldingResponse] = Field(
        ...,
        description="Sorted by total value, highest first"
    )
    statistics: PortfolioStatisticsResponse
    profit_rates: ProfitRatesResponse
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# HISTORY
# =============================================================================

class SeriesPointResponse(BaseModel):
    date: dt.date
    value: Decimal


class MonthlyPointResponse(BaseModel):
    month: str = Field(..., description="YYYY-MM")
    value: Decimal
    as_of: dt.date = Field(..., description="Date of the snapshot the value comes from")


class PortfolioHistoryResponse(BaseModel):
    """Series recomputed from stored snapshots on every request."""

    days: int
    evolution: list[SeriesPointResponse]
    daily_changes: list[SeriesPointResponse]
    monthly_wealth: list[MonthlyPointResponse]
