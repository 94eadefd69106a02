# simple_finance/services/valuation/types.py
"""
Internal data types for the valuation core.

These dataclasses are what the calculators consume and produce. They are
NOT Pydantic schemas (see simple_finance/schemas/ for API serialization)
and NOT ORM models: repositories map database rows into HoldingData and
SnapshotPoint before the core sees them, so the core runs the same against
SQLAlchemy or an in-memory store.

Design Principles:
- Immutable where possible (frozen=True for value objects)
- Use Decimal for ALL financial values (never float)
- Every amount is in the reporting currency (EUR) unless a field says otherwise
- Warnings accumulate for degraded valuations instead of raising

Type Hierarchy:
    MarketTrackedTerms  - Detail payload of a MARKET_TRACKED holding
    FixedRateTerms      - Detail payload of a FIXED_RATE holding
    HoldingData         - A holding plus exactly one detail payload
    Quote               - Live price normalized to EUR
    ValuedHolding       - One holding with unit and total value
    PortfolioStatistics - Totals and returns over valued holdings
    ProfitRates         - Projected fixed-rate profit per period
    SnapshotPoint       - One stored (date, value) total
    SeriesPoint         - Point of the evolution / daily change series
    MonthlyPoint        - Point of the monthly wealth series
    PortfolioHistory    - The three historical series together
    SnapshotResult      - Outcome of one snapshot recording run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from simple_finance.models import HoldingKind

ZERO = Decimal("0")


# =============================================================================
# HOLDINGS
# =============================================================================

@dataclass(frozen=True)
class MarketTrackedTerms:
    """
    Attributes:
        symbol: Provider symbol, uppercase (e.g., "AAPL")
        purchase_price: Price paid per unit, EUR
        purchase_date: Date of purchase
    """

    symbol: str
    purchase_price: Decimal
    purchase_date: date


@dataclass(frozen=True)
class FixedRateTerms:
    """
    Attributes:
        annual_return_rate: Decimal fraction, 0.055 = 5.5% (>= -1)
        initial_investment: Principal in `currency`
        investment_date: Date interest starts accruing
        currency: "EUR", or "USD" when the principal must be converted at
                  the investment date's rate before compounding
    """

    annual_return_rate: Decimal
    initial_investment: Decimal
    investment_date: date
    currency: str = "EUR"

    @property
    def needs_conversion(self) -> bool:
        return self.currency.upper() != "EUR"


@dataclass(frozen=True)
class HoldingData:
    """
    A holding as the valuation core sees it.

    `kind` selects which detail is present; the other one is None.
    """

    id: int
    kind: HoldingKind
    name: str
    quantity: Decimal
    market: MarketTrackedTerms | None = None
    fixed_rate: FixedRateTerms | None = None

    def __post_init__(self) -> None:
        if self.quantity < ZERO:
            raise ValueError(f"quantity cannot be negative, got {self.quantity}")
        if self.kind == HoldingKind.MARKET_TRACKED and self.market is None:
            raise ValueError("MARKET_TRACKED holding requires market terms")
        if self.kind == HoldingKind.FIXED_RATE and self.fixed_rate is None:
            raise ValueError("FIXED_RATE holding requires fixed-rate terms")


# =============================================================================
# QUOTES & VALUED HOLDINGS
# =============================================================================

@dataclass(frozen=True)
class Quote:
    """
    Live quote normalized into the reporting currency.

    Attributes:
        symbol: Symbol quoted
        price: Price per unit in EUR
        provider_price: Price as reported, in provider_currency
        provider_currency: Currency the provider quotes in
        observed_at: Provider timestamp of the price
        display_name: Instrument name, if the provider gave one
        exchange_rate: USD->EUR rate applied (None when no conversion)
    """

    symbol: str
    price: Decimal
    provider_price: Decimal
    provider_currency: str
    observed_at: datetime
    display_name: str | None = None
    exchange_rate: Decimal | None = None


@dataclass
class ValuedHolding:
    """
    Current value of one holding.

    An unpriceable market-tracked holding has unit_value 0 and a warning;
    it still counts toward the holding total and cost basis.

    Attributes:
        holding: The holding valued
        unit_value: Value of one unit, EUR
        total_value: unit_value × quantity, EUR
        unit_cost_basis: Purchase price or principal per unit, EUR
        total_cost_basis: unit_cost_basis × quantity, EUR
        quote: Quote used (market-tracked only)
        warnings: Degraded-mode notes
    """

    holding: HoldingData
    unit_value: Decimal
    total_value: Decimal
    unit_cost_basis: Decimal
    total_cost_basis: Decimal
    quote: Quote | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def kind(self) -> HoldingKind:
        return self.holding.kind

    @property
    def quantity(self) -> Decimal:
        return self.holding.quantity

    @property
    def is_priced(self) -> bool:
        """False for a market-tracked holding whose quote was unavailable."""
        return self.kind == HoldingKind.FIXED_RATE or self.quote is not None


# =============================================================================
# AGGREGATES
# =============================================================================

@dataclass(frozen=True)
class PortfolioStatistics:
    """
    Portfolio totals over a set of valued holdings.

    Attributes:
        total_value: Σ total_value
        total_cost_basis: Σ total_cost_basis
        total_return: total_value - total_cost_basis
        total_return_percentage: total_return / total_cost_basis × 100 (0 if no basis)
        holding_count: Number of holdings aggregated
        unpriced_count: Market-tracked holdings valued at 0 for lack of a quote
        daily_change: total_value - previous snapshot value (0 if none)
        daily_change_percentage: daily_change / previous × 100 (0 if none)
    """

    total_value: Decimal
    total_cost_basis: Decimal
    total_return: Decimal
    total_return_percentage: Decimal
    holding_count: int
    unpriced_count: int = 0
    daily_change: Decimal = ZERO
    daily_change_percentage: Decimal = ZERO


@dataclass(frozen=True)
class ProfitRates:
    """Projected profit of fixed-rate holdings per period, EUR."""

    daily: Decimal
    weekly: Decimal
    monthly: Decimal
    annual: Decimal

    @classmethod
    def zero(cls) -> ProfitRates:
        z = Decimal("0.00")
        return cls(daily=z, weekly=z, monthly=z, annual=z)


# =============================================================================
# HISTORY
# =============================================================================

@dataclass(frozen=True)
class SnapshotPoint:
    """A stored total portfolio value for one calendar date."""

    date: date
    value: Decimal


@dataclass(frozen=True)
class SeriesPoint:
    """One point of the evolution or daily change series."""

    date: date
    value: Decimal


@dataclass(frozen=True)
class MonthlyPoint:
    """
    Latest known portfolio value within a calendar month.

    Attributes:
        month: "YYYY-MM"
        value: Value of the latest snapshot in that month
        as_of: Date of that snapshot
    """

    month: str
    value: Decimal
    as_of: date


@dataclass
class PortfolioHistory:
    """Evolution, daily change and monthly wealth series, oldest first."""

    evolution: list[SeriesPoint] = field(default_factory=list)
    daily_changes: list[SeriesPoint] = field(default_factory=list)
    monthly_wealth: list[MonthlyPoint] = field(default_factory=list)


@dataclass(frozen=True)
class SnapshotResult:
    """
    Outcome of a snapshot recording run.

    `recorded` is False only when there were no holdings; in that case
    `snapshot` and `statistics` are None and nothing was written.
    """

    recorded: bool
    message: str
    snapshot: SnapshotPoint | None = None
    statistics: PortfolioStatistics | None = None
