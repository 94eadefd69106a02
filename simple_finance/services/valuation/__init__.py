# simple_finance/services/valuation/__init__.py
"""
Valuation core.

This package values holdings and derives portfolio figures:
- Current value of each holding (market-tracked or fixed-rate)
- Portfolio statistics (totals, return, daily change)
- Fixed-rate profit projection
- Time series rebuilt from stored snapshots

Usage:
    from simple_finance.services.valuation import (
        HoldingValuer,
        PortfolioAggregator,
        QuoteResolver,
    )

    valuer = HoldingValuer(QuoteResolver(provider, fx_service), fx_service)
    valued = valuer.value_all(holdings)
    stats = PortfolioAggregator().aggregate(valued)

Data Flow:
    HoldingData → HoldingValuer → ValuedHolding
    ValuedHolding[] → PortfolioAggregator → PortfolioStatistics
    ValuedHolding[] → ProfitRateProjector → ProfitRates
    SnapshotPoint[] → HistoryCalculator → PortfolioHistory
"""

from simple_finance.services.valuation.aggregator import PortfolioAggregator
# Calculators (for testing / direct usage)
from simple_finance.services.valuation.calculators import (
    FixedRateCalculator,
    ReturnCalculator,
)
from simple_finance.services.valuation.history_calculator import HistoryCalculator
from simple_finance.services.valuation.holding_valuer import HoldingValuer
from simple_finance.services.valuation.profit_rates import ProfitRateProjector
from simple_finance.services.valuation.quote_resolver import QuoteResolver
from simple_finance.services.valuation.types import (
    FixedRateTerms,
    HoldingData,
    MarketTrackedTerms,
    MonthlyPoint,
    PortfolioHistory,
    PortfolioStatistics,
    ProfitRates,
    Quote,
    SeriesPoint,
    SnapshotPoint,
    SnapshotResult,
    ValuedHolding,
)

__all__ = [
    # Orchestration
    "HoldingValuer",
    "QuoteResolver",
    "PortfolioAggregator",
    "ProfitRateProjector",
    "HistoryCalculator",

    # Calculators
    "FixedRateCalculator",
    "ReturnCalculator",

    # Data types
    "MarketTrackedTerms",
    "FixedRateTerms",
    "HoldingData",
    "Quote",
    "ValuedHolding",
    "PortfolioStatistics",
    "ProfitRates",
    "SnapshotPoint",
    "SeriesPoint",
    "MonthlyPoint",
    "PortfolioHistory",
    "SnapshotResult",
]
