# simple_finance/routers/portfolio.py
"""
Portfolio valuation endpoints.

- GET /portfolio/summary - Every holding valued now, statistics, profit rates
- GET /portfolio/history - Series rebuilt from stored daily snapshots

The summary is computed on every request and never written; snapshots
are only recorded by POST /cron/snapshot.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from simple_finance.config import settings
from simple_finance.dependencies import (
    get_aggregator,
    get_history_calculator,
    get_holding_store,
    get_holding_valuer,
    get_profit_projector,
    get_snapshot_store,
)
from simple_finance.repositories import SqlAlchemyHoldingStore, SqlAlchemySnapshotStore
from simple_finance.schemas.valuation import (
    MonthlyPointResponse,
    PortfolioHistoryResponse,
    PortfolioStatisticsResponse,
    PortfolioSummaryResponse,
    ProfitRatesResponse,
    QuoteResponse,
    SeriesPointResponse,
    ValuedHoldingResponse,
)
from simple_finance.services.constants import REPORTING_CURRENCY
from simple_finance.services.valuation import (
    HistoryCalculator,
    HoldingValuer,
    PortfolioAggregator,
    PortfolioStatistics,
    ProfitRateProjector,
    ProfitRates,
    ReturnCalculator,
    ValuedHolding,
)

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/portfolio",
    tags=["Portfolio"],
)


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_holding(valued: ValuedHolding) -> ValuedHoldingResponse:
    """Map internal ValuedHolding to Pydantic schema."""
    holding = valued.holding
    quote = valued.quote
    return ValuedHoldingResponse(
        id=holding.id,
        kind=holding.kind,
        name=holding.name,
        quantity=holding.quantity,
        symbol=holding.market.symbol if holding.market else None,
        unit_value=valued.unit_value,
        total_value=valued.total_value,
        unit_cost_basis=valued.unit_cost_basis,
        total_cost_basis=valued.total_cost_basis,
        total_return=ReturnCalculator.total_return(valued.total_value, valued.total_cost_basis),
        total_return_percentage=ReturnCalculator.return_percentage(
            valued.total_value, valued.total_cost_basis
        ),
        is_priced=valued.is_priced,
        quote=QuoteResponse(
            symbol=quote.symbol,
            price=quote.price,
            provider_price=quote.provider_price,
            provider_currency=quote.provider_currency,
            observed_at=quote.observed_at,
            display_name=quote.display_name,
            exchange_rate=quote.exchange_rate,
        ) if quote else None,
        warnings=valued.warnings,
    )


def _map_statistics(stats: PortfolioStatistics) -> PortfolioStatisticsResponse:
    return PortfolioStatisticsResponse(
        total_value=stats.total_value,
        total_cost_basis=stats.total_cost_basis,
        total_return=stats.total_return,
        total_return_percentage=stats.total_return_percentage,
        holding_count=stats.holding_count,
        unpriced_count=stats.unpriced_count,
        daily_change=stats.daily_change,
        daily_change_percentage=stats.daily_change_percentage,
    )


def _map_profit_rates(rates: ProfitRates) -> ProfitRatesResponse:
    return ProfitRatesResponse(
        daily=rates.daily,
        weekly=rates.weekly,
        monthly=rates.monthly,
        annual=rates.annual,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/summary",
    response_model=PortfolioSummaryResponse,
    summary="Get portfolio summary",
    response_description="Current valuation with holdings breakdown",
)
def get_portfolio_summary(
        holding_store: SqlAlchemyHoldingStore = Depends(get_holding_store),
        snapshot_store: SqlAlchemySnapshotStore = Depends(get_snapshot_store),
        valuer: HoldingValuer = Depends(get_holding_valuer),
        aggregator: PortfolioAggregator = Depends(get_aggregator),
        projector: ProfitRateProjector = Depends(get_profit_projector),
) -> PortfolioSummaryResponse:
    """
    Value the whole portfolio now.

    Holdings are sorted by total value, highest first. Market-tracked
    holdings without a quote are valued at 0 and listed in `warnings`.
    Daily change is measured against the latest stored snapshot.
    """
    today = datetime.now(timezone.utc).date()
    holdings = holding_store.list_all()

    valued = valuer.value_all(holdings, evaluation_date=today)
    latest = snapshot_store.get_latest()
    statistics = aggregator.aggregate(
        valued,
        previous_total=latest.value if latest else None,
    )
    profit_rates = projector.project(valued)

    valued.sort(key=lambda v: v.total_value, reverse=True)
    warnings = [w for v in valued for w in v.warnings]

    logger.info(
        f"Portfolio summary: {statistics.holding_count} holdings, "
        f"value={statistics.total_value}, unpriced={statistics.unpriced_count}"
    )

    return PortfolioSummaryResponse(
        reporting_currency=REPORTING_CURRENCY,
        valuation_date=today,
        holdings=[_map_holding(v) for v in valued],
        statistics=_map_statistics(statistics),
        profit_rates=_map_profit_rates(profit_rates),
        warnings=warnings,
    )


@router.get(
    "/history",
    response_model=PortfolioHistoryResponse,
    summary="Get portfolio history",
    response_description="Evolution, daily changes and monthly wealth",
)
def get_portfolio_history(
        days: int = Query(
            default=settings.history_days,
            ge=1,
            le=3650,
            description="Length of the evolution window in days",
        ),
        snapshot_store: SqlAlchemySnapshotStore = Depends(get_snapshot_store),
        calculator: HistoryCalculator = Depends(get_history_calculator),
) -> PortfolioHistoryResponse:
    """
    Series recomputed from stored snapshots.

    - **evolution**: snapshot values of the last `days` days, oldest first
    - **daily_changes**: difference between consecutive evolution points
    - **monthly_wealth**: value of the latest snapshot in each month of the last year
    """
    today = datetime.now(timezone.utc).date()
    recent = snapshot_store.get_last_n_days(days, today=today)
    monthly_source = snapshot_store.get_last_n_days(
        max(days, settings.monthly_wealth_days), today=today
    )

    history = calculator.calculate(recent, monthly_source, days=days, reference_date=today)

    return PortfolioHistoryResponse(
        days=days,
        evolution=[SeriesPointResponse(date=p.date, value=p.value) for p in history.evolution],
        daily_changes=[
            SeriesPointResponse(date=p.date, value=p.value) for p in history.daily_changes
        ],
        monthly_wealth=[
            MonthlyPointResponse(month=p.month, value=p.value, as_of=p.as_of)
            for p in history.monthly_wealth
        ],
    )
