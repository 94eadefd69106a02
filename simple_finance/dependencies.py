# simple_finance/dependencies.py
"""
Dependency injection module for FastAPI services.

Stateless services and external providers are process-wide singletons, so
their caches (exchange rates) and HTTP clients are shared across requests.
Stores wrap the request's Session and are built per request.

Services are lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from simple_finance.dependencies import get_holding_valuer, get_snapshot_store

    @router.get("/summary")
    def get_summary(
        valuer: HoldingValuer = Depends(get_holding_valuer),
        snapshots: SqlAlchemySnapshotStore = Depends(get_snapshot_store),
    ):
        ...

Tests replace any of these through app.dependency_overrides.
"""

import logging
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from simple_finance.config import settings
from simple_finance.database import get_db
from simple_finance.repositories import SqlAlchemyHoldingStore, SqlAlchemySnapshotStore
from simple_finance.services.fx_rate_service import FXRateService
from simple_finance.services.holding_service import HoldingService
from simple_finance.services.market_data import (
    ExchangeRateApiProvider,
    ExchangeRateProvider,
    MarketDataProvider,
    YahooFinanceProvider,
)
from simple_finance.services.snapshot_recorder import SnapshotRecorder
from simple_finance.services.valuation import (
    HistoryCalculator,
    HoldingValuer,
    PortfolioAggregator,
    ProfitRateProjector,
    QuoteResolver,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_market_data_provider, get_exchange_rate_provider (no deps)
# 2. get_fx_rate_service (exchange rate provider)
# 3. get_quote_resolver (market data provider, fx service)
# 4. get_holding_valuer (quote resolver, fx service)


@lru_cache(maxsize=1)
def get_market_data_provider() -> MarketDataProvider:
    """Shared Yahoo Finance provider."""
    logger.debug("Initializing singleton YahooFinanceProvider")
    return YahooFinanceProvider(timeout=settings.market_data_timeout_seconds)


@lru_cache(maxsize=1)
def get_exchange_rate_provider() -> ExchangeRateProvider:
    """
    Shared exchange rate provider.

    Holds the HTTP client and the current/historical rate caches.
    """
    logger.debug("Initializing singleton ExchangeRateApiProvider")
    return ExchangeRateApiProvider(
        base_url=settings.exchange_rate_api_url,
        timeout=settings.fx_timeout_seconds,
        current_ttl=settings.fx_current_cache_ttl_seconds,
        historical_ttl=settings.fx_historical_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_fx_rate_service() -> FXRateService:
    logger.debug("Initializing singleton FXRateService")
    return FXRateService(
        provider=get_exchange_rate_provider(),
        fallback_rate=settings.fallback_usd_eur_rate,
    )


@lru_cache(maxsize=1)
def get_quote_resolver() -> QuoteResolver:
    logger.debug("Initializing singleton QuoteResolver")
    return QuoteResolver(provider=get_market_data_provider(), fx_service=get_fx_rate_service())


@lru_cache(maxsize=1)
def get_holding_valuer() -> HoldingValuer:
    """Shared valuer; max_workers bounds concurrent quote lookups."""
    logger.debug("Initializing singleton HoldingValuer")
    return HoldingValuer(
        quote_resolver=get_quote_resolver(),
        fx_service=get_fx_rate_service(),
        max_workers=settings.valuation_max_workers,
    )


@lru_cache(maxsize=1)
def get_aggregator() -> PortfolioAggregator:
    return PortfolioAggregator()


@lru_cache(maxsize=1)
def get_profit_projector() -> ProfitRateProjector:
    return ProfitRateProjector()


@lru_cache(maxsize=1)
def get_history_calculator() -> HistoryCalculator:
    return HistoryCalculator()


@lru_cache(maxsize=1)
def get_holding_service() -> HoldingService:
    return HoldingService()


# =============================================================================
# PER-REQUEST INSTANCES
# =============================================================================

def get_holding_store(db: Session = Depends(get_db)) -> SqlAlchemyHoldingStore:
    return SqlAlchemyHoldingStore(db)


def get_snapshot_store(db: Session = Depends(get_db)) -> SqlAlchemySnapshotStore:
    return SqlAlchemySnapshotStore(db)


def get_snapshot_recorder(
        valuer: HoldingValuer = Depends(get_holding_valuer),
        aggregator: PortfolioAggregator = Depends(get_aggregator),
        snapshot_store: SqlAlchemySnapshotStore = Depends(get_snapshot_store),
) -> SnapshotRecorder:
    return SnapshotRecorder(valuer, aggregator, snapshot_store)


def clear_service_caches() -> None:
    """
    Drop all singletons (tests, or after changing settings at runtime).
    """
    get_market_data_provider.cache_clear()
    get_exchange_rate_provider.cache_clear()
    get_fx_rate_service.cache_clear()
    get_quote_resolver.cache_clear()
    get_holding_valuer.cache_clear()
    get_aggregator.cache_clear()
    get_profit_projector.cache_clear()
    get_history_calculator.cache_clear()
    get_holding_service.cache_clear()
