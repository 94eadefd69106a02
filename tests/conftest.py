# tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Database session fixtures (in-memory SQLite)
- A TestClient with database and provider overrides
- In-memory holding and snapshot stores
- Mock quote and exchange rate providers
- Sample data factories
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from simple_finance.database import get_db
from simple_finance.dependencies import (
    get_fx_rate_service,
    get_holding_valuer,
    get_quote_resolver,
)
from simple_finance.main import app
from simple_finance.middleware import limiter
from simple_finance.models import (
    Base,
    FixedRateDetail,
    Holding,
    HoldingKind,
    MarketTrackedDetail,
)
from simple_finance.services.fx_rate_service import FXRateService
from simple_finance.services.market_data.base import (
    ExchangeRateProvider,
    FetchResult,
    MarketDataProvider,
    RawQuote,
    RawRate,
)
from simple_finance.services.valuation import HoldingValuer, QuoteResolver
from simple_finance.services.valuation.types import (
    FixedRateTerms,
    HoldingData,
    MarketTrackedTerms,
    SnapshotPoint,
)

OBSERVED_AT = datetime(2024, 6, 1, 16, 0, tzinfo=timezone.utc)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# MOCK MARKET DATA PROVIDER
# =============================================================================

class MockMarketDataProvider(MarketDataProvider):
    """
    Mock implementation of MarketDataProvider for testing.

    Unknown symbols come back as a failed FetchResult, like the real provider.
    """

    def __init__(self):
        self._quotes: dict[str, RawQuote] = {}
        self._errors: dict[str, Exception] = {}
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "mock"

    def add_quote(
            self,
            symbol: str,
            price: str | Decimal,
            currency: str = "USD",
            display_name: str | None = None,
    ) -> None:
        """Configure a successful quote for a symbol."""
        symbol = symbol.upper()
        self._quotes[symbol] = RawQuote(
            symbol=symbol,
            price=Decimal(price),
            currency=currency,
            observed_at=OBSERVED_AT,
            display_name=display_name,
        )

    def add_error(self, symbol: str, error: Exception) -> None:
        """Make fetch_quote raise for a symbol (providers should not, but may)."""
        self._errors[symbol.upper()] = error

    def fetch_quote(self, symbol: str) -> FetchResult[RawQuote]:
        self.calls.append(symbol)
        key = symbol.upper()
        if key in self._errors:
            raise self._errors[key]
        if key in self._quotes:
            return FetchResult.success(self._quotes[key])
        return FetchResult.failure(f"no quote for {key}")


# =============================================================================
# MOCK EXCHANGE RATE PROVIDER
# =============================================================================

class MockExchangeRateProvider(ExchangeRateProvider):
    """
    Mock implementation of ExchangeRateProvider for testing.

    Rates default to unavailable; configure them with set_current / add_historical.
    """

    def __init__(self, current: str | Decimal | None = None):
        self._current: RawRate | None = None
        self._historical: dict[date, RawRate] = {}
        self._raise: Exception | None = None
        self.current_calls = 0
        self.historical_calls: list[date] = []
        if current is not None:
            self.set_current(current)

    @property
    def name(self) -> str:
        return "mock-fx"

    def set_current(self, rate: str | Decimal | None) -> None:
        self._current = RawRate(rate=Decimal(rate), observed_at=OBSERVED_AT) if rate else None

    def add_historical(self, on_date: date, rate: str | Decimal) -> None:
        self._historical[on_date] = RawRate(
            rate=Decimal(rate),
            observed_at=datetime(on_date.year, on_date.month, on_date.day, tzinfo=timezone.utc),
        )

    def raise_on_fetch(self, error: Exception) -> None:
        """Make every fetch raise instead of returning a failure."""
        self._raise = error

    def fetch_current(self) -> FetchResult[RawRate]:
        self.current_calls += 1
        if self._raise is not None:
            raise self._raise
        if self._current is None:
            return FetchResult.failure("current rate unavailable")
        return FetchResult.success(self._current)

    def fetch_historical(self, on_date: date) -> FetchResult[RawRate]:
        self.historical_calls.append(on_date)
        if self._raise is not None:
            raise self._raise
        if on_date not in self._historical:
            return FetchResult.failure(f"no rate for {on_date}")
        return FetchResult.success(self._historical[on_date])


# =============================================================================
# IN-MEMORY STORES
# =============================================================================

class InMemoryHoldingStore:
    """HoldingStore over a plain list."""

    def __init__(self, holdings: list[HoldingData] | None = None):
        self._holdings = list(holdings or [])

    def list_all(self) -> list[HoldingData]:
        return list(self._holdings)

    def get(self, holding_id: int) -> HoldingData | None:
        return next((h for h in self._holdings if h.id == holding_id), None)


class InMemorySnapshotStore:
    """SnapshotStore over a dict keyed by date."""

    def __init__(self, snapshots: list[SnapshotPoint] | None = None):
        self._by_date: dict[date, SnapshotPoint] = {s.date: s for s in snapshots or []}
        self.upserts: list[SnapshotPoint] = []
        self.fail_on_upsert: Exception | None = None

    def get_latest(self) -> SnapshotPoint | None:
        if not self._by_date:
            return None
        return self._by_date[max(self._by_date)]

    def get_last_n_days(self, days: int, today: date | None = None) -> list[SnapshotPoint]:
        today = today or datetime.now(timezone.utc).date()
        start = today - timedelta(days=days - 1)
        return [self._by_date[d] for d in sorted(self._by_date) if d >= start]

    def upsert_by_date(self, snapshot_date: date, value: Decimal) -> SnapshotPoint:
        if self.fail_on_upsert is not None:
            raise self.fail_on_upsert
        point = SnapshotPoint(date=snapshot_date, value=value)
        self._by_date[snapshot_date] = point
        self.upserts.append(point)
        return point

    def all(self) -> list[SnapshotPoint]:
        return [self._by_date[d] for d in sorted(self._by_date)]


# =============================================================================
# PROVIDER / SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def market_provider() -> MockMarketDataProvider:
    return MockMarketDataProvider()


@pytest.fixture
def rate_provider() -> MockExchangeRateProvider:
    """Exchange rate provider with a live rate of 0.90."""
    return MockExchangeRateProvider(current="0.90")


@pytest.fixture
def fx_service(rate_provider) -> FXRateService:
    return FXRateService(provider=rate_provider)


# =============================================================================
# FACTORY HELPERS
# =============================================================================

def market_holding(
        holding_id: int = 1,
        symbol: str = "AAPL",
        quantity: str = "10",
        purchase_price: str = "100.00",
        name: str | None = None,
) -> HoldingData:
    """Create a MARKET_TRACKED HoldingData."""
    return HoldingData(
        id=holding_id,
        kind=HoldingKind.MARKET_TRACKED,
        name=name or symbol,
        quantity=Decimal(quantity),
        market=MarketTrackedTerms(
            symbol=symbol,
            purchase_price=Decimal(purchase_price),
            purchase_date=date(2024, 1, 15),
        ),
    )


def fixed_holding(
        holding_id: int = 2,
        principal: str = "1000.00",
        rate: str = "0.05",
        investment_date: date = date(2024, 1, 1),
        quantity: str = "1",
        currency: str = "EUR",
        name: str = "Savings",
) -> HoldingData:
    """Create a FIXED_RATE HoldingData."""
    return HoldingData(
        id=holding_id,
        kind=HoldingKind.FIXED_RATE,
        name=name,
        quantity=Decimal(quantity),
        fixed_rate=FixedRateTerms(
            annual_return_rate=Decimal(rate),
            initial_investment=Decimal(principal),
            investment_date=investment_date,
            currency=currency,
        ),
    )


def create_market_row(
        db: Session,
        symbol: str = "AAPL",
        quantity: str = "10",
        purchase_price: str = "100.00",
        name: str | None = None,
) -> Holding:
    """Insert a MARKET_TRACKED holding with its detail row."""
    holding = Holding(
        kind=HoldingKind.MARKET_TRACKED,
        name=name or symbol,
        quantity=Decimal(quantity),
        market_detail=MarketTrackedDetail(
            symbol=symbol,
            purchase_price=Decimal(purchase_price),
            purchase_date=date(2024, 1, 15),
        ),
    )
    db.add(holding)
    db.commit()
    db.refresh(holding)
    return holding


def create_fixed_row(
        db: Session,
        principal: str = "1000.00",
        rate: str = "0.05",
        investment_date: date = date(2024, 1, 1),
        currency: str = "EUR",
        name: str = "Savings",
) -> Holding:
    """Insert a FIXED_RATE holding with its detail row."""
    holding = Holding(
        kind=HoldingKind.FIXED_RATE,
        name=name,
        quantity=Decimal("1"),
        fixed_rate_detail=FixedRateDetail(
            annual_return_rate=Decimal(rate),
            initial_investment=Decimal(principal),
            investment_date=investment_date,
            currency=currency,
        ),
    )
    db.add(holding)
    db.commit()
    db.refresh(holding)
    return holding


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def client(db, market_provider, fx_service) -> Iterator[TestClient]:
    """
    TestClient wired to the test database and the mock providers.

    Rate limit counters are reset so tests never share a budget.
    """
    resolver = QuoteResolver(market_provider, fx_service)
    valuer = HoldingValuer(resolver, fx_service, max_workers=2)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_fx_rate_service] = lambda: fx_service
    app.dependency_overrides[get_quote_resolver] = lambda: resolver
    app.dependency_overrides[get_holding_valuer] = lambda: valuer
    limiter.reset()

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
