# simple_finance/repositories/holdings.py
"""
Holding persistence.

Detail rows are loaded eagerly with their parent and removed with it
(cascade delete-orphan on the relationships).
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from simple_finance.models import Holding, HoldingKind
from simple_finance.services.valuation.types import (
    FixedRateTerms,
    HoldingData,
    MarketTrackedTerms,
)

logger = logging.getLogger(__name__)


def to_holding_data(row: Holding) -> HoldingData:
    """Map an ORM holding (with its detail row) to HoldingData."""
    market = None
    fixed_rate = None

    if row.kind == HoldingKind.MARKET_TRACKED and row.market_detail is not None:
        detail = row.market_detail
        market = MarketTrackedTerms(
            symbol=detail.symbol,
            purchase_price=detail.purchase_price,
            purchase_date=detail.purchase_date,
        )
    elif row.kind == HoldingKind.FIXED_RATE and row.fixed_rate_detail is not None:
        detail = row.fixed_rate_detail
        fixed_rate = FixedRateTerms(
            annual_return_rate=detail.annual_return_rate,
            initial_investment=detail.initial_investment,
            investment_date=detail.investment_date,
            currency=detail.currency,
        )

    return HoldingData(
        id=row.id,
        kind=row.kind,
        name=row.name,
        quantity=row.quantity,
        market=market,
        fixed_rate=fixed_rate,
    )


class SqlAlchemyHoldingStore:
    """
    Holding store backed by one SQLAlchemy session.

    `list_all` / `get` return core dataclasses; `get_row`, `add` and
    `delete` work on ORM rows for HoldingService.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    # =========================================================================
    # READ (HoldingStore protocol)
    # =========================================================================

    def list_all(self) -> list[HoldingData]:
        return [to_holding_data(row) for row in self.list_rows()]

    def get(self, holding_id: int) -> HoldingData | None:
        row = self.get_row(holding_id)
        return to_holding_data(row) if row is not None else None

    # =========================================================================
    # ORM ACCESS
    # =========================================================================

    def list_rows(self) -> list[Holding]:
        stmt = (
            select(Holding)
            .options(
                selectinload(Holding.market_detail),
                selectinload(Holding.fixed_rate_detail),
            )
            .order_by(Holding.created_at.desc(), Holding.id.desc())
        )
        return list(self._db.scalars(stmt))

    def get_row(self, holding_id: int) -> Holding | None:
        return self._db.get(Holding, holding_id)

    def add(self, holding: Holding) -> Holding:
        self._db.add(holding)
        self._db.commit()
        self._db.refresh(holding)
        return holding

    def save(self, holding: Holding) -> Holding:
        self._db.commit()
        self._db.refresh(holding)
        return holding

    def delete(self, holding: Holding) -> None:
        self._db.delete(holding)
        self._db.commit()
