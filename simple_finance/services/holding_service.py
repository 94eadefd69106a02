# simple_finance/services/holding_service.py
"""
Holding Service for managing tracked positions.

This service handles:
- Listing and fetching holdings with their detail rows
- Creating a holding together with the detail matching its kind
- Updating name, quantity and detail fields
- Deleting a holding (detail rows go with it)

Rules:
- A holding's kind never changes; asking for another kind raises
  HoldingKindChangeError (delete and recreate instead)
- Symbols are stored trimmed and uppercase

Usage:
    from simple_finance.services.holding_service import HoldingService

    service = HoldingService()
    holding = service.create_holding(db, HoldingCreate(...))
    service.update_holding(db, holding.id, HoldingUpdate(quantity=Decimal("3")))
"""

import logging

from sqlalchemy.orm import Session

from simple_finance.models import (
    FixedRateDetail,
    Holding,
    HoldingKind,
    MarketTrackedDetail,
)
from simple_finance.repositories.holdings import SqlAlchemyHoldingStore
from simple_finance.schemas.holdings import (
    FixedRateDetailIn,
    HoldingCreate,
    HoldingUpdate,
    MarketTrackedDetailIn,
)
from simple_finance.services.exceptions import (
    HoldingKindChangeError,
    HoldingNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class HoldingService:
    """
    CRUD for holdings. Raises domain exceptions, never HTTPException.
    """

    def list_holdings(self, db: Session) -> list[Holding]:
        """All holdings, newest first."""
        return SqlAlchemyHoldingStore(db).list_rows()

    def get_holding(self, db: Session, holding_id: int) -> Holding:
        """
        Raises:
            HoldingNotFoundError: If no holding has this id
        """
        holding = SqlAlchemyHoldingStore(db).get_row(holding_id)
        if holding is None:
            raise HoldingNotFoundError(holding_id)
        return holding

    def create_holding(self, db: Session, data: HoldingCreate) -> Holding:
        """
        Create a holding and its detail row in one commit.

        Args:
            db: Database session
            data: Validated request (detail already matches kind)

        Returns:
            The stored Holding
        """
        holding = Holding(kind=data.kind, name=data.name, quantity=data.quantity)

        if data.kind == HoldingKind.MARKET_TRACKED:
            holding.market_detail = self._new_market_detail(data.market_detail)
        elif data.kind == HoldingKind.FIXED_RATE:
            holding.fixed_rate_detail = self._new_fixed_rate_detail(data.fixed_rate_detail)

        holding = SqlAlchemyHoldingStore(db).add(holding)
        logger.info(f"Holding {holding.id} created ({holding.kind.value}, '{holding.name}')")
        return holding

    def update_holding(self, db: Session, holding_id: int, data: HoldingUpdate) -> Holding:
        """
        Apply a partial update.

        Raises:
            HoldingNotFoundError: If no holding has this id
            HoldingKindChangeError: If data.kind differs from the stored kind
            ValidationError: If the detail payload belongs to the other kind
        """
        store = SqlAlchemyHoldingStore(db)
        holding = self.get_holding(db, holding_id)

        if data.kind is not None and data.kind != holding.kind:
            raise HoldingKindChangeError(holding_id, holding.kind.value, data.kind.value)

        if holding.kind == HoldingKind.MARKET_TRACKED and data.fixed_rate_detail is not None:
            raise ValidationError(
                "fixed_rate_detail cannot be set on a MARKET_TRACKED holding",
                field="fixed_rate_detail",
            )
        if holding.kind == HoldingKind.FIXED_RATE and data.market_detail is not None:
            raise ValidationError(
                "market_detail cannot be set on a FIXED_RATE holding",
                field="market_detail",
            )

        if data.name is not None:
            holding.name = data.name.strip()
        if data.quantity is not None:
            holding.quantity = data.quantity

        if data.market_detail is not None:
            detail = holding.market_detail or MarketTrackedDetail()
            detail.symbol = data.market_detail.symbol
            detail.purchase_price = data.market_detail.purchase_price
            detail.purchase_date = data.market_detail.purchase_date
            holding.market_detail = detail
        if data.fixed_rate_detail is not None:
            detail = holding.fixed_rate_detail or FixedRateDetail()
            detail.annual_return_rate = data.fixed_rate_detail.annual_return_rate
            detail.initial_investment = data.fixed_rate_detail.initial_investment
            detail.investment_date = data.fixed_rate_detail.investment_date
            detail.currency = data.fixed_rate_detail.currency
            holding.fixed_rate_detail = detail

        holding = store.save(holding)
        logger.info(f"Holding {holding_id} updated")
        return holding

    def delete_holding(self, db: Session, holding_id: int) -> None:
        """
        Raises:
            HoldingNotFoundError: If no holding has this id
        """
        holding = self.get_holding(db, holding_id)
        SqlAlchemyHoldingStore(db).delete(holding)
        logger.info(f"Holding {holding_id} deleted")

    @staticmethod
    def _new_market_detail(payload: MarketTrackedDetailIn) -> MarketTrackedDetail:
        return MarketTrackedDetail(
            symbol=payload.symbol.strip().upper(),
            purchase_price=payload.purchase_price,
            purchase_date=payload.purchase_date,
        )

    @staticmethod
    def _new_fixed_rate_detail(payload: FixedRateDetailIn) -> FixedRateDetail:
        return FixedRateDetail(
            annual_return_rate=payload.annual_return_rate,
            initial_investment=payload.initial_investment,
            investment_date=payload.investment_date,
            currency=payload.currency,
        )
