# simple_finance/routers/holdings.py
"""
Holding management endpoints.

Provides CRUD operations for the holdings being tracked. A holding is
either MARKET_TRACKED (priced from live quotes) or FIXED_RATE (valued by
daily compounding); its kind is fixed once created.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from simple_finance.database import get_db
from simple_finance.dependencies import get_holding_service
from simple_finance.models import Holding
from simple_finance.schemas.holdings import HoldingCreate, HoldingResponse, HoldingUpdate
from simple_finance.services.holding_service import HoldingService

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/holdings",
    tags=["Holdings"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "",
    response_model=list[HoldingResponse],
    summary="List holdings",
)
def list_holdings(
        db: Session = Depends(get_db),
        service: HoldingService = Depends(get_holding_service),
) -> list[Holding]:
    """All holdings with their detail, newest first."""
    return service.list_holdings(db)


@router.get(
    "/{holding_id}",
    response_model=HoldingResponse,
    summary="Get a holding",
)
def get_holding(
        holding_id: int,
        db: Session = Depends(get_db),
        service: HoldingService = Depends(get_holding_service),
) -> Holding:
    return service.get_holding(db, holding_id)


@router.post(
    "",
    response_model=HoldingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a holding",
    response_description="The created holding",
)
def create_holding(
        holding: HoldingCreate,
        db: Session = Depends(get_db),
        service: HoldingService = Depends(get_holding_service),
) -> Holding:
    """
    Create a holding.

    - **kind**: MARKET_TRACKED or FIXED_RATE
    - **name**: Display name (1-200 characters)
    - **quantity**: Units held, > 0 (default 1)
    - **market_detail**: Required for MARKET_TRACKED (symbol, purchase price and date)
    - **fixed_rate_detail**: Required for FIXED_RATE (rate, principal, investment date, currency)
    """
    return service.create_holding(db, holding)


@router.put(
    "/{holding_id}",
    response_model=HoldingResponse,
    summary="Update a holding",
)
def update_holding(
        holding_id: int,
        holding: HoldingUpdate,
        db: Session = Depends(get_db),
        service: HoldingService = Depends(get_holding_service),
) -> Holding:
    """
    Partially update a holding.

    Changing `kind` is rejected with 409; delete and recreate instead.
    """
    return service.update_holding(db, holding_id, holding)


@router.delete(
    "/{holding_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a holding",
)
def delete_holding(
        holding_id: int,
        db: Session = Depends(get_db),
        service: HoldingService = Depends(get_holding_service),
) -> Response:
    service.delete_holding(db, holding_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
