# simple_finance/routers/exchange_rates.py
"""
USD->EUR exchange rate endpoints.

Both endpoints always answer: when the provider fails, the response
carries the fallback rate with is_fallback=true.
"""

from datetime import date

from fastapi import APIRouter, Depends

from simple_finance.dependencies import get_fx_rate_service
from simple_finance.schemas.valuation import ExchangeRateResponse
from simple_finance.services.fx_rate_service import ExchangeRate, FXRateService

router = APIRouter(
    prefix="/exchange-rates",
    tags=["Exchange Rates"],
)


def _map_rate(rate: ExchangeRate) -> ExchangeRateResponse:
    """Map internal ExchangeRate to Pydantic schema."""
    return ExchangeRateResponse(
        from_currency=rate.from_currency,
        to_currency=rate.to_currency,
        rate=rate.rate,
        observed_at=rate.observed_at,
        is_fallback=rate.is_fallback,
    )


@router.get(
    "/current",
    response_model=ExchangeRateResponse,
    summary="Current USD->EUR rate",
)
def get_current_rate(
        fx_service: FXRateService = Depends(get_fx_rate_service),
) -> ExchangeRateResponse:
    return _map_rate(fx_service.get_current_exchange_rate())


@router.get(
    "/historical/{on_date}",
    response_model=ExchangeRateResponse,
    summary="USD->EUR rate on a past date",
)
def get_historical_rate(
        on_date: date,
        fx_service: FXRateService = Depends(get_fx_rate_service),
) -> ExchangeRateResponse:
    """
    Rate for `on_date` (YYYY-MM-DD).

    Falls back to the current rate, then to the constant rate.
    """
    return _map_rate(fx_service.get_historical_exchange_rate(on_date))
