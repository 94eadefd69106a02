# simple_finance/routers/quotes.py
"""
Live quote lookup.

GET /quotes/{symbol} returns the current price normalized to EUR, the
same quote the portfolio valuation would use.
"""

import logging

from fastapi import APIRouter, Depends, Request

from simple_finance.dependencies import get_quote_resolver
from simple_finance.middleware.rate_limit import RATE_LIMIT_QUOTES, limiter
from simple_finance.schemas.validators import validate_symbol
from simple_finance.schemas.valuation import QuoteResponse
from simple_finance.services.exceptions import TickerNotFoundError, ValidationError
from simple_finance.services.valuation import QuoteResolver

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/quotes",
    tags=["Quotes"],
)


@router.get(
    "/{symbol}",
    response_model=QuoteResponse,
    summary="Get a live quote",
    response_description="Quote with the price converted to EUR",
)
@limiter.limit(RATE_LIMIT_QUOTES)
def get_quote(
        request: Request,
        symbol: str,
        resolver: QuoteResolver = Depends(get_quote_resolver),
) -> QuoteResponse:
    """
    Resolve a symbol to a EUR price.

    Returns 404 when the provider has no usable price for the symbol.
    """
    try:
        symbol = validate_symbol(symbol)
    except ValueError as e:
        raise ValidationError(str(e), field="symbol") from e

    quote = resolver.resolve_quote(symbol)
    if quote is None:
        raise TickerNotFoundError(symbol)

    return QuoteResponse(
        symbol=quote.symbol,
        price=quote.price,
        provider_price=quote.provider_price,
        provider_currency=quote.provider_currency,
        observed_at=quote.observed_at,
        display_name=quote.display_name,
        exchange_rate=quote.exchange_rate,
    )
