# simple_finance/services/valuation/holding_valuer.py
"""
Per-holding valuation.

HoldingValuer turns a HoldingData into a ValuedHolding by dispatching on
its kind:

    MARKET_TRACKED → live quote (QuoteResolver), 0 when no quote is available
    FIXED_RATE     → daily compounding (FixedRateCalculator), converting a
                     USD principal at the investment date's rate first

Total value = unit value × quantity for both kinds; callers never repeat
that multiplication.

`value_all` is the fan-out entry point: distinct symbols are resolved once
each, concurrently, and then every holding is valued concurrently. Results
are joined in input order before returning, so aggregation never starts on
a partial set.
"""

import contextvars
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Mapping

from simple_finance.models import HoldingKind
from simple_finance.services.constants import round_cents
from simple_finance.services.fx_rate_service import FXRateService
from simple_finance.services.valuation.calculators import FixedRateCalculator
from simple_finance.services.valuation.quote_resolver import QuoteResolver
from simple_finance.services.valuation.types import HoldingData, Quote, ValuedHolding

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
DEFAULT_MAX_WORKERS = 8


class HoldingValuer:
    """
    Values holdings of either kind in the reporting currency.

    Attributes:
        _quote_resolver: Source of EUR-normalized quotes
        _fx_service: Used for USD-denominated fixed-rate principals
        _calculator: Fixed-rate compounding
        _max_workers: Upper bound on concurrent lookups

    Example:
        valuer = HoldingValuer(resolver, fx_service, max_workers=8)
        valued = valuer.value_all(holdings, evaluation_date=date.today())
    """

    def __init__(
            self,
            quote_resolver: QuoteResolver,
            fx_service: FXRateService,
            calculator: FixedRateCalculator | None = None,
            max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._quote_resolver = quote_resolver
        self._fx_service = fx_service
        self._calculator = calculator or FixedRateCalculator()
        self._max_workers = max(1, max_workers)

    # =========================================================================
    # SINGLE HOLDING
    # =========================================================================

    def value_of(
            self,
            holding: HoldingData,
            quote_cache: Mapping[str, Quote | None] | None = None,
            evaluation_date: date | None = None,
    ) -> ValuedHolding:
        """
        Value one holding.

        Args:
            holding: Holding to value
            quote_cache: Quotes already resolved, keyed by uppercase symbol.
                         A symbol mapped to None is known to be unpriceable
                         and is not fetched again.
            evaluation_date: Date for fixed-rate compounding (default: today)

        Returns:
            ValuedHolding

        Raises:
            ValidationError: Invalid fixed-rate terms (propagated)
        """
        if holding.kind == HoldingKind.MARKET_TRACKED:
            return self._value_market_tracked(holding, quote_cache or {})
        elif holding.kind == HoldingKind.FIXED_RATE:
            return self._value_fixed_rate(holding, evaluation_date)
        raise ValueError(f"Unsupported holding kind: {holding.kind}")

    def _value_market_tracked(
            self,
            holding: HoldingData,
            quote_cache: Mapping[str, Quote | None],
    ) -> ValuedHolding:
        terms = holding.market
        symbol = terms.symbol.strip().upper()

        if symbol in quote_cache:
            quote = quote_cache[symbol]
        else:
            quote = self._quote_resolver.resolve_quote(symbol)

        warnings: list[str] = []
        if quote is None:
            unit_value = ZERO
            warnings.append(f"No price available for {symbol}; valued at 0")
            logger.warning(f"Holding {holding.id} ({symbol}) unpriced, valued at 0")
        else:
            unit_value = quote.price

        return self._build(holding, unit_value, terms.purchase_price, quote, warnings)

    def _value_fixed_rate(
            self,
            holding: HoldingData,
            evaluation_date: date | None,
    ) -> ValuedHolding:
        terms = holding.fixed_rate
        evaluation_date = evaluation_date or datetime.now(timezone.utc).date()

        if terms.needs_conversion:
            # Same converted principal serves as value base and cost basis
            principal = self._fx_service.convert_to_reporting_currency_historical(
                terms.initial_investment, terms.investment_date
            )
        else:
            principal = terms.initial_investment

        unit_value = self._calculator.current_value(
            principal=principal,
            annual_rate=terms.annual_return_rate,
            investment_date=terms.investment_date,
            evaluation_date=evaluation_date,
        )
        logger.debug(
            f"Holding {holding.id} fixed-rate value {unit_value} "
            f"(principal={principal}, rate={terms.annual_return_rate})"
        )
        return self._build(holding, unit_value, principal, None, [])

    @staticmethod
    def _build(
            holding: HoldingData,
            unit_value: Decimal,
            unit_cost_basis: Decimal,
            quote: Quote | None,
            warnings: list[str],
    ) -> ValuedHolding:
        return ValuedHolding(
            holding=holding,
            unit_value=unit_value,
            total_value=round_cents(unit_value * holding.quantity),
            unit_cost_basis=unit_cost_basis,
            total_cost_basis=round_cents(unit_cost_basis * holding.quantity),
            quote=quote,
            warnings=warnings,
        )

    # =========================================================================
    # FAN-OUT
    # =========================================================================

    def resolve_quotes(self, symbols: list[str]) -> dict[str, Quote | None]:
        """
        Resolve distinct symbols concurrently.

        Args:
            symbols: Symbols to resolve (duplicates and case ignored)

        Returns:
            Dict of uppercase symbol -> Quote, or None when unavailable
        """
        unique = sorted({s.strip().upper() for s in symbols if s and s.strip()})
        if not unique:
            return {}

        quotes: dict[str, Quote | None] = {}
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(unique))) as executor:
            future_to_symbol = {
                executor.submit(_in_context(self._quote_resolver.resolve_quote), symbol): symbol
                for symbol in unique
            }
            for future in as_completed(future_to_symbol):
                quotes[future_to_symbol[future]] = future.result()

        priced = sum(1 for q in quotes.values() if q is not None)
        logger.info(f"Resolved {priced} of {len(unique)} quotes")
        return quotes

    def value_all(
            self,
            holdings: list[HoldingData],
            evaluation_date: date | None = None,
    ) -> list[ValuedHolding]:
        """
        Value every holding, issuing independent lookups concurrently.

        Args:
            holdings: Holdings to value
            evaluation_date: Date for fixed-rate compounding (default: today)

        Returns:
            ValuedHolding per input holding, same order

        Raises:
            ValidationError: If any fixed-rate holding has invalid terms
        """
        if not holdings:
            return []

        evaluation_date = evaluation_date or datetime.now(timezone.utc).date()
        quote_cache = self.resolve_quotes([
            h.market.symbol for h in holdings if h.kind == HoldingKind.MARKET_TRACKED
        ])

        workers = min(self._max_workers, len(holdings))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(
                    _in_context(self.value_of), holding, quote_cache, evaluation_date
                )
                for holding in holdings
            ]
            return [future.result() for future in futures]


def _in_context(func):
    """Bind func to a copy of the caller's context (keeps correlation IDs in worker logs)."""
    ctx = contextvars.copy_context()

    def runner(*args, **kwargs):
        return ctx.run(func, *args, **kwargs)

    return runner
