# simple_finance/services/valuation/aggregator.py
"""
Portfolio-level aggregation of valued holdings.

Formulas:
    total_value = Σ total_value_i
    total_cost_basis = Σ total_cost_basis_i
    total_return = total_value - total_cost_basis
    total_return_percentage = total_return / total_cost_basis × 100
                              (0 when total_cost_basis <= 0)

When the previous stored total is known, the day-over-day change against
it is included as well.
"""

import logging
from decimal import Decimal

from simple_finance.services.constants import HUNDRED, round_cents
from simple_finance.services.valuation.calculators import ReturnCalculator
from simple_finance.services.valuation.types import PortfolioStatistics, ValuedHolding

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class PortfolioAggregator:
    """Reduces valued holdings to PortfolioStatistics."""

    def __init__(self, return_calculator: ReturnCalculator | None = None) -> None:
        self._returns = return_calculator or ReturnCalculator()

    def aggregate(
            self,
            valued_holdings: list[ValuedHolding],
            previous_total: Decimal | None = None,
    ) -> PortfolioStatistics:
        """
        Sum values and cost bases and derive returns.

        Args:
            valued_holdings: Output of HoldingValuer (all resolved)
            previous_total: Last recorded portfolio value, if any

        Returns:
            PortfolioStatistics with every amount rounded to the cent
        """
        total_value = sum((v.total_value for v in valued_holdings), ZERO)
        total_cost_basis = sum((v.total_cost_basis for v in valued_holdings), ZERO)
        total_return = total_value - total_cost_basis

        if total_cost_basis > ZERO:
            total_return_pct = total_return / total_cost_basis * HUNDRED
        else:
            total_return_pct = ZERO

        if previous_total is not None:
            daily_change = self._returns.daily_change(total_value, previous_total)
            daily_change_pct = self._returns.daily_change_percentage(total_value, previous_total)
        else:
            daily_change = round_cents(ZERO)
            daily_change_pct = round_cents(ZERO)

        unpriced = sum(1 for v in valued_holdings if not v.is_priced)
        if unpriced:
            logger.warning(f"{unpriced} of {len(valued_holdings)} holdings valued at 0 (no quote)")

        return PortfolioStatistics(
            total_value=round_cents(total_value),
            total_cost_basis=round_cents(total_cost_basis),
            total_return=round_cents(total_return),
            total_return_percentage=round_cents(total_return_pct),
            holding_count=len(valued_holdings),
            unpriced_count=unpriced,
            daily_change=daily_change,
            daily_change_percentage=daily_change_pct,
        )
