# simple_finance/services/valuation/profit_rates.py
"""
Projected profit of fixed-rate holdings.

Only FIXED_RATE holdings are projected: a market-tracked holding's future
return cannot be known from current data, so it contributes nothing.

    daily_i = cost_basis_i × quantity_i × annual_rate_i / 365
    daily   = Σ daily_i
    weekly  = daily × 7
    monthly = daily × 30
    annual  = daily × 365

Every figure is rounded once, from the unrounded daily sum.
"""

import logging
from decimal import Decimal

from simple_finance.models import HoldingKind
from simple_finance.services.constants import (
    CALENDAR_DAYS_PER_YEAR,
    DAYS_PER_MONTH,
    DAYS_PER_WEEK,
    round_cents,
)
from simple_finance.services.valuation.types import ProfitRates, ValuedHolding

logger = logging.getLogger(__name__)


class ProfitRateProjector:

    def project(self, valued_holdings: list[ValuedHolding]) -> ProfitRates:
        """
        Project daily/weekly/monthly/annual profit of fixed-rate holdings.

        Args:
            valued_holdings: Any mix of holding kinds

        Returns:
            ProfitRates (all zero when there are no fixed-rate holdings)
        """
        fixed = [v for v in valued_holdings if v.kind == HoldingKind.FIXED_RATE]
        if not fixed:
            return ProfitRates.zero()

        daily = sum(
            (
                v.unit_cost_basis * v.quantity * v.holding.fixed_rate.annual_return_rate
                / CALENDAR_DAYS_PER_YEAR
                for v in fixed
            ),
            Decimal("0"),
        )

        return ProfitRates(
            daily=round_cents(daily),
            weekly=round_cents(daily * DAYS_PER_WEEK),
            monthly=round_cents(daily * DAYS_PER_MONTH),
            annual=round_cents(daily * CALENDAR_DAYS_PER_YEAR),
        )
