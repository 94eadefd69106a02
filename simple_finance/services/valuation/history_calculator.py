# simple_finance/services/valuation/history_calculator.py
"""
Historical series derived from stored portfolio snapshots.

Nothing here is persisted or cached: the series are recomputed from the
snapshot records on every read.

Series:
    evolution       (date, value) for the last N days, oldest first
    daily_changes   value[i] - value[i-1], tagged with the later date
    monthly_wealth  per (year, month), the value of the latest snapshot
                    in that month, months ascending

Monthly tie-break: if two snapshots share the latest date of a month, the
one later in the input wins.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from simple_finance.services.constants import round_cents
from simple_finance.services.valuation.types import (
    MonthlyPoint,
    PortfolioHistory,
    SeriesPoint,
    SnapshotPoint,
)
from simple_finance.utils.date_utils import month_key, month_label

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DAYS = 30


class HistoryCalculator:
    """
    Builds the evolution, daily change and monthly wealth series.

    Example:
        calc = HistoryCalculator()
        history = calc.calculate(
            recent_snapshots, yearly_snapshots,
            days=30, reference_date=date.today(),
        )
    """

    def calculate(
            self,
            recent_snapshots: list[SnapshotPoint],
            monthly_snapshots: list[SnapshotPoint] | None = None,
            days: int = DEFAULT_HISTORY_DAYS,
            reference_date: date | None = None,
    ) -> PortfolioHistory:
        """
        Build all three series.

        Args:
            recent_snapshots: Snapshots for the evolution window
            monthly_snapshots: Snapshots to bucket by month
                               (default: recent_snapshots)
            days: Evolution window length
            reference_date: End of the window (default: latest snapshot date)

        Returns:
            PortfolioHistory
        """
        evolution = self.evolution(recent_snapshots, days=days, reference_date=reference_date)
        source = recent_snapshots if monthly_snapshots is None else monthly_snapshots
        history = PortfolioHistory(
            evolution=evolution,
            daily_changes=self.daily_changes(evolution),
            monthly_wealth=self.monthly_wealth(source),
        )
        logger.debug(
            f"History built: {len(history.evolution)} evolution points, "
            f"{len(history.monthly_wealth)} months"
        )
        return history

    def evolution(
            self,
            snapshots: list[SnapshotPoint],
            days: int = DEFAULT_HISTORY_DAYS,
            reference_date: date | None = None,
    ) -> list[SeriesPoint]:
        """
        Raw (date, value) points within the last `days` days.

        The window is the `days` calendar days ending on reference_date.
        Points come back sorted by date ascending.
        """
        if not snapshots:
            return []
        if reference_date is None:
            reference_date = max(s.date for s in snapshots)
        start = reference_date - timedelta(days=days - 1)

        in_window = [s for s in snapshots if start <= s.date <= reference_date]
        in_window.sort(key=lambda s: s.date)
        return [SeriesPoint(date=s.date, value=s.value) for s in in_window]

    def daily_changes(self, points: list[SeriesPoint]) -> list[SeriesPoint]:
        """
        First differences of an ordered series.

        N points yield N-1 changes; each change carries the later date.
        """
        return [
            SeriesPoint(date=current.date, value=round_cents(current.value - previous.value))
            for previous, current in zip(points, points[1:])
        ]

    def monthly_wealth(self, snapshots: list[SnapshotPoint]) -> list[MonthlyPoint]:
        """
        Value of the latest snapshot per calendar month, months ascending.
        """
        latest: dict[tuple[int, int], SnapshotPoint] = {}
        for snapshot in snapshots:
            key = month_key(snapshot.date)
            kept = latest.get(key)
            if kept is None or snapshot.date >= kept.date:
                latest[key] = snapshot

        return [
            MonthlyPoint(month=month_label(key), value=latest[key].value, as_of=latest[key].date)
            for key in sorted(latest)
        ]
