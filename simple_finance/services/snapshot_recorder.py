# simple_finance/services/snapshot_recorder.py
"""
Daily portfolio snapshot orchestration.

SnapshotRecorder runs one valuation pass and stores the total:

    1. No holdings → return "nothing recorded", write nothing
    2. Value every holding (concurrent lookups, joined)
    3. Aggregate into PortfolioStatistics
    4. Upsert today's snapshot (date only, no time) with the total value
    5. Return the snapshot and the statistics

The upsert is the only write and the last step: if valuation or
aggregation raises, nothing is stored. Authentication of whoever triggers
the run is handled before this class is reached.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable

from simple_finance.services.protocols import SnapshotStore
from simple_finance.services.valuation.aggregator import PortfolioAggregator
from simple_finance.services.valuation.holding_valuer import HoldingValuer
from simple_finance.services.valuation.types import HoldingData, SnapshotResult
from simple_finance.utils.date_utils import utc_today

logger = logging.getLogger(__name__)

NO_HOLDINGS_MESSAGE = "No products found, snapshot not created"
RECORDED_MESSAGE = "Portfolio snapshot created successfully"

# How far back to look for the previous total when today's snapshot already exists
PREVIOUS_LOOKBACK_DAYS = 31


class SnapshotRecorder:
    """
    Values the portfolio and stores one snapshot per calendar date.

    The snapshot date comes from `clock` (UTC today); earlier dates are
    never written.

    Example:
        recorder = SnapshotRecorder(valuer, aggregator, snapshot_store)
        result = recorder.record_daily_snapshot(holding_store.list_all())
        if result.recorded:
            print(result.snapshot.value)
    """

    def __init__(
            self,
            valuer: HoldingValuer,
            aggregator: PortfolioAggregator,
            snapshot_store: SnapshotStore,
            clock: Callable[[], date] = utc_today,
    ) -> None:
        self._valuer = valuer
        self._aggregator = aggregator
        self._snapshots = snapshot_store
        self._clock = clock

    def record_daily_snapshot(
            self,
            holdings: list[HoldingData],
    ) -> SnapshotResult:
        """
        Value the holdings and upsert today's snapshot.

        Args:
            holdings: Every holding in the portfolio

        Returns:
            SnapshotResult (recorded=False only when holdings is empty)

        Raises:
            ValidationError: Invalid fixed-rate terms; nothing is written
            Exception: Store failures propagate; nothing is written before them
        """
        if not holdings:
            logger.info("No holdings, snapshot not recorded")
            return SnapshotResult(recorded=False, message=NO_HOLDINGS_MESSAGE)

        today = self._clock()

        valued = self._valuer.value_all(holdings, evaluation_date=today)
        statistics = self._aggregator.aggregate(
            valued,
            previous_total=self._previous_total(today),
        )

        snapshot = self._snapshots.upsert_by_date(today, statistics.total_value)
        logger.info(
            f"Snapshot recorded for {snapshot.date}: value={snapshot.value}, "
            f"holdings={statistics.holding_count}, unpriced={statistics.unpriced_count}"
        )

        return SnapshotResult(
            recorded=True,
            message=RECORDED_MESSAGE,
            snapshot=snapshot,
            statistics=statistics,
        )

    def _previous_total(self, today: date) -> Decimal | None:
        """Value of the most recent snapshot dated before today."""
        latest = self._snapshots.get_latest()
        if latest is None:
            return None
        if latest.date < today:
            return latest.value

        earlier = [
            s for s in self._snapshots.get_last_n_days(PREVIOUS_LOOKBACK_DAYS, today=today)
            if s.date < today
        ]
        return earlier[-1].value if earlier else None
