# tests/services/test_history_calculator.py
"""
Tests for HistoryCalculator.

This module tests:
- Evolution window filtering and ordering
- Daily change first differences
- Monthly wealth bucketing and its tie-break
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from simple_finance.services.valuation.history_calculator import HistoryCalculator
from simple_finance.services.valuation.types import MonthlyPoint, SeriesPoint, SnapshotPoint


def snap(d: date, value: str) -> SnapshotPoint:
    return SnapshotPoint(date=d, value=Decimal(value))


@pytest.fixture
def calculator() -> HistoryCalculator:
    return HistoryCalculator()


# =============================================================================
# EVOLUTION
# =============================================================================

class TestEvolution:
    """Tests for the evolution series."""

    def test_sorted_oldest_first(self, calculator):
        snapshots = [
            snap(date(2024, 6, 3), "1030"),
            snap(date(2024, 6, 1), "1000"),
            snap(date(2024, 6, 2), "1010"),
        ]

        points = calculator.evolution(snapshots, days=30, reference_date=date(2024, 6, 3))

        assert [p.date for p in points] == [date(2024, 6, 1), date(2024, 6, 2), date(2024, 6, 3)]
        assert points[0] == SeriesPoint(date=date(2024, 6, 1), value=Decimal("1000"))

    def test_window_bounds(self, calculator):
        """The window is the last N calendar days, reference date included."""
        snapshots = [
            snap(date(2024, 5, 2), "900"),
            snap(date(2024, 5, 3), "910"),
            snap(date(2024, 6, 1), "1000"),
        ]

        points = calculator.evolution(snapshots, days=30, reference_date=date(2024, 6, 1))

        assert [p.date for p in points] == [date(2024, 5, 3), date(2024, 6, 1)]

    def test_consecutive_days_give_n_points(self, calculator):
        snapshots = [
            snap(date(2024, 6, 30) - timedelta(days=offset), str(1000 + offset))
            for offset in range(60)
        ]

        history = calculator.calculate(snapshots, days=30, reference_date=date(2024, 6, 30))

        assert len(history.evolution) == 30
        assert history.evolution[0].date == date(2024, 6, 1)
        assert len(history.daily_changes) == 29

    def test_defaults_to_latest_snapshot_date(self, calculator):
        snapshots = [snap(date(2024, 1, 1), "1"), snap(date(2024, 3, 1), "2")]

        points = calculator.evolution(snapshots, days=10)

        assert [p.date for p in points] == [date(2024, 3, 1)]

    def test_empty(self, calculator):
        assert calculator.evolution([]) == []


# =============================================================================
# DAILY CHANGES
# =============================================================================

class TestDailyChanges:
    """Tests for the daily change series."""

    def test_first_differences(self, calculator):
        """N points give N-1 changes, each tagged with the later date."""
        points = [
            SeriesPoint(date(2024, 6, 1), Decimal("1000.00")),
            SeriesPoint(date(2024, 6, 2), Decimal("1012.50")),
            SeriesPoint(date(2024, 6, 4), Decimal("990.25")),
        ]

        changes = calculator.daily_changes(points)

        assert changes == [
            SeriesPoint(date(2024, 6, 2), Decimal("12.50")),
            SeriesPoint(date(2024, 6, 4), Decimal("-22.25")),
        ]

    @pytest.mark.parametrize("count", [0, 1])
    def test_fewer_than_two_points(self, calculator, count):
        points = [SeriesPoint(date(2024, 6, 1), Decimal("1"))] * count

        assert calculator.daily_changes(points) == []


# =============================================================================
# MONTHLY WEALTH
# =============================================================================

class TestMonthlyWealth:
    """Tests for the monthly wealth series."""

    def test_latest_snapshot_per_month(self, calculator):
        snapshots = [
            snap(date(2024, 2, 10), "1100"),
            snap(date(2024, 1, 5), "1000"),
            snap(date(2024, 1, 31), "1050"),
            snap(date(2024, 2, 29), "1150"),
            snap(date(2024, 1, 20), "1020"),
        ]

        months = calculator.monthly_wealth(snapshots)

        assert months == [
            MonthlyPoint(month="2024-01", value=Decimal("1050"), as_of=date(2024, 1, 31)),
            MonthlyPoint(month="2024-02", value=Decimal("1150"), as_of=date(2024, 2, 29)),
        ]

    def test_same_month_different_years(self, calculator):
        snapshots = [snap(date(2024, 3, 1), "2"), snap(date(2023, 3, 1), "1")]

        months = calculator.monthly_wealth(snapshots)

        assert [m.month for m in months] == ["2023-03", "2024-03"]

    def test_tie_on_date_later_input_wins(self, calculator):
        """Two snapshots on the same latest date: the later one in input order wins."""
        snapshots = [snap(date(2024, 4, 30), "500"), snap(date(2024, 4, 30), "600")]

        months = calculator.monthly_wealth(snapshots)

        assert months[0].value == Decimal("600")

    def test_empty(self, calculator):
        assert calculator.monthly_wealth([]) == []


class TestCalculate:
    """Tests for the combined calculate()."""

    def test_builds_all_series(self, calculator):
        recent = [snap(date(2024, 6, 1), "1000"), snap(date(2024, 6, 2), "1010")]
        yearly = [snap(date(2024, 1, 31), "800")] + recent

        history = calculator.calculate(recent, yearly, days=30, reference_date=date(2024, 6, 2))

        assert len(history.evolution) == 2
        assert history.daily_changes == [SeriesPoint(date(2024, 6, 2), Decimal("10.00"))]
        assert [m.month for m in history.monthly_wealth] == ["2024-01", "2024-06"]

    def test_monthly_defaults_to_recent(self, calculator):
        recent = [snap(date(2024, 6, 1), "1000")]

        history = calculator.calculate(recent, days=30, reference_date=date(2024, 6, 1))

        assert history.monthly_wealth == [
            MonthlyPoint(month="2024-06", value=Decimal("1000"), as_of=date(2024, 6, 1))
        ]
