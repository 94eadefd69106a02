# simple_finance/services/protocols.py
"""
Protocol interfaces for the persistence collaborators.

The valuation core and the snapshot recorder depend on these shapes, not
on SQLAlchemy. The repositories in simple_finance/repositories satisfy
them structurally, as do the in-memory stores used in tests.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from simple_finance.services.valuation.types import HoldingData, SnapshotPoint


class HoldingStore(Protocol):
    """Read side of holding persistence used by valuation."""

    def list_all(self) -> list[HoldingData]:
        ...

    def get(self, holding_id: int) -> HoldingData | None:
        ...


class SnapshotStore(Protocol):
    """Snapshot persistence used by the recorder and history views."""

    def get_latest(self) -> SnapshotPoint | None:
        ...

    def get_last_n_days(self, days: int, today: date | None = None) -> list[SnapshotPoint]:
        """Snapshots dated on or after today - days, ascending by date."""
        ...

    def upsert_by_date(self, snapshot_date: date, value: Decimal) -> SnapshotPoint:
        """Create the snapshot for a date or overwrite its value (last write wins)."""
        ...
