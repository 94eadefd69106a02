# simple_finance/repositories/snapshots.py
"""
Portfolio snapshot persistence.

Upsert is select-then-update-or-insert inside one commit, which works the
same on SQLite and PostgreSQL. Two runs racing on the same date collide on
the unique date constraint; the loser rolls back and overwrites instead,
so the last write wins.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from simple_finance.models import PortfolioSnapshot
from simple_finance.services.valuation.types import SnapshotPoint

logger = logging.getLogger(__name__)


def _to_point(row: PortfolioSnapshot) -> SnapshotPoint:
    return SnapshotPoint(date=row.date, value=row.value)


class SqlAlchemySnapshotStore:
    """Snapshot store backed by one SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_latest(self) -> SnapshotPoint | None:
        row = self._db.scalar(
            select(PortfolioSnapshot).order_by(PortfolioSnapshot.date.desc()).limit(1)
        )
        return _to_point(row) if row is not None else None

    def get_last_n_days(self, days: int, today: date | None = None) -> list[SnapshotPoint]:
        """
        Snapshots from the `days` calendar days ending on today, oldest first.

        Args:
            days: Window length in days
            today: End of the window (default: current UTC date)
        """
        today = today or datetime.now(timezone.utc).date()
        start = today - timedelta(days=days - 1)
        rows = self._db.scalars(
            select(PortfolioSnapshot)
            .where(PortfolioSnapshot.date >= start)
            .order_by(PortfolioSnapshot.date.asc())
        )
        return [_to_point(row) for row in rows]

    def exists_for_date(self, snapshot_date: date) -> bool:
        return self._find(snapshot_date) is not None

    def upsert_by_date(self, snapshot_date: date, value: Decimal) -> SnapshotPoint:
        """
        Create the snapshot for a date or overwrite its value.

        Args:
            snapshot_date: Calendar date (unique key)
            value: Total portfolio value, EUR

        Returns:
            The stored SnapshotPoint
        """
        row = self._find(snapshot_date)
        if row is None:
            row = PortfolioSnapshot(date=snapshot_date, value=value)
            self._db.add(row)
        else:
            row.value = value

        try:
            self._db.commit()
        except IntegrityError:
            self._db.rollback()
            logger.info(f"Concurrent snapshot for {snapshot_date}, overwriting")
            row = self._find(snapshot_date)
            row.value = value
            self._db.commit()

        self._db.refresh(row)
        return _to_point(row)

    def _find(self, snapshot_date: date) -> PortfolioSnapshot | None:
        return self._db.scalar(
            select(PortfolioSnapshot).where(PortfolioSnapshot.date == snapshot_date)
        )
