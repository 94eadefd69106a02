# simple_finance/repositories/__init__.py
"""
SQLAlchemy implementations of the persistence collaborators.

Each store wraps one Session and maps ORM rows to the valuation core's
dataclasses (HoldingData, SnapshotPoint), so the core never touches the ORM.
"""

from simple_finance.repositories.holdings import SqlAlchemyHoldingStore, to_holding_data
from simple_finance.repositories.snapshots import SqlAlchemySnapshotStore

__all__ = [
    "SqlAlchemyHoldingStore",
    "SqlAlchemySnapshotStore",
    "to_holding_data",
]
