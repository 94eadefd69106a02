# simple_finance/schemas/snapshots.py
"""
Response schemas for the scheduled snapshot trigger.

Keys are camelCase on the wire (the scheduler integration reads
`totalValue`, `totalReturnPercentage`, ...).
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SnapshotBody(_CamelModel):
    date: dt.date
    value: Decimal


class SnapshotStats(_CamelModel):
    total_value: Decimal
    total_return: Decimal
    total_return_percentage: Decimal


class SnapshotCreatedResponse(_CamelModel):
    message: str
    snapshot: SnapshotBody
    stats: SnapshotStats


class SnapshotSkippedResponse(_CamelModel):
    message: str
    total_value: int = 0
