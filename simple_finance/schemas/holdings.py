# simple_finance/schemas/holdings.py
"""
Pydantic schemas for Holding CRUD.

A holding is created with the detail payload matching its kind:
    MARKET_TRACKED → market_detail
    FIXED_RATE     → fixed_rate_detail

Kind is fixed at creation; HoldingUpdate may repeat the current kind but
not change it (the service rejects a different one with 409).
"""

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from simple_finance.models import HoldingKind
from simple_finance.schemas.validators import validate_name, validate_not_future, validate_symbol


# =============================================================================
# DETAIL PAYLOADS
# =============================================================================

class MarketTrackedDetailIn(BaseModel):
    """Detail for a holding priced from live market quotes."""

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=10,
        description="Market symbol, normalized to uppercase (e.g., 'AAPL')",
        examples=["AAPL"],
    )
    purchase_price: Decimal = Field(
        ...,
        gt=0,
        description="Price paid per unit in EUR",
        examples=["150.25"],
    )
    purchase_date: dt.date = Field(
        ...,
        description="Date of purchase",
    )

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return validate_symbol(v)

    @field_validator("purchase_date")
    @classmethod
    def purchase_date_not_future(cls, v: dt.date) -> dt.date:
        return validate_not_future(v, "Purchase date")


class FixedRateDetailIn(BaseModel):
    """Detail for a holding valued by daily-compounded interest."""

    annual_return_rate: Decimal = Field(
        ...,
        ge=Decimal("-1"),
        description="Annual rate as a decimal fraction (0.055 = 5.5%), not below -1",
        examples=["0.055"],
    )
    initial_investment: Decimal = Field(
        ...,
        gt=0,
        description="Principal invested, in `currency`",
        examples=["1000.00"],
    )
    investment_date: dt.date = Field(
        ...,
        description="Date interest starts accruing",
    )
    currency: Literal["EUR", "USD"] = Field(
        default="EUR",
        description="Currency of the principal; USD is converted at the investment date's rate",
    )

    @field_validator("currency", mode="before")
    @classmethod
    def uppercase_currency(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("investment_date")
    @classmethod
    def investment_date_not_future(cls, v: dt.date) -> dt.date:
        return validate_not_future(v, "Investment date")


# =============================================================================
# REQUESTS
# =============================================================================

class HoldingCreate(BaseModel):
    """Request body for creating a holding."""

    kind: HoldingKind
    name: str = Field(..., min_length=1, max_length=200)
    quantity: Decimal = Field(
        default=Decimal("1"),
        gt=0,
        description="Units held (fractional allowed)",
    )
    market_detail: MarketTrackedDetailIn | None = None
    fixed_rate_detail: FixedRateDetailIn | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return validate_name(v)

    @model_validator(mode="after")
    def detail_matches_kind(self) -> "HoldingCreate":
        if self.kind == HoldingKind.MARKET_TRACKED:
            if self.market_detail is None:
                raise ValueError("market_detail is required for MARKET_TRACKED holdings")
            if self.fixed_rate_detail is not None:
                raise ValueError("fixed_rate_detail is not allowed for MARKET_TRACKED holdings")
        else:
            if self.fixed_rate_detail is None:
                raise ValueError("fixed_rate_detail is required for FIXED_RATE holdings")
            if self.market_detail is not None:
                raise ValueError("market_detail is not allowed for FIXED_RATE holdings")
        return self


class HoldingUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""

    kind: HoldingKind | None = Field(
        default=None,
        description="May only repeat the current kind",
    )
    name: str | None = Field(default=None, min_length=1, max_length=200)
    quantity: Decimal | None = Field(default=None, gt=0)
    market_detail: MarketTrackedDetailIn | None = None
    fixed_rate_detail: FixedRateDetailIn | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return v if v is None else validate_name(v)


# =============================================================================
# RESPONSES
# =============================================================================

class MarketTrackedDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    purchase_price: Decimal
    purchase_date: dt.date


class FixedRateDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    annual_return_rate: Decimal
    initial_investment: Decimal
    investment_date: dt.date
    currency: str


class HoldingResponse(BaseModel):
    """Holding as stored, with its detail."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    kind: HoldingKind
    name: str
    quantity: Decimal
    created_at: dt.datetime
    updated_at: dt.datetime
    market_detail: MarketTrackedDetailResponse | None = None
    fixed_rate_detail: FixedRateDetailResponse | None = None
