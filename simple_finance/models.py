# simple_finance/models.py
import enum
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, ForeignKey, Enum, Numeric, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class HoldingKind(str, enum.Enum):
    """
    How a holding is valued.

    MARKET_TRACKED: live quote × quantity
    FIXED_RATE: daily-compounded principal × quantity
    """
    MARKET_TRACKED = "MARKET_TRACKED"
    FIXED_RATE = "FIXED_RATE"


class Holding(Base):
    """
    A tracked position.

    Exactly one of `market_detail` / `fixed_rate_detail` is set, matching
    `kind`. The kind never changes after creation.
    """
    __tablename__ = "holdings"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    kind: Mapped[HoldingKind] = mapped_column(Enum(HoldingKind), index=True)
    name: Mapped[str] = mapped_column(String(200))
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 8), default=Decimal("1"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    market_detail: Mapped["MarketTrackedDetail | None"] = relationship(
        back_populates="holding",
        uselist=False,
        cascade="all, delete-orphan",
    )
    fixed_rate_detail: Mapped["FixedRateDetail | None"] = relationship(
        back_populates="holding",
        uselist=False,
        cascade="all, delete-orphan",
    )


class MarketTrackedDetail(Base):
    __tablename__ = "market_tracked_details"

    id: Mapped[int] = mapped_column(primary_key=True)
    holding_id: Mapped[int] = mapped_column(
        ForeignKey("holdings.id", ondelete="CASCADE"),
        unique=True,
        index=True,
    )
    symbol: Mapped[str] = mapped_column(String(10), index=True)  # Uppercase, e.g. "AAPL"
    purchase_price: Mapped[Decimal] = mapped_column(Numeric(18, 8))  # Per unit, EUR
    purchase_date: Mapped[date] = mapped_column(Date)

    holding: Mapped["Holding"] = relationship(back_populates="market_detail")


class FixedRateDetail(Base):
    __tablename__ = "fixed_rate_details"

    id: Mapped[int] = mapped_column(primary_key=True)
    holding_id: Mapped[int] = mapped_column(
        ForeignKey("holdings.id", ondelete="CASCADE"),
        unique=True,
        index=True,
    )
    annual_return_rate: Mapped[Decimal] = mapped_column(Numeric(10, 6))  # 0.055 = 5.5%, floor -1
    initial_investment: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    investment_date: Mapped[date] = mapped_column(Date)
    # EUR, or USD when the principal was recorded in dollars and is
    # converted at the investment date's rate
    currency: Mapped[str] = mapped_column(String(3), default="EUR")

    holding: Mapped["Holding"] = relationship(back_populates="fixed_rate_detail")


class PortfolioSnapshot(Base):
    """
    Total portfolio value on one calendar date.

    One row per date. Today's row may be overwritten until the day ends.
    """
    __tablename__ = "portfolio_snapshots"
    __table_args__ = (
        UniqueConstraint('date', name='uq_portfolio_snapshot_date'),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[date] = mapped_column(Date, index=True)
    value: Mapped[Decimal] = mapped_column(Numeric(18, 2))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
