"""SQLAlchemy ORM models for PostgreSQL persistence."""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    String,
    Integer,
    Numeric,
    DateTime,
    Boolean,
    ForeignKey,
    JSON,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class TransactionType(str, Enum):
    DEPOSIT = "deposit"  # In-app purchase
    REWARD = "reward"  # Rewarded video
    SPEND = "spend"
    REFUND = "refund"


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    full_name: Mapped[str] = mapped_column(String(255), default="")
    credit_balance: Mapped[int] = mapped_column(Integer, default=0)

    analyses: Mapped[list["PropertyAnalysis"]] = relationship(back_populates="profile")
    transactions: Mapped[list["WalletTransaction"]] = relationship(back_populates="profile")


class PropertyAnalysis(Base):
    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("profiles.id"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    location: Mapped[str] = mapped_column(String(255), default="Unknown Location")
    price: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    status: Mapped[str] = mapped_column(String(20), default="completed")
    is_unlocked: Mapped[bool] = mapped_column(Boolean, default=True)
    pdf_generated: Mapped[bool] = mapped_column(Boolean, default=False)

    # Inputs + full results, read back verbatim by report rendering
    params: Mapped[dict] = mapped_column(JSON)

    profile: Mapped["Profile"] = relationship(back_populates="analyses")


class WalletTransaction(Base):
    __tablename__ = "wallet_transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("profiles.id"), index=True)
    amount: Mapped[int] = mapped_column(Integer)  # Negative for spends
    type: Mapped[str] = mapped_column(String(20))
    description: Mapped[str] = mapped_column(Text, default="")

    profile: Mapped["Profile"] = relationship(back_populates="transactions")


class RegionalDefaultRecord(Base):
    """Market averages per city/district/neighborhood, kept current by the data-sync job."""

    __tablename__ = "regional_defaults"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    city: Mapped[str] = mapped_column(String(100), index=True)
    district: Mapped[str | None] = mapped_column(String(100), nullable=True)
    neighborhood: Mapped[str | None] = mapped_column(String(100), nullable=True)

    avg_price_per_sqm: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    avg_rent_per_sqm: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    avg_dues: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    appreciation_rate: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    rent_increase_rate: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    default_loan_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    default_loan_term: Mapped[int | None] = mapped_column(Integer, nullable=True)
    default_down_payment: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)

    data_source: Mapped[str] = mapped_column(String(50), default="manual")
    last_updated: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
