"""
SQLAlchemy ORM models for the finance tracker.
"""

from datetime import datetime, date
from sqlalchemy import (
    Column,
    String,
    Float,
    Integer,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import declarative_base, relationship
import uuid
import enum


class InvestmentType(str, enum.Enum):
    """Kind of asset an investment holds; selects the price source."""
    stock = "stock"
    crypto = "crypto"


class ExpenseCategory(str, enum.Enum):
    """Expense category enumeration."""
    food = "food"
    transport = "transport"
    bills = "bills"
    fun = "fun"
    other = "other"

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class User(AuditMixin, Base):
    """User account."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    # Relationships
    expenses = relationship(
        "Expense", back_populates="owner", cascade="all, delete-orphan", lazy="dynamic"
    )
    loans = relationship(
        "Loan", back_populates="owner", cascade="all, delete-orphan", lazy="dynamic"
    )
    investments = relationship(
        "Investment",
        back_populates="owner",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )
    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )


class Expense(AuditMixin, Base):
    """A single spending record."""

    __tablename__ = "expenses"

    id = Column(String, primary_key=True, default=generate_uuid)
    owner_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    category = Column(SQLEnum(ExpenseCategory), nullable=False)
    description = Column(Text, default="")
    date = Column(Date, default=date.today, nullable=False)

    owner = relationship("User", back_populates="expenses")


class Loan(AuditMixin, Base):
    """
    Fixed-rate loan.

    emi is computed once at creation and never recalculated; paid_months is
    the only field updated afterwards.
    """

    __tablename__ = "loans"

    id = Column(String, primary_key=True, default=generate_uuid)
    owner_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    amount = Column(Float, nullable=False)  # Principal
    interest_rate = Column(Float, nullable=False)  # Annual percent, e.g. 8.5
    tenure = Column(Integer, nullable=False)  # Months
    emi = Column(Float, nullable=False)
    paid_months = Column(Integer, default=0, nullable=False)
    start_date = Column(Date, default=date.today, nullable=False)

    owner = relationship("User", back_populates="loans")


class Investment(AuditMixin, Base):
    """A holding of a single stock or crypto asset."""

    __tablename__ = "investments"

    id = Column(String, primary_key=True, default=generate_uuid)
    owner_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)

    asset = Column(String(50), nullable=False)  # Upper-cased symbol
    type = Column(SQLEnum(InvestmentType), nullable=False)
    quantity = Column(Float, nullable=False)
    invested_amount = Column(Float, nullable=False)
    purchase_date = Column(Date, default=date.today, nullable=False)

    owner = relationship("User", back_populates="investments")


class RefreshToken(AuditMixin, Base):
    """Refresh token for JWT authentication."""

    __tablename__ = "refresh_tokens"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    token_hash = Column(String(255), nullable=False, index=True)  # Store hash, not token
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="refresh_tokens")
