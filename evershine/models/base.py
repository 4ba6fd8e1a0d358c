"""
Declarative base, timestamp mixin and the money column types.

Money columns:
- BASE_PRICE: catalog price before commission
- LINE_PRICE: commission-inclusive unit price on cart, wishlist and order lines
- ORDER_TOTAL: sum of price * quantity over an order
- RATE: commission percentage points
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Integer, Numeric, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

BASE_PRICE = Numeric(12, 2)
LINE_PRICE = Numeric(14, 2)
ORDER_TOTAL = Numeric(18, 2)
RATE = Numeric(6, 2)


def numeric_max(column_type: Numeric) -> Decimal:
    """Largest value a Numeric(precision, scale) column can hold."""
    digits = column_type.precision - column_type.scale
    return Decimal(10) ** digits - Decimal(10) ** -column_type.scale


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """created_at is set by the database; updated_at on every UPDATE."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )


class BaseModel(Base, TimestampMixin):
    """Integer-keyed table with timestamps. Every pricing table but settings."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
