"""
Agent model (sales agents / consultants earning commission).
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from evershine.models.base import RATE, BaseModel


class Agent(BaseModel):
    """
    Sales agent.

    commission_rate is in percentage points (10 = 10%), not a fraction.
    category_commissions maps a product category to a rate that replaces
    commission_rate for products of that category.
    """

    __tablename__ = "agents"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
    )
    commission_rate: Mapped[Decimal] = mapped_column(
        RATE,
        nullable=False,
        default=Decimal("0"),
        server_default="0",
        comment="Agent commission in percent of base price",
    )
    category_commissions: Mapped[Optional[dict]] = mapped_column(
        JSON,
        nullable=True,
        comment="{category: percent}, values stored as strings",
    )

    def __repr__(self) -> str:
        return f"<Agent(id={self.id}, name='{self.name}', rate={self.commission_rate})>"
