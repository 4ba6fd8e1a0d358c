"""
Client model and consultant level tiers.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from evershine.models.base import BaseModel


class ConsultantLevel(str, Enum):
    """Consultant tier a client belongs to."""
    NONE = "none"
    RED = "red"
    YELLOW = "yellow"
    PURPLE = "purple"


# Consultant commission in percentage points
CONSULTANT_LEVEL_RATES = {
    ConsultantLevel.NONE: Decimal("0"),
    ConsultantLevel.RED: Decimal("5"),
    ConsultantLevel.YELLOW: Decimal("10"),
    ConsultantLevel.PURPLE: Decimal("15"),
}

CONSULTANT_LEVEL_NAMES = {
    ConsultantLevel.NONE: "Default",
    ConsultantLevel.RED: "Red",
    ConsultantLevel.YELLOW: "Yellow",
    ConsultantLevel.PURPLE: "Purple",
}


class Client(BaseModel):
    """
    Platform client.

    A client belongs to exactly one consultant tier at a time and is
    usually served by one agent.
    """

    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    mobile: Mapped[Optional[str]] = mapped_column(
        String(20),
        index=True,
        nullable=True,
    )
    agent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("agents.id"),
        nullable=True,
        index=True,
    )
    consultant_level: Mapped[ConsultantLevel] = mapped_column(
        SQLAlchemyEnum(
            ConsultantLevel,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ConsultantLevel.NONE,
        server_default=ConsultantLevel.NONE.value,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.name}', level={self.consultant_level})>"
