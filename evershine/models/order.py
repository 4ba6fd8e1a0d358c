"""
Order model with frozen line items.
"""

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, ForeignKey, Integer
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from evershine.models.base import ORDER_TOTAL, BaseModel
from evershine.models.cart import PricedLineMixin


class OrderStatus(str, Enum):
    """Order lifecycle status."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ShippingStatus(str, Enum):
    """Delivery progress; the only part of an order that changes after checkout."""
    PENDING = "pending"
    DISPATCHED = "dispatched"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"


class Order(BaseModel):
    """
    Client order.

    Line item prices are copied verbatim from the cart at checkout and
    are never recalculated from current commission rates.
    """

    __tablename__ = "orders"

    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id"),
        nullable=False,
        index=True,
    )
    agent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("agents.id"),
        nullable=True,
        index=True,
    )
    status: Mapped[OrderStatus] = mapped_column(
        SQLAlchemyEnum(
            OrderStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=OrderStatus.PENDING,
        nullable=False,
    )
    shipping_status: Mapped[ShippingStatus] = mapped_column(
        SQLAlchemyEnum(
            ShippingStatus,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ShippingStatus.PENDING,
        nullable=False,
    )
    total_amount: Mapped[Decimal] = mapped_column(
        ORDER_TOTAL,
        nullable=False,
    )

    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, client_id={self.client_id}, total={self.total_amount})>"


class OrderItem(BaseModel, PricedLineMixin):
    """Frozen order line."""

    __tablename__ = "order_items"

    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    custom_fields: Mapped[Optional[dict]] = mapped_column(
        JSON,
        nullable=True,
    )

    order: Mapped["Order"] = relationship("Order", back_populates="items")

    def __repr__(self) -> str:
        return f"<OrderItem(id={self.id}, order_id={self.order_id}, price={self.price})>"
