"""
Cart and wishlist line items.

Both carry a price snapshot: the final price and the full rate breakdown
that produced it. The snapshot is only rewritten on add-to-cart or an
explicit refresh, never on read.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import JSON, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from evershine.models.base import BASE_PRICE, LINE_PRICE, BaseModel


class PricedLineMixin:
    """Price snapshot columns shared by cart, wishlist and order lines."""

    base_price: Mapped[Decimal] = mapped_column(
        BASE_PRICE,
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(
        LINE_PRICE,
        nullable=False,
        comment="Final commission-inclusive unit price",
    )
    breakdown: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        comment="RateBreakdown.to_dict() of the price",
    )


class CartItem(BaseModel, PricedLineMixin):
    """One product line in a client's cart."""

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("client_id", "product_id", name="uq_cart_client_product"),
    )

    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )
    custom_fields: Mapped[Optional[dict]] = mapped_column(
        JSON,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<CartItem(id={self.id}, client_id={self.client_id}, product_id={self.product_id})>"


class WishlistItem(BaseModel, PricedLineMixin):
    """One product saved to a client's wishlist."""

    __tablename__ = "wishlist_items"
    __table_args__ = (
        UniqueConstraint("client_id", "product_id", name="uq_wishlist_client_product"),
    )

    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<WishlistItem(id={self.id}, client_id={self.client_id}, product_id={self.product_id})>"
