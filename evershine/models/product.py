"""
Product model for the stone catalog.
"""

from decimal import Decimal

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from evershine.models.base import BASE_PRICE, BaseModel


class Product(BaseModel):
    """
    Catalog product.

    base_price is the canonical, commission-free price. Every displayed
    price is derived from it by the pricing engine.
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    base_price: Mapped[Decimal] = mapped_column(
        BASE_PRICE,
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
