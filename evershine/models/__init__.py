"""
Database models for Evershine.

All models are exported here for convenient imports:
    from evershine.models import Product, Agent, CartItem, etc.
"""

from evershine.models.agent import Agent
from evershine.models.base import Base, BaseModel, TimestampMixin
from evershine.models.cart import CartItem, PricedLineMixin, WishlistItem
from evershine.models.client import (
    CONSULTANT_LEVEL_NAMES,
    CONSULTANT_LEVEL_RATES,
    Client,
    ConsultantLevel,
)
from evershine.models.order import Order, OrderItem, OrderStatus, ShippingStatus
from evershine.models.product import Product
from evershine.models.settings import SystemSetting

__all__ = [
    # Base
    "Base",
    "BaseModel",
    "TimestampMixin",
    "PricedLineMixin",
    # Catalog
    "Product",
    # People
    "Agent",
    "Client",
    "ConsultantLevel",
    "CONSULTANT_LEVEL_RATES",
    "CONSULTANT_LEVEL_NAMES",
    # Cart
    "CartItem",
    "WishlistItem",
    # Order
    "Order",
    "OrderItem",
    "OrderStatus",
    "ShippingStatus",
    # Settings
    "SystemSetting",
]
