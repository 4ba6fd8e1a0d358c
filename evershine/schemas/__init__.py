"""Pydantic schemas for request/response validation."""

from evershine.schemas.cart import (
    AddToCartRequest,
    AddToWishlistRequest,
    CartItemResponse,
    CartItemUpdate,
    CartResponse,
    RefreshPricingRequest,
    WishlistItemResponse,
)
from evershine.schemas.order import (
    OrderCreate,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    ShippingStatusUpdate,
)
from evershine.schemas.pricing import (
    BulkPriceRequest,
    BulkPriceResponse,
    CheckUpdatesRequest,
    CheckUpdatesResponse,
    CommissionInfoResponse,
    PricedProductResponse,
    ProductListResponse,
    RateBreakdownSchema,
)
from evershine.schemas.settings import (
    AgentCommissionResponse,
    AgentCommissionUpdate,
    CommissionSettingsResponse,
    CommissionSettingsUpdate,
    ConsultantLevelResponse,
    ConsultantLevelUpdate,
)

__all__ = [
    # Pricing
    "RateBreakdownSchema",
    "CommissionInfoResponse",
    "PricedProductResponse",
    "ProductListResponse",
    "BulkPriceRequest",
    "BulkPriceResponse",
    "CheckUpdatesRequest",
    "CheckUpdatesResponse",
    # Cart
    "AddToCartRequest",
    "CartItemUpdate",
    "CartItemResponse",
    "CartResponse",
    "RefreshPricingRequest",
    "AddToWishlistRequest",
    "WishlistItemResponse",
    # Order
    "OrderCreate",
    "OrderItemResponse",
    "OrderResponse",
    "OrderListResponse",
    "ShippingStatusUpdate",
    # Settings
    "CommissionSettingsResponse",
    "CommissionSettingsUpdate",
    "AgentCommissionUpdate",
    "AgentCommissionResponse",
    "ConsultantLevelUpdate",
    "ConsultantLevelResponse",
]
