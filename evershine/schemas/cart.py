"""Cart and wishlist schemas."""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from evershine.schemas.pricing import RateBreakdownSchema


class AddToCartRequest(BaseModel):
    """Add a product to a client's cart."""

    product_id: int = Field(..., ge=1)
    quantity: int = Field(1, ge=1, le=100000)
    client_id: int = Field(..., ge=1)
    agent_id: Optional[int] = Field(None, ge=1)
    custom_fields: Optional[Dict[str, Any]] = None


class CartItemUpdate(BaseModel):
    """Non-price changes to a cart line."""

    quantity: Optional[int] = Field(None, ge=1, le=100000)
    custom_fields: Optional[Dict[str, Any]] = None


class RefreshPricingRequest(BaseModel):
    """Explicitly re-price a client's cart or wishlist."""

    client_id: int = Field(..., ge=1)
    agent_id: Optional[int] = Field(None, ge=1)


class CartItemResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    base_price: Decimal
    price: Decimal
    breakdown: RateBreakdownSchema
    custom_fields: Optional[Dict[str, Any]] = None

    model_config = {"from_attributes": True}


class CartResponse(BaseModel):
    client_id: int
    items: List[CartItemResponse]
    total: Decimal


class AddToWishlistRequest(BaseModel):
    product_id: int = Field(..., ge=1)
    client_id: int = Field(..., ge=1)
    agent_id: Optional[int] = Field(None, ge=1)


class WishlistItemResponse(BaseModel):
    id: int
    product_id: int
    base_price: Decimal
    price: Decimal
    breakdown: RateBreakdownSchema

    model_config = {"from_attributes": True}
