"""Order schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from evershine.models import OrderStatus, ShippingStatus
from evershine.schemas.pricing import RateBreakdownSchema


class OrderCreate(BaseModel):
    """Check out a client's cart."""

    client_id: int = Field(..., ge=1)
    agent_id: Optional[int] = Field(None, ge=1)


class ShippingStatusUpdate(BaseModel):
    shipping_status: ShippingStatus


class OrderItemResponse(BaseModel):
    """Frozen order line."""

    id: int
    product_id: int
    quantity: int
    base_price: Decimal
    price: Decimal
    breakdown: RateBreakdownSchema
    custom_fields: Optional[Dict[str, Any]] = None

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: int
    client_id: int
    agent_id: Optional[int]
    status: OrderStatus
    shipping_status: ShippingStatus
    total_amount: Decimal
    items: List[OrderItemResponse]
    created_at: datetime

    model_config = {"from_attributes": True}


class OrderListResponse(BaseModel):
    items: List[OrderResponse]
    total: int
