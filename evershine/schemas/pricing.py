"""Pricing schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from evershine.models import ConsultantLevel


class RateBreakdownSchema(BaseModel):
    """Full breakdown of one calculated price."""

    agent_commission_rate: Decimal
    consultant_level_rate: Decimal
    total_rate: Decimal
    base_price: Decimal
    agent_commission_amount: Decimal
    consultant_commission_amount: Decimal
    final_price: Decimal

    model_config = {"from_attributes": True}


class CommissionInfoResponse(BaseModel):
    agent_commission_rate: Decimal
    consultant_level_rate: Decimal
    total_rate: Decimal
    is_global_rate: bool
    has_category_override: bool
    consultant_level: ConsultantLevel
    consultant_name: str
    breakdown: Optional[RateBreakdownSchema] = None
    error: bool = False
    error_message: Optional[str] = None

    model_config = {"from_attributes": True}


class PricedProductResponse(BaseModel):
    """Catalog product with commission-inclusive price."""

    product_id: int
    name: Optional[str]
    category: Optional[str]
    original_price: Decimal = Field(..., allow_inf_nan=True)
    calculated_price: Decimal = Field(..., allow_inf_nan=True)
    commission_info: CommissionInfoResponse

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    """Paginated list of priced products."""

    items: List[PricedProductResponse]
    total: int
    page: int
    per_page: int
    pages: int


class BulkPriceRequest(BaseModel):
    """Prices for several products at once."""

    product_ids: List[int] = Field(..., min_length=1, max_length=500)
    client_id: Optional[int] = Field(None, ge=1)
    agent_id: Optional[int] = Field(None, ge=1)


class BulkPriceResponse(BaseModel):
    prices: Dict[int, PricedProductResponse]
    missing: List[int] = Field(default_factory=list)


class CheckUpdatesRequest(BaseModel):
    last_checked: Optional[datetime] = None


class CheckUpdatesResponse(BaseModel):
    prices_updated: bool
    last_updated: Optional[datetime]
