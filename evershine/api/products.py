"""Priced product catalog endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.api.deps import get_pipeline
from evershine.config import settings
from evershine.db import get_db
from evershine.repositories import ProductFilter, ProductRepository
from evershine.schemas.pricing import (
    BulkPriceRequest,
    BulkPriceResponse,
    PricedProductResponse,
    ProductListResponse,
)
from evershine.services.bulk_pricing import BulkPricingPipeline

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    pipeline: BulkPricingPipeline = Depends(get_pipeline),
    client_id: Optional[int] = Query(None, ge=1),
    agent_id: Optional[int] = Query(None, ge=1),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """List active products priced for the given client and agent."""
    items, total = await pipeline.price_page(
        ProductFilter(category=category, search=search),
        page=page,
        limit=limit,
        client_id=client_id,
        agent_id=agent_id,
    )

    return ProductListResponse(
        items=[PricedProductResponse.model_validate(p) for p in items],
        total=total,
        page=page,
        per_page=limit,
        pages=(total + limit - 1) // limit if total else 0,
    )


@router.get("/{product_id}/price", response_model=PricedProductResponse)
async def get_product_price(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    pipeline: BulkPricingPipeline = Depends(get_pipeline),
    client_id: Optional[int] = Query(None, ge=1),
    agent_id: Optional[int] = Query(None, ge=1),
):
    """Current price of a single product."""
    product = await ProductRepository(db).find_by_id(product_id)
    if not product or not product.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )

    priced = await pipeline.price_all([product], client_id=client_id, agent_id=agent_id)
    return PricedProductResponse.model_validate(priced[0])


@router.post("/prices", response_model=BulkPriceResponse)
async def get_bulk_prices(
    data: BulkPriceRequest,
    db: AsyncSession = Depends(get_db),
    pipeline: BulkPricingPipeline = Depends(get_pipeline),
):
    """Current prices for a set of products, keyed by product id."""
    found = await ProductRepository(db).find_by_ids(data.product_ids)

    # Keep request order, drop duplicates
    ordered_ids = list(dict.fromkeys(data.product_ids))
    products = [found[pid] for pid in ordered_ids if pid in found and found[pid].is_active]
    missing = [pid for pid in ordered_ids if pid not in found or not found[pid].is_active]

    priced = await pipeline.price_all(products, client_id=data.client_id, agent_id=data.agent_id)

    return BulkPriceResponse(
        prices={p.product_id: PricedProductResponse.model_validate(p) for p in priced},
        missing=missing,
    )
