"""Wishlist endpoints. Same pricing contract as the cart."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.api.deps import get_checkout
from evershine.db import get_db
from evershine.repositories import WishlistRepository
from evershine.schemas.cart import (
    AddToWishlistRequest,
    RefreshPricingRequest,
    WishlistItemResponse,
)
from evershine.services.checkout import CheckoutService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


@router.get("/{client_id}", response_model=List[WishlistItemResponse])
async def get_wishlist(
    client_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Wishlist with stored prices."""
    items = await WishlistRepository(db).find_by_client_id(client_id)
    return [WishlistItemResponse.model_validate(i) for i in items]


@router.post("/items", response_model=WishlistItemResponse, status_code=status.HTTP_201_CREATED)
async def add_wishlist_item(
    data: AddToWishlistRequest,
    db: AsyncSession = Depends(get_db),
    checkout: CheckoutService = Depends(get_checkout),
):
    item = await checkout.add_to_wishlist(
        client_id=data.client_id,
        product_id=data.product_id,
        agent_id=data.agent_id,
    )
    await db.commit()

    return WishlistItemResponse.model_validate(item)


@router.delete("/items/{item_id}")
async def remove_wishlist_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
):
    wishlists = WishlistRepository(db)
    item = await wishlists.find_item(item_id)

    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Wishlist item not found",
        )

    await wishlists.delete_item(item)
    await db.commit()

    return {"success": True}


@router.post("/refresh-pricing", response_model=List[WishlistItemResponse])
async def refresh_wishlist_pricing(
    data: RefreshPricingRequest,
    db: AsyncSession = Depends(get_db),
    checkout: CheckoutService = Depends(get_checkout),
):
    """Update prices & refresh: re-price the wishlist with current rates."""
    items = await checkout.refresh_wishlist(data.client_id, data.agent_id)
    await db.commit()

    return [WishlistItemResponse.model_validate(i) for i in items]
