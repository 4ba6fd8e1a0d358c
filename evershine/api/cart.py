"""Cart endpoints.

Reading a cart returns the stored price snapshots; only add-to-cart and
/cart/refresh-pricing recalculate them.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.api.deps import get_checkout
from evershine.db import get_db
from evershine.repositories import CartRepository
from evershine.schemas.cart import (
    AddToCartRequest,
    CartItemResponse,
    CartItemUpdate,
    CartResponse,
    RefreshPricingRequest,
)
from evershine.services.checkout import CheckoutService
from evershine.services.pricing import ZERO
from evershine.services.snapshot import line_total

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("/{client_id}", response_model=CartResponse)
async def get_cart(
    client_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Client cart with the prices stored on each line."""
    items = await CartRepository(db).find_by_client_id(client_id)

    return CartResponse(
        client_id=client_id,
        items=[CartItemResponse.model_validate(i) for i in items],
        total=sum((line_total(i.price, i.quantity) for i in items), ZERO),
    )


@router.post("/items", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
async def add_cart_item(
    data: AddToCartRequest,
    db: AsyncSession = Depends(get_db),
    checkout: CheckoutService = Depends(get_checkout),
):
    """Add a product to the cart and attach its current price."""
    item = await checkout.add_to_cart(
        client_id=data.client_id,
        product_id=data.product_id,
        quantity=data.quantity,
        agent_id=data.agent_id,
        custom_fields=data.custom_fields,
    )
    await db.commit()

    return CartItemResponse.model_validate(item)


@router.patch("/items/{item_id}", response_model=CartItemResponse)
async def update_cart_item(
    item_id: int,
    data: CartItemUpdate,
    db: AsyncSession = Depends(get_db),
    checkout: CheckoutService = Depends(get_checkout),
):
    """Change quantity or custom fields without re-pricing."""
    item = await checkout.update_cart_item(
        item_id,
        quantity=data.quantity,
        custom_fields=data.custom_fields,
    )
    await db.commit()

    return CartItemResponse.model_validate(item)


@router.delete("/items/{item_id}")
async def remove_cart_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Remove one line from the cart."""
    carts = CartRepository(db)
    item = await carts.find_item(item_id)

    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Cart item not found",
        )

    await carts.delete_item(item)
    await db.commit()

    return {"success": True}


@router.delete("/{client_id}")
async def clear_cart(
    client_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Remove every line from a client's cart."""
    removed = await CartRepository(db).clear(client_id)
    await db.commit()

    return {"success": True, "removed": removed}


@router.post("/refresh-pricing", response_model=List[CartItemResponse])
async def refresh_cart_pricing(
    data: RefreshPricingRequest,
    db: AsyncSession = Depends(get_db),
    checkout: CheckoutService = Depends(get_checkout),
):
    """Re-price every cart line with the current rates. User-triggered only."""
    items = await checkout.refresh_cart(data.client_id, data.agent_id)
    await db.commit()

    return [CartItemResponse.model_validate(i) for i in items]
