"""Order endpoints.

Order prices are the frozen cart snapshots; none of these endpoints
recalculate them.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.api.deps import get_checkout
from evershine.db import get_db
from evershine.repositories import OrderRepository
from evershine.schemas.order import (
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    ShippingStatusUpdate,
)
from evershine.services.checkout import CheckoutService

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreate,
    db: AsyncSession = Depends(get_db),
    checkout: CheckoutService = Depends(get_checkout),
):
    """Check out the client's cart into an order with frozen prices."""
    order = await checkout.place_order(data.client_id, agent_id=data.agent_id)
    await db.commit()

    return OrderResponse.model_validate(order)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    client_id: int = Query(..., ge=1),
    db: AsyncSession = Depends(get_db),
):
    """Order history of a client, newest first."""
    orders = await OrderRepository(db).find_by_client_id(client_id)

    return OrderListResponse(
        items=[OrderResponse.model_validate(o) for o in orders],
        total=len(orders),
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    order = await OrderRepository(db).find_by_id(order_id)

    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )

    return OrderResponse.model_validate(order)


@router.patch("/{order_id}/shipping-status", response_model=OrderResponse)
async def update_shipping_status(
    order_id: int,
    data: ShippingStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update delivery progress. Prices are not touched."""
    orders = OrderRepository(db)
    order = await orders.find_by_id(order_id)

    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )

    order.shipping_status = data.shipping_status
    order = await orders.save(order)
    await db.commit()

    return OrderResponse.model_validate(order)
