"""API router aggregation."""

from fastapi import APIRouter

from evershine.api.admin import admin_router
from evershine.api.cart import router as cart_router
from evershine.api.clients import router as clients_router
from evershine.api.health import router as health_router
from evershine.api.orders import router as orders_router
from evershine.api.prices import router as prices_router
from evershine.api.products import router as products_router
from evershine.api.wishlist import router as wishlist_router

# Main API router (for /api/* endpoints)
api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(products_router)
api_router.include_router(cart_router)
api_router.include_router(wishlist_router)
api_router.include_router(orders_router)
api_router.include_router(clients_router)
api_router.include_router(prices_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
