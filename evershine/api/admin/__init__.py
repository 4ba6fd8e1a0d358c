"""Admin API router aggregation."""

from fastapi import APIRouter

from evershine.api.admin.agents import router as agents_router
from evershine.api.admin.settings import router as settings_router

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_router.include_router(agents_router)
admin_router.include_router(settings_router)

__all__ = ["admin_router"]
