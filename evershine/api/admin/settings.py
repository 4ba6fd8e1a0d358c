"""Admin commission settings endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.config import settings
from evershine.db import get_db
from evershine.repositories import (
    DEFAULT_COMMISSION_RATE_KEY,
    STANDARD_COMMISSION_RATE_KEY,
    SettingsRepository,
)
from evershine.schemas.settings import CommissionSettingsResponse, CommissionSettingsUpdate
from evershine.services.rate_resolver import load_commission_policy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings")


async def _current(db: AsyncSession) -> CommissionSettingsResponse:
    policy = await load_commission_policy(
        SettingsRepository(db),
        fallback_default=settings.default_commission_rate,
    )
    return CommissionSettingsResponse(
        default_commission_rate=policy.default_rate,
        standard_commission_rate=policy.standard_rate,
        is_standard_rate_active=policy.standard_rate is not None,
    )


@router.get("/commission", response_model=CommissionSettingsResponse)
async def get_commission_settings(db: AsyncSession = Depends(get_db)):
    """Current platform commission settings."""
    return await _current(db)


@router.put("/commission", response_model=CommissionSettingsResponse)
async def update_commission_settings(
    data: CommissionSettingsUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update commission settings.

    A standard rate overrides every agent's individual rate; sending
    standard_commission_rate = null switches back to individual rates.
    """
    repo = SettingsRepository(db)
    updated_keys = []

    if data.default_commission_rate is not None:
        await repo.set(DEFAULT_COMMISSION_RATE_KEY, str(data.default_commission_rate))
        updated_keys.append(DEFAULT_COMMISSION_RATE_KEY)

    if "standard_commission_rate" in data.model_fields_set:
        value = data.standard_commission_rate
        await repo.set(STANDARD_COMMISSION_RATE_KEY, str(value) if value is not None else None)
        updated_keys.append(STANDARD_COMMISSION_RATE_KEY)

    if updated_keys:
        await repo.mark_prices_updated()
        logger.info(f"Commission settings updated: {updated_keys}")

    await db.commit()

    return await _current(db)
