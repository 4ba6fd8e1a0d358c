"""Client self-service pricing settings."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.api.deps import get_rate_cache
from evershine.db import get_db
from evershine.models import CONSULTANT_LEVEL_NAMES, CONSULTANT_LEVEL_RATES
from evershine.repositories import ClientRepository, SettingsRepository
from evershine.schemas.settings import ConsultantLevelResponse, ConsultantLevelUpdate
from evershine.services.rate_cache import RateCache, client_key

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.put("/{client_id}/consultant-level", response_model=ConsultantLevelResponse)
async def update_consultant_level(
    client_id: int,
    data: ConsultantLevelUpdate,
    db: AsyncSession = Depends(get_db),
    cache: RateCache = Depends(get_rate_cache),
):
    """Move a client to another consultant tier.

    Carted items keep their prices until the client refreshes them.
    """
    clients = ClientRepository(db)
    client = await clients.find_by_id(client_id)

    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found",
        )

    level = data.consultant_level
    client.consultant_level = level
    await clients.save(client)
    await SettingsRepository(db).mark_prices_updated()
    await db.commit()

    cache.invalidate(client_key(client_id))
    logger.info(f"Client {client_id} consultant level set to {level.value}")

    return ConsultantLevelResponse(
        client_id=client_id,
        consultant_level=level,
        consultant_level_rate=CONSULTANT_LEVEL_RATES[level],
        consultant_name=CONSULTANT_LEVEL_NAMES[level],
    )
