"""Admin agent commission endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.api.deps import get_rate_cache
from evershine.db import get_db
from evershine.repositories import AgentRepository, SettingsRepository
from evershine.schemas.settings import AgentCommissionResponse, AgentCommissionUpdate
from evershine.services.rate_cache import RateCache, agent_key
from evershine.services.rate_resolver import parse_category_commissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agents")


@router.put("/{agent_id}/commission", response_model=AgentCommissionResponse)
async def update_agent_commission(
    agent_id: int,
    data: AgentCommissionUpdate,
    db: AsyncSession = Depends(get_db),
    cache: RateCache = Depends(get_rate_cache),
):
    """Set an agent's commission rate and, optionally, per-category rates.

    Existing orders keep the prices they were placed with.
    """
    agents = AgentRepository(db)
    agent = await agents.find_by_id(agent_id)

    if not agent:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Agent not found",
        )

    agent.commission_rate = data.commission_rate
    if data.category_commissions is not None:
        agent.category_commissions = {
            category: str(rate) for category, rate in data.category_commissions.items()
        }

    await agents.save(agent)
    await SettingsRepository(db).mark_prices_updated()
    await db.commit()

    cache.invalidate(agent_key(agent_id))
    logger.info(f"Agent {agent_id} commission set to {data.commission_rate}%")

    return AgentCommissionResponse(
        agent_id=agent.id,
        commission_rate=agent.commission_rate,
        category_commissions=parse_category_commissions(agent.category_commissions, agent.id),
    )
