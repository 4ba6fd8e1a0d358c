"""Price change polling."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.db import get_db
from evershine.repositories import SettingsRepository
from evershine.schemas.pricing import CheckUpdatesRequest, CheckUpdatesResponse

router = APIRouter(prefix="/prices", tags=["Prices"])


@router.post("/check-updates", response_model=CheckUpdatesResponse)
async def check_price_updates(
    data: CheckUpdatesRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Tell the client whether pricing inputs changed since it last looked.

    Clients use this to offer a "refresh prices" action; nothing is
    re-priced here.
    """
    last_updated = await SettingsRepository(db).prices_updated_at()

    if last_updated is None:
        return CheckUpdatesResponse(prices_updated=False, last_updated=None)

    last_checked = data.last_checked
    if last_checked is not None and last_checked.tzinfo is None:
        last_checked = last_checked.replace(tzinfo=last_updated.tzinfo)

    return CheckUpdatesResponse(
        prices_updated=last_checked is None or last_updated > last_checked,
        last_updated=last_updated,
    )
