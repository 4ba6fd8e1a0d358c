"""Commission settings schemas."""

from decimal import Decimal
from typing import Annotated, Dict, Optional

from pydantic import BaseModel, Field

from evershine.models import ConsultantLevel

# Commission rate in percentage points
Percent = Annotated[Decimal, Field(ge=0, le=100)]


class CommissionSettingsResponse(BaseModel):
    """Platform-wide commission settings."""

    default_commission_rate: Decimal
    standard_commission_rate: Optional[Decimal] = None
    is_standard_rate_active: bool


class CommissionSettingsUpdate(BaseModel):
    """Update platform commission settings.

    Send standard_commission_rate = null to go back to individual agent rates.
    """

    default_commission_rate: Optional[Percent] = None
    standard_commission_rate: Optional[Percent] = None


class AgentCommissionUpdate(BaseModel):
    commission_rate: Percent
    category_commissions: Optional[Dict[str, Percent]] = None


class AgentCommissionResponse(BaseModel):
    agent_id: int
    commission_rate: Decimal
    category_commissions: Dict[str, Decimal]


class ConsultantLevelUpdate(BaseModel):
    consultant_level: ConsultantLevel


class ConsultantLevelResponse(BaseModel):
    client_id: int
    consultant_level: ConsultantLevel
    consultant_level_rate: Decimal
    consultant_name: str
