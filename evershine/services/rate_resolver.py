"""
Commission rate resolution for a client/agent pair.

Rules:
- No agent: the platform default rate applies (0 unless configured)
- Unknown agent or client: treated as absent, logged as a warning
- Standard commission rate (admin setting) replaces every agent's own rate
- A category entry on the agent replaces the agent rate for that category
- Consultant rate comes from the client's tier: none 0, red 5, yellow 10, purple 15
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from evershine.errors import InvalidArgument
from evershine.models import CONSULTANT_LEVEL_NAMES, ConsultantLevel
from evershine.repositories import (
    DEFAULT_COMMISSION_RATE_KEY,
    STANDARD_COMMISSION_RATE_KEY,
    AgentRepository,
    ClientRepository,
    ConsultantLevelRepository,
    SettingsRepository,
)
from evershine.services.pricing import ZERO, RateInputs, to_decimal
from evershine.services.rate_cache import (
    RateCache,
    agent_key,
    client_key,
    consultant_level_key,
)

logger = logging.getLogger(__name__)


def validate_id(value: Any, name: str) -> Optional[int]:
    """Accept None or a positive int; anything else is malformed."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidArgument(f"{name} must be a positive integer, got {value!r}")
    return value


def parse_category_commissions(raw: Optional[Mapping[str, Any]], agent_id: int) -> Dict[str, Decimal]:
    """Convert the stored {category: rate} JSON, dropping unusable entries."""
    rates: Dict[str, Decimal] = {}
    for category, value in (raw or {}).items():
        if value is None:
            continue
        try:
            rate = to_decimal(value, "category rate")
        except InvalidArgument:
            logger.warning(f"Agent {agent_id}: ignoring category rate {value!r} for '{category}'")
            continue
        if not rate.is_finite():
            logger.warning(f"Agent {agent_id}: ignoring category rate {value!r} for '{category}'")
            continue
        rates[category] = rate
    return rates


@dataclass(frozen=True)
class AgentRates:
    """Cached view of an agent's commission configuration."""
    agent_id: int
    commission_rate: Decimal
    category_commissions: Mapping[str, Decimal] = field(default_factory=dict)

    @classmethod
    def from_model(cls, agent) -> "AgentRates":
        return cls(
            agent_id=agent.id,
            commission_rate=to_decimal(agent.commission_rate or ZERO, "commission_rate"),
            category_commissions=parse_category_commissions(agent.category_commissions, agent.id),
        )


@dataclass(frozen=True)
class ClientProfile:
    """Cached view of the client fields pricing needs."""
    client_id: int
    consultant_level: ConsultantLevel
    agent_id: Optional[int] = None

    @classmethod
    def from_model(cls, client) -> "ClientProfile":
        try:
            level = ConsultantLevel(client.consultant_level or ConsultantLevel.NONE)
        except ValueError:
            logger.warning(
                f"Client {client.id} has unknown consultant level "
                f"{client.consultant_level!r}, using none"
            )
            level = ConsultantLevel.NONE
        return cls(client_id=client.id, consultant_level=level, agent_id=client.agent_id)


@dataclass(frozen=True)
class CommissionPolicy:
    """Platform-wide commission settings."""
    default_rate: Decimal = ZERO
    standard_rate: Optional[Decimal] = None


async def load_commission_policy(
    settings_repo: SettingsRepository,
    fallback_default: Decimal = ZERO,
) -> CommissionPolicy:
    """Read the commission policy from system settings."""
    default_rate = await settings_repo.get(DEFAULT_COMMISSION_RATE_KEY)
    standard_rate = await settings_repo.get(STANDARD_COMMISSION_RATE_KEY)
    return CommissionPolicy(
        default_rate=to_decimal(default_rate, "default_commission_rate")
        if default_rate is not None else fallback_default,
        standard_rate=to_decimal(standard_rate, "standard_commission_rate")
        if standard_rate is not None else None,
    )


@dataclass(frozen=True)
class ResolvedRates:
    """
    Rates for one client/agent pair, resolved once per request.

    agent_commission_rate is the rate for products without a category
    override; use for_category() to get the pair for a given product.
    """
    agent_commission_rate: Decimal = ZERO
    consultant_level_rate: Decimal = ZERO
    category_commissions: Mapping[str, Decimal] = field(default_factory=dict)
    is_global_rate: bool = True
    consultant_level: ConsultantLevel = ConsultantLevel.NONE
    consultant_name: str = CONSULTANT_LEVEL_NAMES[ConsultantLevel.NONE]
    agent_id: Optional[int] = None
    client_id: Optional[int] = None

    def has_category_override(self, category: Optional[str]) -> bool:
        return category is not None and category in self.category_commissions

    def for_category(self, category: Optional[str]) -> RateInputs:
        if self.has_category_override(category):
            agent_rate = self.category_commissions[category]
        else:
            agent_rate = self.agent_commission_rate
        return RateInputs(
            agent_commission_rate=agent_rate,
            consultant_level_rate=self.consultant_level_rate,
        )


class RateResolver:
    """
    Resolves commission rates through the rate cache and repositories.

    Missing records never raise: they degrade to the default rate.
    Repository failures (UpstreamUnavailable) propagate.
    """

    def __init__(
        self,
        agents: AgentRepository,
        clients: ClientRepository,
        consultant_levels: Optional[ConsultantLevelRepository] = None,
        cache: Optional[RateCache] = None,
        policy: Optional[CommissionPolicy] = None,
    ):
        self.agents = agents
        self.clients = clients
        self.consultant_levels = consultant_levels or ConsultantLevelRepository()
        self.cache = cache
        self.policy = policy or CommissionPolicy()

    async def resolve(
        self,
        client_id: Optional[int] = None,
        agent_id: Optional[int] = None,
    ) -> ResolvedRates:
        """Resolve the agent and consultant rates for a client/agent pair.

        Args:
            client_id: Client whose consultant tier applies
            agent_id: Agent whose commission applies

        Returns:
            ResolvedRates with all fields filled in

        Raises:
            InvalidArgument: an id is not a positive integer
        """
        client_id = validate_id(client_id, "client_id")
        agent_id = validate_id(agent_id, "agent_id")

        agent = await self.get_agent(agent_id) if agent_id is not None else None
        if agent_id is not None and agent is None:
            logger.warning(f"Agent {agent_id} not found, using default commission rate")

        if agent is None:
            agent_rate = self.policy.default_rate
            category_commissions: Mapping[str, Decimal] = {}
            is_global_rate = True
        elif self.policy.standard_rate is not None:
            agent_rate = self.policy.standard_rate
            category_commissions = agent.category_commissions
            is_global_rate = True
        else:
            agent_rate = agent.commission_rate
            category_commissions = agent.category_commissions
            is_global_rate = False

        level = ConsultantLevel.NONE
        if client_id is not None:
            client = await self.get_client(client_id)
            if client is None:
                logger.warning(f"Client {client_id} not found, using default consultant level")
            else:
                level = client.consultant_level

        return ResolvedRates(
            agent_commission_rate=agent_rate,
            consultant_level_rate=await self.get_consultant_rate(level),
            category_commissions=category_commissions,
            is_global_rate=is_global_rate,
            consultant_level=level,
            consultant_name=CONSULTANT_LEVEL_NAMES[level],
            agent_id=agent.agent_id if agent else None,
            client_id=client_id,
        )

    async def get_agent(self, agent_id: int) -> Optional[AgentRates]:
        key = agent_key(agent_id)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        agent = await self.agents.find_by_id(agent_id)
        if agent is None:
            return None

        record = AgentRates.from_model(agent)
        if self.cache is not None:
            self.cache.set(key, record)
        return record

    async def get_client(self, client_id: int) -> Optional[ClientProfile]:
        key = client_key(client_id)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        client = await self.clients.find_by_id(client_id)
        if client is None:
            return None

        record = ClientProfile.from_model(client)
        if self.cache is not None:
            self.cache.set(key, record)
        return record

    async def get_consultant_rate(self, level: ConsultantLevel) -> Decimal:
        key = consultant_level_key(level.value)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        rate = await self.consultant_levels.find_by_id(level)
        if rate is None:
            logger.warning(f"No rate configured for consultant level '{level.value}', using 0")
            return ZERO

        if self.cache is not None:
            self.cache.set(key, rate)
        return rate
