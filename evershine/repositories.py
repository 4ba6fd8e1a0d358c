"""
Async repositories over the SQL store.

Each repository wraps one AsyncSession. Repositories flush but never
commit; the request (or job) that owns the session commits.

Any SQLAlchemy or connection failure is re-raised as UpstreamUnavailable.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.errors import UpstreamUnavailable
from evershine.models import (
    CONSULTANT_LEVEL_RATES,
    Agent,
    CartItem,
    Client,
    ConsultantLevel,
    Order,
    OrderItem,
    Product,
    SystemSetting,
    WishlistItem,
)

logger = logging.getLogger(__name__)

DEFAULT_COMMISSION_RATE_KEY = "default_commission_rate"
STANDARD_COMMISSION_RATE_KEY = "standard_commission_rate"
PRICES_UPDATED_AT_KEY = "prices_updated_at"


@asynccontextmanager
async def upstream(operation: str) -> AsyncIterator[None]:
    """Translate persistence failures into UpstreamUnavailable."""
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"{operation} failed: {e}")
        raise UpstreamUnavailable(f"{operation} failed, please retry") from e


@dataclass(frozen=True)
class ProductFilter:
    """Listing filter for the catalog."""
    category: Optional[str] = None
    search: Optional[str] = None
    active_only: bool = True


class ProductRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, product_id: int) -> Optional[Product]:
        async with upstream("Product lookup"):
            return await self.db.get(Product, product_id)

    async def find_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        ids = set(product_ids)
        if not ids:
            return {}
        async with upstream("Product lookup"):
            result = await self.db.execute(select(Product).where(Product.id.in_(ids)))
            return {p.id: p for p in result.scalars().all()}

    async def find_many(
        self,
        product_filter: ProductFilter,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Product], int]:
        """Return one page of products and the total matching count."""
        query = select(Product)

        if product_filter.category:
            query = query.where(Product.category == product_filter.category)

        if product_filter.search:
            query = query.where(Product.name.ilike(f"%{product_filter.search}%"))

        if product_filter.active_only:
            query = query.where(Product.is_active == True)  # noqa: E712

        async with upstream("Product listing"):
            count_query = select(func.count()).select_from(query.subquery())
            total = await self.db.scalar(count_query)

            query = query.order_by(Product.id)
            query = query.offset((page - 1) * limit).limit(limit)

            result = await self.db.execute(query)
            return list(result.scalars().all()), total or 0


class AgentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, agent_id: int) -> Optional[Agent]:
        async with upstream("Agent lookup"):
            return await self.db.get(Agent, agent_id)

    async def save(self, agent: Agent) -> Agent:
        async with upstream("Agent update"):
            self.db.add(agent)
            await self.db.flush()
        return agent


class ClientRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, client_id: int) -> Optional[Client]:
        async with upstream("Client lookup"):
            return await self.db.get(Client, client_id)

    async def save(self, client: Client) -> Client:
        async with upstream("Client update"):
            self.db.add(client)
            await self.db.flush()
        return client


class ConsultantLevelRepository:
    """Consultant tiers map to fixed rates, so no table is involved."""

    async def find_by_id(self, level: Any) -> Optional[Decimal]:
        try:
            return CONSULTANT_LEVEL_RATES[ConsultantLevel(level)]
        except ValueError:
            return None


class CartRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_client_id(self, client_id: int) -> List[CartItem]:
        async with upstream("Cart lookup"):
            result = await self.db.execute(
                select(CartItem)
                .where(CartItem.client_id == client_id)
                .order_by(CartItem.id)
            )
            return list(result.scalars().all())

    async def find_item(self, item_id: int) -> Optional[CartItem]:
        async with upstream("Cart lookup"):
            return await self.db.get(CartItem, item_id)

    async def find_for_product(self, client_id: int, product_id: int) -> Optional[CartItem]:
        async with upstream("Cart lookup"):
            result = await self.db.execute(
                select(CartItem).where(
                    CartItem.client_id == client_id,
                    CartItem.product_id == product_id,
                )
            )
            return result.scalar_one_or_none()

    async def save(self, items: Sequence[CartItem]) -> None:
        async with upstream("Cart save"):
            self.db.add_all(items)
            await self.db.flush()

    async def delete_item(self, item: CartItem) -> None:
        async with upstream("Cart item removal"):
            await self.db.delete(item)
            await self.db.flush()

    async def clear(self, client_id: int) -> int:
        async with upstream("Cart clear"):
            result = await self.db.execute(
                delete(CartItem).where(CartItem.client_id == client_id)
            )
            return result.rowcount or 0


class WishlistRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_client_id(self, client_id: int) -> List[WishlistItem]:
        async with upstream("Wishlist lookup"):
            result = await self.db.execute(
                select(WishlistItem)
                .where(WishlistItem.client_id == client_id)
                .order_by(WishlistItem.id)
            )
            return list(result.scalars().all())

    async def find_item(self, item_id: int) -> Optional[WishlistItem]:
        async with upstream("Wishlist lookup"):
            return await self.db.get(WishlistItem, item_id)

    async def find_for_product(self, client_id: int, product_id: int) -> Optional[WishlistItem]:
        async with upstream("Wishlist lookup"):
            result = await self.db.execute(
                select(WishlistItem).where(
                    WishlistItem.client_id == client_id,
                    WishlistItem.product_id == product_id,
                )
            )
            return result.scalar_one_or_none()

    async def save(self, items: Sequence[WishlistItem]) -> None:
        async with upstream("Wishlist save"):
            self.db.add_all(items)
            await self.db.flush()

    async def delete_item(self, item: WishlistItem) -> None:
        async with upstream("Wishlist item removal"):
            await self.db.delete(item)
            await self.db.flush()


class OrderRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        client_id: int,
        order_items: List[OrderItem],
        total_amount: Decimal,
        agent_id: Optional[int] = None,
    ) -> Order:
        order = Order(
            client_id=client_id,
            agent_id=agent_id,
            total_amount=total_amount,
            items=order_items,
        )
        async with upstream("Order creation"):
            self.db.add(order)
            await self.db.flush()
            await self.db.refresh(order)
        return order

    async def find_by_id(self, order_id: int) -> Optional[Order]:
        async with upstream("Order lookup"):
            return await self.db.get(Order, order_id)

    async def find_by_client_id(self, client_id: int) -> List[Order]:
        async with upstream("Order lookup"):
            result = await self.db.execute(
                select(Order)
                .where(Order.client_id == client_id)
                .order_by(Order.created_at.desc(), Order.id.desc())
            )
            return list(result.scalars().all())

    async def save(self, order: Order) -> Order:
        async with upstream("Order update"):
            self.db.add(order)
            await self.db.flush()
            await self.db.refresh(order)
        return order


class SettingsRepository:
    """Typed access to the pricing keys of the system_settings table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str, default: Any = None) -> Any:
        async with upstream("Settings lookup"):
            setting = await self.db.get(SystemSetting, key)
        if setting is None:
            return default
        value = setting.get_value()
        return default if value is None else value

    async def set(self, key: str, value: Any) -> None:
        async with upstream("Settings update"):
            setting = await self.db.get(SystemSetting, key)
            if setting:
                setting.set_value(value)
            else:
                self.db.add(SystemSetting(key=key, value={"v": value}))
            await self.db.flush()

    async def mark_prices_updated(self) -> datetime:
        """Record that a pricing input changed; clients poll this timestamp."""
        now = datetime.now(timezone.utc)
        await self.set(PRICES_UPDATED_AT_KEY, now.isoformat())
        return now

    async def prices_updated_at(self) -> Optional[datetime]:
        value = await self.get(PRICES_UPDATED_AT_KEY)
        if not value:
            return None
        return datetime.fromisoformat(value)
