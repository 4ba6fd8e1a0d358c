"""
FastAPI dependencies wiring the pricing components per request.

The rate cache is owned by the application (app.state.rate_cache);
everything else is built per request around the request's session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from evershine.config import settings
from evershine.db import get_db
from evershine.repositories import (
    AgentRepository,
    CartRepository,
    ClientRepository,
    ConsultantLevelRepository,
    OrderRepository,
    ProductRepository,
    SettingsRepository,
    WishlistRepository,
)
from evershine.services.bulk_pricing import BulkPricingPipeline
from evershine.services.checkout import CheckoutService
from evershine.services.pricing import PriceCalculator
from evershine.services.rate_cache import RateCache
from evershine.services.rate_resolver import RateResolver, load_commission_policy
from evershine.services.snapshot import PriceSnapshotStore


def get_rate_cache(request: Request) -> RateCache:
    return request.app.state.rate_cache


def get_calculator() -> PriceCalculator:
    return PriceCalculator(max_rate=settings.max_rate_percent)


async def get_resolver(
    db: AsyncSession = Depends(get_db),
    cache: RateCache = Depends(get_rate_cache),
) -> RateResolver:
    policy = await load_commission_policy(
        SettingsRepository(db),
        fallback_default=settings.default_commission_rate,
    )
    return RateResolver(
        agents=AgentRepository(db),
        clients=ClientRepository(db),
        consultant_levels=ConsultantLevelRepository(),
        cache=cache,
        policy=policy,
    )


async def get_pipeline(
    db: AsyncSession = Depends(get_db),
    resolver: RateResolver = Depends(get_resolver),
    calculator: PriceCalculator = Depends(get_calculator),
) -> BulkPricingPipeline:
    return BulkPricingPipeline(resolver, calculator, ProductRepository(db))


async def get_snapshot_store(
    db: AsyncSession = Depends(get_db),
    resolver: RateResolver = Depends(get_resolver),
    calculator: PriceCalculator = Depends(get_calculator),
) -> PriceSnapshotStore:
    return PriceSnapshotStore(
        carts=CartRepository(db),
        products=ProductRepository(db),
        resolver=resolver,
        calculator=calculator,
        wishlists=WishlistRepository(db),
    )


async def get_checkout(
    db: AsyncSession = Depends(get_db),
    resolver: RateResolver = Depends(get_resolver),
    calculator: PriceCalculator = Depends(get_calculator),
    store: PriceSnapshotStore = Depends(get_snapshot_store),
) -> CheckoutService:
    return CheckoutService(
        products=ProductRepository(db),
        clients=ClientRepository(db),
        carts=CartRepository(db),
        wishlists=WishlistRepository(db),
        orders=OrderRepository(db),
        resolver=resolver,
        calculator=calculator,
        store=store,
    )
