"""
Tests for cart, wishlist and checkout workflows against the database.
"""

from decimal import Decimal

import pytest

from evershine.errors import InvalidArgument, NotFound
from evershine.models import Agent, OrderStatus, Product
from evershine.repositories import (
    AgentRepository,
    CartRepository,
    ClientRepository,
    OrderRepository,
    ProductRepository,
    WishlistRepository,
)
from evershine.services.checkout import CheckoutService
from evershine.services.pricing import PriceCalculator
from evershine.services.rate_cache import RateCache
from evershine.services.rate_resolver import CommissionPolicy, RateResolver
from evershine.services.snapshot import PriceSnapshotStore


def build_checkout(db, cache=None, policy=None):
    resolver = RateResolver(
        agents=AgentRepository(db),
        clients=ClientRepository(db),
        cache=cache,
        policy=policy,
    )
    calculator = PriceCalculator()
    store = PriceSnapshotStore(
        carts=CartRepository(db),
        products=ProductRepository(db),
        resolver=resolver,
        calculator=calculator,
        wishlists=WishlistRepository(db),
    )
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


# ── Add to cart ───────────────────────────────────────────


class TestAddToCart:
    @pytest.mark.asyncio
    async def test_prices_line_for_client_and_agent(self, db_session, catalog):
        checkout = build_checkout(db_session)

        item = await checkout.add_to_cart(
            catalog.client_yellow_id,
            catalog.marble_id,
            quantity=2,
            agent_id=catalog.agent_id,
        )

        # 1000 + 8% agent + 10% yellow tier
        assert item.id is not None
        assert item.price == Decimal("1180.00")
        assert item.quantity == 2
        assert item.breakdown["agent_commission_amount"] == "80.00"
        assert item.breakdown["consultant_commission_amount"] == "100.00"

    @pytest.mark.asyncio
    async def test_category_rate_applies(self, db_session, catalog):
        checkout = build_checkout(db_session)

        item = await checkout.add_to_cart(
            catalog.client_none_id,
            catalog.granite_id,
            agent_id=catalog.agent_id,
        )

        assert item.price == Decimal("515.00")

    @pytest.mark.asyncio
    async def test_adding_again_merges_and_reprices(self, db_session, catalog):
        checkout = build_checkout(db_session)
        first = await checkout.add_to_cart(catalog.client_none_id, catalog.onyx_id)
        assert first.price == Decimal("999.99")

        second = await checkout.add_to_cart(
            catalog.client_none_id,
            catalog.onyx_id,
            quantity=3,
            agent_id=catalog.plain_agent_id,
        )

        assert second.id == first.id
        assert second.quantity == 4
        # 999.99 × 5% = 49.9995 → 50.00
        assert second.price == Decimal("1049.99")
        assert len(await CartRepository(db_session).find_by_client_id(catalog.client_none_id)) == 1

    @pytest.mark.asyncio
    async def test_unknown_client(self, db_session, catalog):
        with pytest.raises(NotFound):
            await build_checkout(db_session).add_to_cart(9999, catalog.marble_id)

    @pytest.mark.asyncio
    async def test_inactive_product(self, db_session, catalog):
        with pytest.raises(NotFound):
            await build_checkout(db_session).add_to_cart(catalog.client_none_id, catalog.retired_id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1, True, 1.5])
    async def test_bad_quantity(self, db_session, catalog, quantity):
        with pytest.raises(InvalidArgument):
            await build_checkout(db_session).add_to_cart(
                catalog.client_none_id, catalog.marble_id, quantity=quantity
            )

    @pytest.mark.asyncio
    async def test_update_keeps_price(self, db_session, catalog):
        checkout = build_checkout(db_session)
        item = await checkout.add_to_cart(catalog.client_none_id, catalog.marble_id)

        product = await db_session.get(Product, catalog.marble_id)
        product.base_price = Decimal("2000.00")
        await db_session.flush()

        updated = await checkout.update_cart_item(item.id, quantity=5, custom_fields={"thickness": "18mm"})

        assert updated.quantity == 5
        assert updated.custom_fields == {"thickness": "18mm"}
        assert updated.price == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_update_missing_item(self, db_session, catalog):
        with pytest.raises(NotFound):
            await build_checkout(db_session).update_cart_item(9999, quantity=1)


# ── Refresh ───────────────────────────────────────────────


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_picks_up_new_agent_rate(self, db_session, catalog):
        checkout = build_checkout(db_session)
        await checkout.add_to_cart(catalog.client_yellow_id, catalog.marble_id, agent_id=catalog.agent_id)

        agent = await db_session.get(Agent, catalog.agent_id)
        agent.commission_rate = Decimal("2")
        await db_session.flush()

        [item] = await checkout.refresh_cart(catalog.client_yellow_id, catalog.agent_id)

        assert item.price == Decimal("1120.00")

    @pytest.mark.asyncio
    async def test_refresh_empty_cart(self, db_session, catalog):
        assert await build_checkout(db_session).refresh_cart(catalog.client_none_id) == []

    @pytest.mark.asyncio
    async def test_wishlist_add_and_refresh(self, db_session, catalog):
        checkout = build_checkout(db_session)
        item = await checkout.add_to_wishlist(catalog.client_yellow_id, catalog.onyx_id)
        assert item.price == Decimal("1099.99")

        again = await checkout.add_to_wishlist(catalog.client_yellow_id, catalog.onyx_id)
        assert again.id == item.id

        [refreshed] = await checkout.refresh_wishlist(catalog.client_yellow_id, catalog.plain_agent_id)
        assert refreshed.price == Decimal("1149.99")


# ── Place order ───────────────────────────────────────────


class TestPlaceOrder:
    @pytest.mark.asyncio
    async def test_order_freezes_cart_prices(self, db_session, catalog):
        checkout = build_checkout(db_session, cache=RateCache())
        await checkout.add_to_cart(catalog.client_yellow_id, catalog.marble_id, quantity=2, agent_id=catalog.agent_id)
        await checkout.add_to_cart(catalog.client_yellow_id, catalog.granite_id, agent_id=catalog.agent_id)

        agent = await db_session.get(Agent, catalog.agent_id)
        agent.commission_rate = Decimal("50")
        await db_session.flush()

        order = await checkout.place_order(catalog.client_yellow_id)

        assert order.status == OrderStatus.PENDING
        assert [i.price for i in order.items] == [Decimal("1180.00"), Decimal("565.00")]
        assert order.total_amount == Decimal("2925.00")
        assert order.items[0].breakdown["final_price"] == "1180.00"

    @pytest.mark.asyncio
    async def test_order_clears_cart(self, db_session, catalog):
        checkout = build_checkout(db_session)
        await checkout.add_to_cart(catalog.client_none_id, catalog.marble_id)

        await checkout.place_order(catalog.client_none_id)

        assert await CartRepository(db_session).find_by_client_id(catalog.client_none_id) == []

    @pytest.mark.asyncio
    async def test_agent_defaults_to_client_agent(self, db_session, catalog):
        checkout = build_checkout(db_session)
        await checkout.add_to_cart(catalog.client_yellow_id, catalog.marble_id)

        order = await checkout.place_order(catalog.client_yellow_id)
        assert order.agent_id == catalog.agent_id

    @pytest.mark.asyncio
    async def test_explicit_agent_kept(self, db_session, catalog):
        checkout = build_checkout(db_session)
        await checkout.add_to_cart(catalog.client_yellow_id, catalog.marble_id)

        order = await checkout.place_order(catalog.client_yellow_id, agent_id=catalog.plain_agent_id)
        assert order.agent_id == catalog.plain_agent_id

    @pytest.mark.asyncio
    async def test_empty_cart_rejected(self, db_session, catalog):
        with pytest.raises(InvalidArgument):
            await build_checkout(db_session).place_order(catalog.client_none_id)

    @pytest.mark.asyncio
    async def test_order_survives_standard_rate(self, db_session, catalog):
        await build_checkout(db_session).add_to_cart(
            catalog.client_none_id, catalog.marble_id, agent_id=catalog.agent_id
        )

        checkout = build_checkout(db_session, policy=CommissionPolicy(standard_rate=Decimal("20")))
        order = await checkout.place_order(catalog.client_none_id)

        assert order.items[0].price == Decimal("1080.00")

        orders = await OrderRepository(db_session).find_by_client_id(catalog.client_none_id)
        assert [o.id for o in orders] == [order.id]
