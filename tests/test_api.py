"""
End-to-end API tests.

Run against an in-memory SQLite database through the ASGI app.
"""

from decimal import Decimal

import pytest


def money(value):
    return Decimal(str(value))


# ── Products ──────────────────────────────────────────────


class TestProductListing:
    @pytest.mark.asyncio
    async def test_list_prices_for_client_and_agent(self, api_client, catalog):
        resp = await api_client.get(
            "/api/products",
            params={"client_id": catalog.client_yellow_id, "agent_id": catalog.agent_id},
        )
        assert resp.status_code == 200
        data = resp.json()

        assert data["total"] == 3
        assert data["pages"] == 1
        by_id = {p["product_id"]: p for p in data["items"]}
        assert catalog.retired_id not in by_id

        marble = by_id[catalog.marble_id]
        assert money(marble["original_price"]) == Decimal("1000")
        assert money(marble["calculated_price"]) == Decimal("1180.00")
        assert marble["commission_info"]["consultant_name"] == "Yellow"
        assert marble["commission_info"]["is_global_rate"] is False

        granite = by_id[catalog.granite_id]
        assert money(granite["calculated_price"]) == Decimal("565.00")
        assert granite["commission_info"]["has_category_override"] is True

    @pytest.mark.asyncio
    async def test_anonymous_listing_is_base_price(self, api_client, catalog):
        resp = await api_client.get("/api/products", params={"category": "Onyx"})
        data = resp.json()

        assert data["total"] == 1
        assert money(data["items"][0]["calculated_price"]) == Decimal("999.99")
        assert data["items"][0]["commission_info"]["consultant_level"] == "none"

    @pytest.mark.asyncio
    async def test_pagination(self, api_client, catalog):
        resp = await api_client.get("/api/products", params={"page": 2, "limit": 2})
        data = resp.json()

        assert data["total"] == 3
        assert data["pages"] == 2
        assert [p["product_id"] for p in data["items"]] == [catalog.onyx_id]

    @pytest.mark.asyncio
    async def test_unknown_agent_degrades(self, api_client, catalog):
        resp = await api_client.get(
            f"/api/products/{catalog.marble_id}/price",
            params={"agent_id": 9999},
        )
        assert resp.status_code == 200
        assert money(resp.json()["calculated_price"]) == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_malformed_id_rejected(self, api_client, catalog):
        resp = await api_client.get("/api/products", params={"client_id": 0})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_single_product_not_found(self, api_client, catalog):
        resp = await api_client.get(f"/api/products/{catalog.retired_id}/price")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_bulk_prices(self, api_client, catalog):
        resp = await api_client.post(
            "/api/products/prices",
            json={
                "product_ids": [catalog.granite_id, catalog.marble_id, 9999, catalog.retired_id],
                "client_id": catalog.client_none_id,
                "agent_id": catalog.plain_agent_id,
            },
        )
        assert resp.status_code == 200
        data = resp.json()

        assert money(data["prices"][str(catalog.marble_id)]["calculated_price"]) == Decimal("1050.00")
        assert money(data["prices"][str(catalog.granite_id)]["calculated_price"]) == Decimal("525.00")
        assert data["missing"] == [9999, catalog.retired_id]


# ── Cart and orders ───────────────────────────────────────


async def add_to_cart(api_client, client_id, product_id, quantity=1, agent_id=None):
    resp = await api_client.post(
        "/api/cart/items",
        json={
            "client_id": client_id,
            "product_id": product_id,
            "quantity": quantity,
            "agent_id": agent_id,
        },
    )
    assert resp.status_code == 201
    return resp.json()


class TestCartFlow:
    @pytest.mark.asyncio
    async def test_cart_keeps_snapshot_until_refresh(self, api_client, catalog):
        await add_to_cart(api_client, catalog.client_yellow_id, catalog.marble_id, 2, catalog.agent_id)

        resp = await api_client.put(
            f"/api/admin/agents/{catalog.agent_id}/commission",
            json={"commission_rate": "2"},
        )
        assert resp.status_code == 200

        cart = (await api_client.get(f"/api/cart/{catalog.client_yellow_id}")).json()
        assert money(cart["items"][0]["price"]) == Decimal("1180.00")
        assert money(cart["total"]) == Decimal("2360.00")

        resp = await api_client.post(
            "/api/cart/refresh-pricing",
            json={"client_id": catalog.client_yellow_id, "agent_id": catalog.agent_id},
        )
        assert resp.status_code == 200
        assert money(resp.json()[0]["price"]) == Decimal("1120.00")

    @pytest.mark.asyncio
    async def test_order_prices_survive_rate_change(self, api_client, catalog):
        await add_to_cart(api_client, catalog.client_yellow_id, catalog.marble_id, 1, catalog.agent_id)

        resp = await api_client.post("/api/orders", json={"client_id": catalog.client_yellow_id})
        assert resp.status_code == 201
        order = resp.json()
        assert money(order["total_amount"]) == Decimal("1180.00")
        assert order["agent_id"] == catalog.agent_id

        await api_client.put(
            f"/api/admin/agents/{catalog.agent_id}/commission",
            json={"commission_rate": "30", "category_commissions": {"Marble": "1"}},
        )
        resp = await api_client.patch(
            f"/api/orders/{order['id']}/shipping-status",
            json={"shipping_status": "dispatched"},
        )
        assert resp.status_code == 200

        stored = (await api_client.get(f"/api/orders/{order['id']}")).json()
        assert stored["shipping_status"] == "dispatched"
        assert money(stored["items"][0]["price"]) == Decimal("1180.00")
        assert money(stored["items"][0]["breakdown"]["agent_commission_rate"]) == Decimal("8")

        cart = (await api_client.get(f"/api/cart/{catalog.client_yellow_id}")).json()
        assert cart["items"] == []

        history = (await api_client.get("/api/orders", params={"client_id": catalog.client_yellow_id})).json()
        assert history["total"] == 1

    @pytest.mark.asyncio
    async def test_update_and_remove_line(self, api_client, catalog):
        item = await add_to_cart(api_client, catalog.client_none_id, catalog.onyx_id)

        resp = await api_client.patch(f"/api/cart/items/{item['id']}", json={"quantity": 3})
        assert resp.json()["quantity"] == 3
        assert money(resp.json()["price"]) == Decimal("999.99")

        resp = await api_client.delete(f"/api/cart/items/{item['id']}")
        assert resp.json() == {"success": True}

        resp = await api_client.delete(f"/api/cart/items/{item['id']}")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_clear_cart(self, api_client, catalog):
        await add_to_cart(api_client, catalog.client_none_id, catalog.onyx_id)
        await add_to_cart(api_client, catalog.client_none_id, catalog.marble_id)

        resp = await api_client.delete(f"/api/cart/{catalog.client_none_id}")
        assert resp.json() == {"success": True, "removed": 2}

    @pytest.mark.asyncio
    async def test_unknown_client_is_404(self, api_client, catalog):
        resp = await api_client.post(
            "/api/cart/items",
            json={"client_id": 9999, "product_id": catalog.marble_id},
        )
        assert resp.status_code == 404
        assert resp.json()["retryable"] is False

    @pytest.mark.asyncio
    async def test_empty_cart_checkout_is_422(self, api_client, catalog):
        resp = await api_client.post("/api/orders", json={"client_id": catalog.client_none_id})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Cart is empty"


class TestWishlist:
    @pytest.mark.asyncio
    async def test_add_list_refresh_remove(self, api_client, catalog):
        resp = await api_client.post(
            "/api/wishlist/items",
            json={"client_id": catalog.client_yellow_id, "product_id": catalog.granite_id},
        )
        assert resp.status_code == 201
        item = resp.json()
        assert money(item["price"]) == Decimal("550.00")

        resp = await api_client.post(
            "/api/wishlist/refresh-pricing",
            json={"client_id": catalog.client_yellow_id, "agent_id": catalog.agent_id},
        )
        assert money(resp.json()[0]["price"]) == Decimal("565.00")

        listed = (await api_client.get(f"/api/wishlist/{catalog.client_yellow_id}")).json()
        assert [i["id"] for i in listed] == [item["id"]]

        resp = await api_client.delete(f"/api/wishlist/items/{item['id']}")
        assert resp.status_code == 200


# ── Admin and client settings ────────────────────────────


class TestSettings:
    @pytest.mark.asyncio
    async def test_standard_rate_round_trip(self, api_client, catalog):
        resp = await api_client.put("/api/admin/settings/commission", json={"standard_commission_rate": "4"})
        assert resp.status_code == 200
        assert resp.json()["is_standard_rate_active"] is True

        priced = (await api_client.get(
            f"/api/products/{catalog.marble_id}/price",
            params={"agent_id": catalog.agent_id},
        )).json()
        assert money(priced["calculated_price"]) == Decimal("1040.00")
        assert priced["commission_info"]["is_global_rate"] is True

        resp = await api_client.put("/api/admin/settings/commission", json={"standard_commission_rate": None})
        assert resp.json()["is_standard_rate_active"] is False

        priced = (await api_client.get(
            f"/api/products/{catalog.marble_id}/price",
            params={"agent_id": catalog.agent_id},
        )).json()
        assert money(priced["calculated_price"]) == Decimal("1080.00")

    @pytest.mark.asyncio
    async def test_default_rate_applies_without_agent(self, api_client, catalog):
        await api_client.put("/api/admin/settings/commission", json={"default_commission_rate": "1.5"})

        settings = (await api_client.get("/api/admin/settings/commission")).json()
        assert money(settings["default_commission_rate"]) == Decimal("1.5")

        priced = (await api_client.get(f"/api/products/{catalog.marble_id}/price")).json()
        assert money(priced["calculated_price"]) == Decimal("1015.00")

    @pytest.mark.asyncio
    async def test_consultant_level_change_invalidates_cache(self, api_client, catalog):
        url = f"/api/products/{catalog.marble_id}/price"
        before = (await api_client.get(url, params={"client_id": catalog.client_none_id})).json()
        assert money(before["calculated_price"]) == Decimal("1000.00")

        resp = await api_client.put(
            f"/api/clients/{catalog.client_none_id}/consultant-level",
            json={"consultant_level": "purple"},
        )
        assert resp.status_code == 200
        assert resp.json()["consultant_name"] == "Purple"

        after = (await api_client.get(url, params={"client_id": catalog.client_none_id})).json()
        assert money(after["calculated_price"]) == Decimal("1150.00")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("category_rate", ["-50", "5000"])
    async def test_out_of_range_category_rate_rejected(self, api_client, catalog, category_rate):
        resp = await api_client.put(
            f"/api/admin/agents/{catalog.agent_id}/commission",
            json={"commission_rate": "8", "category_commissions": {"Granite": category_rate}},
        )
        assert resp.status_code == 422

        priced = (await api_client.get(
            f"/api/products/{catalog.granite_id}/price",
            params={"agent_id": catalog.agent_id},
        )).json()
        assert money(priced["commission_info"]["agent_commission_rate"]) == Decimal("3")

    @pytest.mark.asyncio
    async def test_category_rates_stored(self, api_client, catalog):
        resp = await api_client.put(
            f"/api/admin/agents/{catalog.agent_id}/commission",
            json={"commission_rate": "8", "category_commissions": {"Granite": "4.5", "Onyx": "0"}},
        )
        assert resp.status_code == 200
        assert {k: money(v) for k, v in resp.json()["category_commissions"].items()} == {
            "Granite": Decimal("4.5"),
            "Onyx": Decimal("0"),
        }

    @pytest.mark.asyncio
    async def test_unknown_agent_commission_update(self, api_client, catalog):
        resp = await api_client.put("/api/admin/agents/9999/commission", json={"commission_rate": "5"})
        assert resp.status_code == 404


class TestCheckUpdates:
    @pytest.mark.asyncio
    async def test_no_changes_recorded(self, api_client, catalog):
        resp = await api_client.post("/api/prices/check-updates", json={})
        assert resp.json() == {"prices_updated": False, "last_updated": None}

    @pytest.mark.asyncio
    async def test_change_is_reported(self, api_client, catalog):
        await api_client.put(
            f"/api/admin/agents/{catalog.plain_agent_id}/commission",
            json={"commission_rate": "6"},
        )

        resp = await api_client.post("/api/prices/check-updates", json={"last_checked": None})
        assert resp.json()["prices_updated"] is True
        assert resp.json()["last_updated"] is not None

        resp = await api_client.post(
            "/api/prices/check-updates",
            json={"last_checked": "2099-01-01T00:00:00Z"},
        )
        assert resp.json()["prices_updated"] is False
