"""
Loop API — Shop & Inventory Route Tests
=========================================

What:  Tests for the paged inventory and shop catalog endpoints.

What we test:
    ✅ hasMore is true exactly when the page comes back full
    ✅ offset windows and category filtering
    ✅ Bad pagination parameters → 400 after authentication
    ✅ Shop catalog is public and hides inactive items
"""

import pytest


def _inventory_row(n, category="frame"):
    return {
        "id": f"inv-{n}",
        "user_id": "user-1",
        "purchased_at": f"2024-01-{n:02d}T00:00:00+00:00",
        "shop_item": {"id": f"item-{n}", "category": category},
    }


@pytest.fixture
def five_items(fake_store, user_headers):
    fake_store.inventory = [_inventory_row(n) for n in range(1, 6)]
    # another user's purchase never shows up
    fake_store.inventory.append({**_inventory_row(9), "user_id": "user-2"})
    return fake_store.inventory


class TestInventoryPagination:

    @pytest.mark.asyncio
    async def test_full_page_has_more(self, test_client, five_items, user_headers):
        response = await test_client.get("/api/inventory?limit=2&offset=0", headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [row["id"] for row in body["items"]] == ["inv-5", "inv-4"]
        assert body["hasMore"] is True

    @pytest.mark.asyncio
    async def test_short_page_has_no_more(self, test_client, five_items, user_headers):
        response = await test_client.get("/api/inventory?limit=10", headers=user_headers)

        body = response.json()
        assert len(body["items"]) == 5
        assert body["hasMore"] is False

    @pytest.mark.asyncio
    async def test_offset_window(self, test_client, five_items, user_headers):
        response = await test_client.get("/api/inventory?limit=2&offset=4", headers=user_headers)

        body = response.json()
        assert [row["id"] for row in body["items"]] == ["inv-1"]
        assert body["hasMore"] is False

    @pytest.mark.asyncio
    async def test_exact_remainder_reports_more(self, test_client, five_items, user_headers):
        response = await test_client.get("/api/inventory?limit=5", headers=user_headers)

        assert response.json()["hasMore"] is True

    @pytest.mark.asyncio
    async def test_defaults(self, test_client, five_items, user_headers):
        response = await test_client.get("/api/inventory", headers=user_headers)

        body = response.json()
        assert len(body["items"]) == 5
        assert body["hasMore"] is False

    @pytest.mark.asyncio
    async def test_category_filter(self, test_client, fake_store, user_headers):
        fake_store.inventory = [
            _inventory_row(1, "frame"),
            _inventory_row(2, "badge"),
            _inventory_row(3, "frame"),
        ]

        response = await test_client.get("/api/inventory?category=frame", headers=user_headers)

        assert [row["id"] for row in response.json()["items"]] == ["inv-3", "inv-1"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query",
        ["limit=abc", "limit=0", "limit=-3", "offset=-1", "offset=1.5"],
    )
    async def test_bad_pagination_is_400(self, test_client, fake_store, user_headers, query):
        response = await test_client.get(f"/api/inventory?{query}", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"
        assert "list_inventory" not in fake_store.calls

    @pytest.mark.asyncio
    async def test_bad_pagination_without_credential_is_401(self, test_client):
        response = await test_client.get("/api/inventory?limit=abc")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_backend_failure_is_500(self, test_client, fake_store, user_headers):
        fake_store.fail_on.add("list_inventory")

        response = await test_client.get("/api/inventory", headers=user_headers)

        assert response.status_code == 500


class TestShopItems:

    @pytest.fixture(autouse=True)
    def catalog(self, fake_store):
        fake_store.shop_items = [
            {"id": "a", "category": "frame", "is_active": True, "created_at": "2024-01-01"},
            {"id": "b", "category": "badge", "is_active": True, "created_at": "2024-01-02"},
            {"id": "c", "category": "frame", "is_active": False, "created_at": "2024-01-03"},
        ]

    @pytest.mark.asyncio
    async def test_public_and_active_only(self, test_client):
        response = await test_client.get("/api/shop/items")

        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["items"]] == ["b", "a"]
        assert body["hasMore"] is False

    @pytest.mark.asyncio
    async def test_category_and_limit(self, test_client):
        response = await test_client.get("/api/shop/items?category=frame&limit=1")

        body = response.json()
        assert [item["id"] for item in body["items"]] == ["a"]
        assert body["hasMore"] is True
