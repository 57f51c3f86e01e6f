"""Tests for API endpoints"""
import asyncio
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from api.index import app
from skinhub.cart import CartRegistry
from skinhub.cart.storage import CartStore
from skinhub.routers.cart import _session_cart
from skinhub.routers.deps import get_cart_store, get_products, get_registry

SESSION = {"X-Session-Id": "sess-123"}


@pytest.fixture
def registry():
    return CartRegistry()


@pytest.fixture
def client(product_source, registry):
    """Test client with in-memory collaborators"""
    app.dependency_overrides[get_products] = lambda: product_source
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_cart_store] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client):
    """Test health check endpoint"""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestProductsApi:

    def test_list_products(self, client):
        response = client.get("/api/products")
        data = response.json()

        assert response.status_code == 200
        assert [p["id"] for p in data["items"]] == ["p-a", "p-b", "p-c"]
        assert data["chips"] == []
        assert data["facets"]["brands"] == ["CeraVe", "The Ordinary"]
        assert data["total"] == 3
        assert data["sort"] == "relevance"

    def test_filters_sort_and_chips(self, client):
        response = client.get(
            "/api/products",
            params={"brand": ["CeraVe"], "skin_type": "sensitive", "sort": "price-desc"},
        )
        data = response.json()

        assert [p["id"] for p in data["items"]] == ["p-c", "p-a"]
        assert [c["label"] for c in data["chips"]] == ["Brand: CeraVe", "Skin: sensitive", "Price: High to Low"]

    def test_price_range(self, client):
        data = client.get("/api/products", params={"min_price": "12", "max_price": "15"}).json()

        assert [p["id"] for p in data["items"]] == ["p-c"]
        assert data["chips"][0] == {"type": "price", "value": {"min": "12", "max": "15"}, "label": "Price: Rs. 12 - Rs. 15"}

    def test_unknown_sort_falls_back(self, client):
        data = client.get("/api/products", params={"sort": "cheapest"}).json()

        assert data["sort"] == "relevance"
        assert [p["id"] for p in data["items"]] == ["p-a", "p-b", "p-c"]

    def test_search_query(self, client):
        data = client.get("/api/products", params={"q": "gel"}).json()
        assert [p["id"] for p in data["items"]] == ["p-b"]

    def test_best_sellers(self, client):
        response = client.get("/api/products/best-sellers")
        assert [p["id"] for p in response.json()] == ["p-b", "p-a"]

    def test_featured(self, client):
        response = client.get("/api/products/featured")
        assert [p["id"] for p in response.json()] == ["p-a", "p-c"]

    def test_get_product(self, client):
        response = client.get("/api/products/p-a")

        assert response.status_code == 200
        assert response.json()["price_display"] == "Rs. 10"

    def test_get_product_not_found(self, client):
        assert client.get("/api/products/missing").status_code == 404

    def test_draft_product_hidden(self, client):
        assert client.get("/api/products/p-d").status_code == 404


class TestCartApi:

    def test_requires_session(self, client):
        assert client.get("/api/cart").status_code == 401

    def test_empty_cart(self, client):
        data = client.get("/api/cart", headers=SESSION).json()

        assert data["items"] == []
        assert data["item_count"] == 0
        assert data["subtotal"] == "0.00"

    def test_add_merges_lines(self, client):
        client.post("/api/cart/add", json={"product_id": "p-a", "quantity": 2}, headers=SESSION)
        response = client.post("/api/cart/add", json={"product_id": "p-a"}, headers=SESSION)
        data = response.json()

        assert response.status_code == 200
        assert len(data["items"]) == 1
        assert data["item_count"] == 3
        assert data["subtotal"] == "30.00"
        assert data["subtotal_display"] == "Rs. 30"

    def test_add_variant_uses_variant_price(self, client):
        data = client.post(
            "/api/cart/add",
            json={"product_id": "p-c", "variant_id": "v-c-small", "quantity": 2},
            headers=SESSION,
        ).json()

        assert data["items"][0]["variant_key"] == "v-c-small"
        assert data["subtotal"] == "24.00"

    def test_add_beyond_variant_stock(self, client):
        response = client.post(
            "/api/cart/add",
            json={"product_id": "p-c", "variant_id": "v-c-small", "quantity": 6},
            headers=SESSION,
        )

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "out_of_stock"
        assert client.get("/api/cart", headers=SESSION).json()["item_count"] == 0

    def test_add_variant_required(self, client):
        response = client.post("/api/cart/add", json={"product_id": "p-c"}, headers=SESSION)
        assert response.status_code == 404

    def test_add_invalid_quantity(self, client):
        response = client.post("/api/cart/add", json={"product_id": "p-a", "quantity": 0}, headers=SESSION)

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "invalid_quantity"

    def test_add_unknown_product(self, client):
        response = client.post("/api/cart/add", json={"product_id": "nope"}, headers=SESSION)
        assert response.status_code == 404

    def test_add_draft_product(self, client):
        response = client.post("/api/cart/add", json={"product_id": "p-d"}, headers=SESSION)
        assert response.status_code == 400

    def test_update_and_remove(self, client):
        client.post("/api/cart/add", json={"product_id": "p-a"}, headers=SESSION)
        client.post("/api/cart/add", json={"product_id": "p-b"}, headers=SESSION)

        data = client.patch("/api/cart/item", json={"product_id": "p-a", "quantity": 4}, headers=SESSION).json()
        assert data["item_count"] == 5

        data = client.patch("/api/cart/item", json={"product_id": "p-a", "quantity": 0}, headers=SESSION).json()
        assert [i["product_id"] for i in data["items"]] == ["p-b"]

        data = client.delete("/api/cart/item", params={"product_id": "p-b"}, headers=SESSION).json()
        assert data["items"] == []

    def test_clear(self, client):
        client.post("/api/cart/add", json={"product_id": "p-a"}, headers=SESSION)
        data = client.delete("/api/cart", headers=SESSION).json()

        assert data["item_count"] == 0

    def test_sessions_are_isolated(self, client):
        client.post("/api/cart/add", json={"product_id": "p-a"}, headers=SESSION)
        data = client.get("/api/cart", headers={"X-Session-Id": "other"}).json()

        assert data["item_count"] == 0

    def test_persists_to_store(self, client, mock_redis):
        store = CartStore(redis=mock_redis, ttl=60)
        app.dependency_overrides[get_cart_store] = lambda: store

        client.post("/api/cart/add", json={"product_id": "p-a"}, headers=SESSION)

        mock_redis.get.assert_awaited_once_with("skinhub-cart:sess-123")
        mock_redis.set.assert_awaited_once()

    def test_storage_outage(self, client, registry, mock_redis):
        mock_redis.get = AsyncMock(side_effect=ConnectionError("down"))
        app.dependency_overrides[get_cart_store] = lambda: CartStore(redis=mock_redis)

        assert client.get("/api/cart", headers=SESSION).status_code == 503
        assert not registry.has("sess-123")


class TestSessionHydration:
    """First-request hydration of a session cart from the store."""

    @staticmethod
    def _slow_store(mock_redis, delay=0.05):
        async def slow_get(key):
            await asyncio.sleep(delay)
            return None

        mock_redis.get = AsyncMock(side_effect=slow_get)
        return CartStore(redis=mock_redis, ttl=60)

    @pytest.mark.asyncio
    async def test_concurrent_first_requests_keep_both_adds(self, registry, mock_redis):
        store = self._slow_store(mock_redis)

        async def first():
            manager = await _session_cart("sess-1", registry, store)
            manager.add_item("p-1", None, 10)

        async def second():
            await asyncio.sleep(0.01)
            manager = await _session_cart("sess-1", registry, store)
            manager.add_item("p-2", None, 5)

        await asyncio.gather(first(), second())

        cart = registry.get("sess-1")
        assert [item.product_id for item in cart.items()] == ["p-1", "p-2"]

    @pytest.mark.asyncio
    async def test_known_session_skips_store(self, registry, mock_redis):
        registry.get("sess-1").add_item("p-1", None, 1)
        store = CartStore(redis=mock_redis)

        manager = await _session_cart("sess-1", registry, store)

        assert manager.get_item_count() == 1
        mock_redis.get.assert_not_awaited()
