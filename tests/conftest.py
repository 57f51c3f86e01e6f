"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import AsyncMock

# Set test environment variables (read once when skinhub.config is imported)
os.environ.setdefault("CURRENCY_LABEL", "Rs.")
os.environ.setdefault("CURATED_LIST_LIMIT", "8")
os.environ.setdefault("PRODUCTS_PER_PAGE", "20")
os.environ.setdefault("LOG_LEVEL", "WARNING")


@pytest.fixture
def sample_products():
    """Catalog documents as the product store returns them (camelCase)"""
    return [
        {
            "id": "p-a",
            "name": "Hydrating Serum",
            "description": "Hyaluronic acid serum",
            "brand": "CeraVe",
            "category": "Serum",
            "skinType": ["Dry", "Sensitive"],
            "price": 10,
            "rating": 4,
            "reviewCount": 50,
            "status": "published",
            "featured": True,
            "bestSeller": True,
            "createdAt": "2024-01-01T00:00:00Z",
        },
        {
            "id": "p-b",
            "name": "Oil Control Gel",
            "description": "Lightweight niacinamide gel",
            "brand": "The Ordinary",
            "category": "Moisturizer",
            "skinType": "oily, combination",
            "price": 20,
            "rating": 5,
            "reviewCount": 10,
            "status": "published",
            "featured": False,
            "bestSeller": True,
            "createdAt": "2024-03-01T00:00:00Z",
        },
        {
            "id": "p-c",
            "name": "Gentle Cleanser",
            "description": "Fragrance-free foaming cleanser",
            "brand": "CeraVe",
            "category": "Cleanser",
            "skinType": ["sensitive"],
            "price": 15,
            "rating": 4,
            "reviewCount": 80,
            "status": "published",
            "featured": True,
            "bestSeller": False,
            "createdAt": "2024-02-01T00:00:00Z",
            "variants": [
                {"id": "v-c-small", "productId": "p-c", "sku": "GC-100", "attributes": {"size": "100ml"},
                 "price": 12, "stock": 5, "active": True},
                {"id": "v-c-large", "productId": "p-c", "sku": "GC-250", "attributes": {"size": "250ml"},
                 "price": 25, "stock": 0, "active": True},
            ],
        },
        {
            "id": "p-d",
            "name": "Draft Toner",
            "brand": "CeraVe",
            "category": "Toner",
            "skinType": ["oily"],
            "price": 5,
            "rating": 5,
            "status": "draft",
            "featured": True,
            "bestSeller": True,
        },
    ]


@pytest.fixture
def product_source(sample_products):
    """In-memory product source loaded with sample products"""
    from skinhub.services.catalog_source import ProductSource

    return ProductSource(sample_products)


@pytest.fixture
def cart_manager():
    """Empty cart"""
    from skinhub.cart import CartManager

    return CartManager()


@pytest.fixture
def mock_redis():
    """Mock async Upstash client"""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    return redis
