"""
Shared Dependencies for Routers

Lazy-loaded singletons, overridable in tests via app.dependency_overrides.
"""

from typing import Optional

from fastapi import Header, HTTPException

from skinhub import config
from skinhub.cart import CartRegistry, get_cart_registry
from skinhub.cart.storage import CartStore
from skinhub.errors import ERROR_MISSING_SESSION
from skinhub.services.catalog_source import ProductSource, get_product_source

_cart_store: Optional[CartStore] = None


def get_registry() -> CartRegistry:
    return get_cart_registry()


def get_products() -> ProductSource:
    return get_product_source()


def get_cart_store() -> Optional[CartStore]:
    """CartStore when Upstash is configured, otherwise None (memory only)."""
    global _cart_store
    if _cart_store is None and config.redis_configured():
        _cart_store = CartStore()
    return _cart_store


def get_session_id(x_session_id: str | None = Header(default=None)) -> str:
    """Shopper session from the X-Session-Id header."""
    if not x_session_id or not x_session_id.strip():
        raise HTTPException(status_code=401, detail=ERROR_MISSING_SESSION)
    return x_session_id.strip()
