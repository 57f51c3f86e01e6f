"""
SkinHub Core Module

Storefront logic for the skincare shop:
- cart: line-item state machine and Redis snapshot storage
- catalog: filter criteria, chips, filter/sort engine
- utils.skin_types: skin-type tag normalization
- services: product models, money helpers, product source
- routers: FastAPI endpoints

Note: Imports are lazy so importing a submodule does not pull in FastAPI
or the Redis client.
"""

__all__ = [
    "CartManager",
    "CatalogEngine",
    "get_cart_registry",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "CartManager":
        from skinhub.cart import CartManager
        return CartManager
    elif name == "CatalogEngine":
        from skinhub.catalog import CatalogEngine
        return CatalogEngine
    elif name == "get_cart_registry":
        from skinhub.cart import get_cart_registry
        return get_cart_registry
    raise AttributeError(f"module 'skinhub' has no attribute '{name}'")
