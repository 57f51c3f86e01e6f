"""Cart package: models, manager, and snapshot storage."""
from .models import LineItem, Cart
from .service import CartManager, CartRegistry, RestoreResult, get_cart_registry

__all__ = [
    "LineItem",
    "Cart",
    "CartManager",
    "CartRegistry",
    "RestoreResult",
    "get_cart_registry",
]
