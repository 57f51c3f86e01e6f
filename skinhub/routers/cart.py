"""
Cart Router

Shopping cart endpoints keyed by the X-Session-Id header. Prices and
stock limits come from the product source, never from the request body.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from skinhub.cart import CartManager, CartRegistry
from skinhub.cart.storage import CartStorageError, CartStore
from skinhub.errors import (
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_PRODUCT_UNAVAILABLE,
    ERROR_STORAGE_UNAVAILABLE,
    ERROR_VARIANT_NOT_FOUND,
    CartError,
    OutOfStock,
)
from skinhub.logging import get_logger, sanitize_for_logging
from skinhub.services.catalog_source import ProductSource
from skinhub.services.models import Product
from skinhub.services.money import format_money, round_money, to_float
from .deps import get_cart_store, get_products, get_registry, get_session_id
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _format_cart_response(manager: CartManager) -> dict:
    items = manager.items()
    subtotal = round_money(manager.get_subtotal())
    return {
        "items": [
            {
                **item.to_dict(),
                "line_total": str(round_money(item.line_total)),
                "line_total_display": format_money(item.line_total),
            }
            for item in items
        ],
        "item_count": manager.get_item_count(),
        "subtotal": str(subtotal),
        "subtotal_value": to_float(subtotal),
        "subtotal_display": format_money(subtotal),
    }


def _raise_cart_error(error: CartError):
    status = 409 if isinstance(error, OutOfStock) else 400
    raise HTTPException(status_code=status, detail={"code": error.code, "message": error.message})


async def _session_cart(session_id: str, registry: CartRegistry, store: Optional[CartStore]) -> CartManager:
    """Cart for the session, hydrated from the store the first time it is seen."""
    if store is None or registry.has(session_id):
        return registry.get(session_id)

    # Hydrate off-registry; a cart registered meanwhile by another request wins
    manager = CartManager()
    try:
        _, result = await store.load(session_id, manager)
    except CartStorageError:
        raise HTTPException(status_code=503, detail=ERROR_STORAGE_UNAVAILABLE)
    if result.skipped:
        logger.warning(
            "Session %s: dropped %d stored cart record(s)",
            sanitize_for_logging(session_id),
            result.skipped,
        )
    return registry.get_or_set(session_id, manager)


async def _persist(session_id: str, manager: CartManager, store: Optional[CartStore]) -> None:
    if store is None:
        return
    try:
        await store.save(session_id, manager)
    except CartStorageError:
        raise HTTPException(status_code=503, detail=ERROR_STORAGE_UNAVAILABLE)


def _resolve_price_and_stock(product: Product, variant_id: str | None):
    """Unit price and stock limit for a product or one of its variants."""
    if not product.variants:
        return product.price, None
    variant = product.get_variant(variant_id)
    if variant is None:
        raise HTTPException(status_code=404, detail=ERROR_VARIANT_NOT_FOUND)
    stock = variant.stock if variant.active else 0
    return variant.price, max(stock, 0)


async def _get_orderable_product(products: ProductSource, product_id: str) -> Product:
    product = await products.get_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    if not product.is_published:
        raise HTTPException(status_code=400, detail=ERROR_PRODUCT_UNAVAILABLE)
    return product


@router.get("")
async def get_cart(
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_registry),
    store: Optional[CartStore] = Depends(get_cart_store),
):
    """Get the session's cart."""
    manager = await _session_cart(session_id, registry, store)
    return _format_cart_response(manager)


@router.post("/add")
async def add_to_cart(
    request: AddToCartRequest,
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_registry),
    store: Optional[CartStore] = Depends(get_cart_store),
    products: ProductSource = Depends(get_products),
):
    """Add units of a product variant (merges with an existing line)."""
    product = await _get_orderable_product(products, request.product_id)
    unit_price, stock_limit = _resolve_price_and_stock(product, request.variant_id)

    manager = await _session_cart(session_id, registry, store)
    try:
        manager.add_item(
            request.product_id,
            request.variant_id,
            unit_price,
            quantity=request.quantity,
            stock_limit=stock_limit,
        )
    except CartError as e:
        _raise_cart_error(e)

    await _persist(session_id, manager, store)
    return _format_cart_response(manager)


@router.patch("/item")
async def update_cart_item(
    request: UpdateCartItemRequest,
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_registry),
    store: Optional[CartStore] = Depends(get_cart_store),
    products: ProductSource = Depends(get_products),
):
    """Set a line's quantity (0 = remove)."""
    stock_limit = None
    product = await products.get_by_id(request.product_id)
    if product and product.variants and request.quantity > 0:
        _, stock_limit = _resolve_price_and_stock(product, request.variant_id)

    manager = await _session_cart(session_id, registry, store)
    try:
        manager.update_quantity(request.product_id, request.variant_id, request.quantity, stock_limit=stock_limit)
    except CartError as e:
        _raise_cart_error(e)

    await _persist(session_id, manager, store)
    return _format_cart_response(manager)


@router.delete("/item")
async def remove_cart_item(
    product_id: str,
    variant_id: str | None = None,
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_registry),
    store: Optional[CartStore] = Depends(get_cart_store),
):
    """Remove a line (no-op if absent)."""
    manager = await _session_cart(session_id, registry, store)
    try:
        manager.remove_item(product_id, variant_id)
    except CartError as e:
        _raise_cart_error(e)

    await _persist(session_id, manager, store)
    return _format_cart_response(manager)


@router.delete("")
async def clear_cart(
    session_id: str = Depends(get_session_id),
    registry: CartRegistry = Depends(get_registry),
    store: Optional[CartStore] = Depends(get_cart_store),
):
    """Empty the cart."""
    manager = await _session_cart(session_id, registry, store)
    manager.clear()
    await _persist(session_id, manager, store)
    return _format_cart_response(manager)
