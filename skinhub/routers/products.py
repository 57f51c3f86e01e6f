"""
Products API Router

Public catalog endpoints. Each request rebuilds the criteria from the
query string and runs the filter/sort engine on the current snapshot.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from skinhub.catalog import CatalogEngine, FilterDimension, best_sellers, facets, featured, paginate
from skinhub.errors import ERROR_PRODUCT_NOT_FOUND
from skinhub.services.catalog_source import ProductSource
from skinhub.services.models import Product
from skinhub.services.money import format_money
from .deps import get_products

router = APIRouter(prefix="/api/products", tags=["products"])


def _product_response(product: Product) -> dict:
    data = product.model_dump(mode="json")
    data["price_display"] = format_money(product.price)
    return data


@router.get("")
async def list_products(
    brand: list[str] = Query(default=[]),
    category: list[str] = Query(default=[]),
    skin_type: list[str] = Query(default=[]),
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
    sort: Optional[str] = None,
    q: Optional[str] = None,
    page: int = 1,
    products: ProductSource = Depends(get_products),
):
    """Filtered, sorted, paginated listing with active chips and facets."""
    engine = CatalogEngine()
    for value in brand:
        engine.apply_filter(FilterDimension.BRAND, value)
    for value in category:
        engine.apply_filter(FilterDimension.CATEGORY, value)
    for value in skin_type:
        engine.apply_filter(FilterDimension.SKIN_TYPE, value)
    if min_price or max_price:
        engine.apply_filter(FilterDimension.PRICE, (min_price, max_price))
    if sort:
        engine.apply_filter(FilterDimension.SORT, sort)
    engine.set_query(q)

    snapshot = await products.get_all()
    result = paginate(engine.apply(snapshot), page)

    return {
        "items": [_product_response(p) for p in result.items],
        "chips": engine.derive_chips().to_list(),
        "facets": facets(snapshot),
        "sort": engine.criteria.sort_key.value,
        "page": result.page,
        "per_page": result.per_page,
        "total": result.total,
        "total_pages": result.total_pages,
    }


@router.get("/best-sellers")
async def list_best_sellers(products: ProductSource = Depends(get_products)):
    """Home page best-sellers."""
    return [_product_response(p) for p in best_sellers(await products.get_all())]


@router.get("/featured")
async def list_featured(products: ProductSource = Depends(get_products)):
    """Home page featured products."""
    return [_product_response(p) for p in featured(await products.get_all())]


@router.get("/{product_id}")
async def get_product(product_id: str, products: ProductSource = Depends(get_products)):
    """Get a published product by id."""
    product = await products.get_by_id(product_id)
    if not product or not product.is_published:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return _product_response(product)
