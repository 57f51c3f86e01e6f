"""
Catalog Filter/Sort Engine

Derives the visible product list and the active filter chips from a
product snapshot and a FilterCriteria value. Nothing here performs I/O or
caches products: callers pass whatever snapshot the supplier returned.
"""
import math
from dataclasses import dataclass
from datetime import timezone
from decimal import Decimal
from typing import Any, Iterable, Iterator, Optional

from pydantic import ValidationError

from skinhub import config
from skinhub.logging import get_logger, sanitize_for_logging
from skinhub.services.models import Product
from skinhub.services.money import format_money
from skinhub.utils.skin_types import normalize
from .criteria import (
    SORT_LABELS,
    FilterChip,
    FilterCriteria,
    FilterDimension,
    PriceRange,
    SortKey,
    coerce_price_range,
)

logger = get_logger(__name__)


# ==================== CHIPS ====================

def _price_label(price_range: PriceRange) -> str:
    low = format_money(price_range.min) if price_range.min is not None else "Any"
    high = format_money(price_range.max) if price_range.max is not None else "Any"
    return f"Price: {low} - {high}"


def _iter_chips(criteria: FilterCriteria) -> Iterator[FilterChip]:
    for brand in sorted(criteria.brands):
        yield FilterChip(FilterDimension.BRAND, brand, f"Brand: {brand}")
    for category in sorted(criteria.categories):
        yield FilterChip(FilterDimension.CATEGORY, category, f"Category: {category}")
    for skin_type in sorted(criteria.skin_types):
        yield FilterChip(FilterDimension.SKIN_TYPE, skin_type, f"Skin: {skin_type}")
    if criteria.price_range is not None:
        yield FilterChip(FilterDimension.PRICE, criteria.price_range, _price_label(criteria.price_range))
    if criteria.sort_key != SortKey.RELEVANCE:
        label = SORT_LABELS.get(criteria.sort_key, criteria.sort_key.value)
        yield FilterChip(FilterDimension.SORT, criteria.sort_key, label)


class ChipSequence:
    """Lazy chip view over one criteria value; every iteration starts over."""

    def __init__(self, criteria: FilterCriteria):
        self.criteria = criteria

    def __iter__(self) -> Iterator[FilterChip]:
        return _iter_chips(self.criteria)

    def __bool__(self) -> bool:
        return next(iter(self), None) is not None

    def to_list(self) -> list[dict]:
        return [chip.to_dict() for chip in self]


def derive_chips(criteria: FilterCriteria) -> ChipSequence:
    """Chips in brand, category, skinType, price, sort order."""
    return ChipSequence(criteria)


# ==================== FILTERING ====================

def _as_products(values: Iterable[Any]) -> Iterator[Product]:
    """Yield product models, skipping documents that fail validation."""
    for value in values:
        if isinstance(value, Product):
            yield value
            continue
        try:
            yield Product.model_validate(value)
        except ValidationError as e:
            doc_id = value.get("id") if isinstance(value, dict) else None
            logger.warning(
                "Skipping invalid product %s: %d validation error(s)",
                sanitize_for_logging(doc_id),
                e.error_count(),
            )


def effective_price(product: Product) -> Decimal:
    """Lowest orderable variant price, else the product's own price."""
    prices = [v.price for v in product.variants if v.is_orderable]
    return min(prices) if prices else product.price


def _price_matches(product: Product, price_range: PriceRange) -> bool:
    # With variants, a product matches if any orderable variant is in range
    if product.variants:
        return any(price_range.contains(v.price) for v in product.variants if v.is_orderable)
    return price_range.contains(product.price)


def _query_matches(product: Product, query: str) -> bool:
    needle = query.casefold()
    return (
        needle in product.name.casefold()
        or needle in product.brand.casefold()
        or needle in product.description.casefold()
    )


def matches(product: Product, criteria: FilterCriteria) -> bool:
    """True if a product is published and passes every populated dimension."""
    if not product.is_published:
        return False
    if criteria.brands and product.brand not in criteria.brands:
        return False
    if criteria.categories and product.category not in criteria.categories:
        return False
    if criteria.skin_types and not (normalize(product.skin_type) & criteria.skin_types):
        return False
    if criteria.price_range is not None and not _price_matches(product, criteria.price_range):
        return False
    if criteria.query and not _query_matches(product, criteria.query):
        return False
    return True


# ==================== SORTING ====================

def _created_key(product: Product) -> float:
    """Newest first; undated products sink to the end."""
    created = product.created_at
    if created is None:
        return math.inf
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return -created.timestamp()


def sort_products(products: list[Product], sort_key: SortKey) -> list[Product]:
    """Stable sort; equal keys keep catalog order."""
    if sort_key == SortKey.RATING_DESC:
        return sorted(products, key=lambda p: -p.rating)
    if sort_key == SortKey.PRICE_ASC:
        return sorted(products, key=effective_price)
    if sort_key == SortKey.PRICE_DESC:
        return sorted(products, key=effective_price, reverse=True)
    if sort_key == SortKey.NEWEST:
        return sorted(products, key=_created_key)
    if sort_key == SortKey.POPULAR:
        return sorted(products, key=lambda p: -p.review_count)
    if sort_key == SortKey.NAME:
        return sorted(products, key=lambda p: p.name.casefold())
    return list(products)


def apply(products: Iterable[Any], criteria: Optional[FilterCriteria] = None) -> list[Product]:
    """
    Filter, then sort a product snapshot.

    Args:
        products: Product models or raw product documents
        criteria: Active criteria (defaults to no constraints)

    Returns:
        Published products passing all populated dimensions, ordered by
        criteria.sort_key
    """
    criteria = criteria or FilterCriteria()
    filtered = [p for p in _as_products(products) if matches(p, criteria)]
    return sort_products(filtered, criteria.sort_key)


def best_sellers(products: Iterable[Any], limit: Optional[int] = None) -> list[Product]:
    """Published best-sellers by rating, capped for the home page."""
    limit = config.CURATED_LIST_LIMIT if limit is None else limit
    picked = [p for p in _as_products(products) if p.is_published and p.best_seller]
    return sort_products(picked, SortKey.RATING_DESC)[:limit]


def featured(products: Iterable[Any], limit: Optional[int] = None) -> list[Product]:
    """Published featured products in catalog order, capped for the home page."""
    limit = config.CURATED_LIST_LIMIT if limit is None else limit
    return [p for p in _as_products(products) if p.is_published and p.featured][:limit]


def facets(products: Iterable[Any]) -> dict[str, list[str]]:
    """Filter options present among published products."""
    published = [p for p in _as_products(products) if p.is_published]
    skin_types: set[str] = set()
    for product in published:
        skin_types |= normalize(product.skin_type)
    return {
        "brands": sorted({p.brand for p in published if p.brand}),
        "categories": sorted({p.category for p in published if p.category}),
        "skin_types": sorted(skin_types),
    }


@dataclass
class Page:
    items: list[Product]
    page: int
    per_page: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 0


def paginate(products: list[Product], page: int = 1, per_page: Optional[int] = None) -> Page:
    """Slice one page out of an already filtered and sorted list."""
    per_page = config.PRODUCTS_PER_PAGE if not per_page or per_page < 1 else per_page
    page = max(page, 1)
    start = (page - 1) * per_page
    return Page(items=products[start:start + per_page], page=page, per_page=per_page, total=len(products))


# ==================== ENGINE ====================

class CatalogEngine:
    """
    Owns the shopper's FilterCriteria.

    Every mutation swaps in a new immutable criteria value, so readers never
    see a half-applied change. Unknown dimensions and blank values are
    ignored rather than rejected.
    """

    def __init__(self, criteria: Optional[FilterCriteria] = None):
        self._criteria = criteria or FilterCriteria()

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def apply_filter(self, dimension: Any, value: Any) -> FilterCriteria:
        """
        Add a value to a set dimension, or set price range / sort key.

        Applying a value that is already present changes nothing.
        """
        dim = FilterDimension.parse(dimension)
        criteria = self._criteria

        if dim is None:
            logger.debug("Ignoring unknown filter dimension %r", sanitize_for_logging(dimension))
            return criteria

        if dim == FilterDimension.BRAND:
            brand = value.strip() if isinstance(value, str) else ""
            if brand:
                criteria = criteria.with_changes(brands=criteria.brands | {brand})
        elif dim == FilterDimension.CATEGORY:
            category = value.strip() if isinstance(value, str) else ""
            if category:
                criteria = criteria.with_changes(categories=criteria.categories | {category})
        elif dim == FilterDimension.SKIN_TYPE:
            tags = normalize(value)
            if tags:
                criteria = criteria.with_changes(skin_types=criteria.skin_types | tags)
        elif dim == FilterDimension.PRICE:
            price_range = coerce_price_range(value)
            # None clears; anything else that cannot be read leaves the range alone
            if price_range is not None or value is None:
                criteria = criteria.with_changes(price_range=price_range)
        elif dim == FilterDimension.SORT:
            criteria = criteria.with_changes(sort_key=value)

        self._criteria = criteria
        return criteria

    def remove_filter(self, chip: FilterChip) -> FilterCriteria:
        """Remove the criterion behind a chip (price/sort reset to defaults)."""
        criteria = self._criteria
        dim = FilterDimension.parse(chip.dimension)

        if dim == FilterDimension.BRAND:
            criteria = criteria.with_changes(brands=criteria.brands - {chip.value})
        elif dim == FilterDimension.CATEGORY:
            criteria = criteria.with_changes(categories=criteria.categories - {chip.value})
        elif dim == FilterDimension.SKIN_TYPE:
            criteria = criteria.with_changes(skin_types=criteria.skin_types - normalize(chip.value))
        elif dim == FilterDimension.PRICE:
            criteria = criteria.with_changes(price_range=None)
        elif dim == FilterDimension.SORT:
            criteria = criteria.with_changes(sort_key=SortKey.RELEVANCE)

        self._criteria = criteria
        return criteria

    def set_query(self, query: Optional[str]) -> FilterCriteria:
        """Set the free-text search (blank clears it)."""
        self._criteria = self._criteria.with_changes(query=(query or "").strip())
        return self._criteria

    def clear_all(self) -> FilterCriteria:
        self._criteria = FilterCriteria()
        return self._criteria

    def derive_chips(self, criteria: Optional[FilterCriteria] = None) -> ChipSequence:
        return derive_chips(criteria or self._criteria)

    def apply(self, products: Iterable[Any], criteria: Optional[FilterCriteria] = None) -> list[Product]:
        return apply(products, criteria or self._criteria)


__all__ = [
    "CatalogEngine",
    "ChipSequence",
    "Page",
    "apply",
    "best_sellers",
    "derive_chips",
    "effective_price",
    "facets",
    "featured",
    "matches",
    "paginate",
    "sort_products",
]
