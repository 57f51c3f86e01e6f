"""Catalog package: filter criteria, chips, and the filter/sort engine."""
from .criteria import FilterChip, FilterCriteria, FilterDimension, PriceRange, SortKey
from .engine import (
    CatalogEngine,
    ChipSequence,
    Page,
    apply,
    best_sellers,
    derive_chips,
    effective_price,
    facets,
    featured,
    paginate,
)

__all__ = [
    "CatalogEngine",
    "ChipSequence",
    "FilterChip",
    "FilterCriteria",
    "FilterDimension",
    "Page",
    "PriceRange",
    "SortKey",
    "apply",
    "best_sellers",
    "derive_chips",
    "effective_price",
    "facets",
    "featured",
    "paginate",
]
