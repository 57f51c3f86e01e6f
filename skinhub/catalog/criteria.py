"""Filter/sort criteria types for the product listing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from skinhub.logging import get_logger, sanitize_for_logging
from skinhub.services.money import parse_price

logger = get_logger(__name__)


class SortKey(str, Enum):
    """Listing order."""
    RELEVANCE = "relevance"  # catalog order
    RATING_DESC = "rating-desc"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NEWEST = "newest"
    POPULAR = "popular"  # review count
    NAME = "name"

    @classmethod
    def parse(cls, value: Any) -> "SortKey":
        """Parse a sort key; unknown values fall back to RELEVANCE."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = SORT_KEY_ALIASES.get(key, key)
            try:
                return cls(key)
            except ValueError:
                pass
        logger.warning("Unknown sort key %r, using relevance", sanitize_for_logging(value))
        return cls.RELEVANCE


# Legacy query-string values used by storefront links
SORT_KEY_ALIASES: dict[str, str] = {
    "rating": SortKey.RATING_DESC.value,
    "price-low": SortKey.PRICE_ASC.value,
    "price-high": SortKey.PRICE_DESC.value,
}

SORT_LABELS: dict[SortKey, str] = {
    SortKey.RATING_DESC: "Rating",
    SortKey.PRICE_ASC: "Price: Low to High",
    SortKey.PRICE_DESC: "Price: High to Low",
    SortKey.NEWEST: "Newest",
    SortKey.POPULAR: "Popular",
    SortKey.NAME: "Name",
}


class FilterDimension(str, Enum):
    BRAND = "brand"
    CATEGORY = "category"
    SKIN_TYPE = "skinType"
    PRICE = "price"
    SORT = "sort"

    @classmethod
    def parse(cls, value: Any) -> Optional["FilterDimension"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# Chip display order
DIMENSION_ORDER = (
    FilterDimension.BRAND,
    FilterDimension.CATEGORY,
    FilterDimension.SKIN_TYPE,
    FilterDimension.PRICE,
    FilterDimension.SORT,
)


@dataclass(frozen=True)
class PriceRange:
    """Inclusive price bounds; None means open on that side."""
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None

    @classmethod
    def of(cls, min_price: Any = None, max_price: Any = None) -> Optional["PriceRange"]:
        """
        Build a range from raw bounds.

        Blank or invalid bounds are treated as open. Reversed bounds are
        swapped. Returns None when both sides are open.
        """
        low = parse_price(min_price) if min_price not in (None, "") else None
        high = parse_price(max_price) if max_price not in (None, "") else None
        if low is None and high is None:
            return None
        if low is not None and high is not None and low > high:
            low, high = high, low
        return cls(min=low, max=high)

    def contains(self, price: Decimal) -> bool:
        if self.min is not None and price < self.min:
            return False
        if self.max is not None and price > self.max:
            return False
        return True


PriceRangeInput = Union[PriceRange, tuple, list, dict, None]


def coerce_price_range(value: PriceRangeInput) -> Optional[PriceRange]:
    """Accept a PriceRange, a (min, max) pair or a {"min", "max"} mapping."""
    if value is None or isinstance(value, PriceRange):
        return value
    if isinstance(value, dict):
        return PriceRange.of(value.get("min"), value.get("max"))
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return PriceRange.of(value[0], value[1])
    return None


@dataclass(frozen=True)
class FilterCriteria:
    """
    Active narrowing/ordering intent.

    Values inside one dimension are OR-combined, populated dimensions are
    AND-combined, and an empty dimension imposes no constraint.
    """
    brands: frozenset = field(default_factory=frozenset)
    categories: frozenset = field(default_factory=frozenset)
    skin_types: frozenset = field(default_factory=frozenset)
    price_range: Optional[PriceRange] = None
    sort_key: SortKey = SortKey.RELEVANCE
    query: str = ""

    def __post_init__(self):
        # Raw strings are parsed once here; unknown keys become RELEVANCE
        object.__setattr__(self, "sort_key", SortKey.parse(self.sort_key))

    @property
    def is_default(self) -> bool:
        return self == FilterCriteria()

    def with_changes(self, **changes) -> "FilterCriteria":
        return replace(self, **changes)


@dataclass(frozen=True)
class FilterChip:
    """Removable display pill for one active constraint value."""
    dimension: FilterDimension
    value: Union[str, PriceRange, SortKey]
    label: str

    def to_dict(self) -> dict:
        if isinstance(self.value, PriceRange):
            value = {
                "min": str(self.value.min) if self.value.min is not None else None,
                "max": str(self.value.max) if self.value.max is not None else None,
            }
        elif isinstance(self.value, SortKey):
            value = self.value.value
        else:
            value = self.value
        return {"type": self.dimension.value, "value": value, "label": self.label}
