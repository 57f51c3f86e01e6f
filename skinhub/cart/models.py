"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Iterator

from skinhub.services.money import to_decimal, multiply

LineKey = tuple[str, Optional[str]]


@dataclass
class LineItem:
    """One distinct (product, variant) selection in the cart."""
    product_id: str
    variant_key: Optional[str]
    unit_price: Decimal  # Snapshot taken when the line was created
    quantity: int

    def __post_init__(self):
        self.unit_price = to_decimal(self.unit_price)

    @property
    def key(self) -> LineKey:
        return (self.product_id, self.variant_key)

    @property
    def line_total(self) -> Decimal:
        """Total price for all units, unrounded."""
        return multiply(self.unit_price, self.quantity)

    def to_dict(self) -> dict:
        """Flat record for the persistence collaborator."""
        return {
            "product_id": self.product_id,
            "variant_key": self.variant_key,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
        }


@dataclass
class Cart:
    """
    Ordered collection of line items.

    Lines are keyed by (product_id, variant_key) in insertion order.
    Aggregates are computed from the lines on every read.
    """
    lines: dict[LineKey, LineItem] = field(default_factory=dict)

    @property
    def items(self) -> list[LineItem]:
        return list(self.lines.values())

    @property
    def item_count(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.lines.values())

    @property
    def subtotal(self) -> Decimal:
        """Exact sum of unit_price * quantity; round only for display."""
        return sum((item.line_total for item in self.lines.values()), Decimal("0"))

    def get(self, product_id: str, variant_key: Optional[str]) -> Optional[LineItem]:
        return self.lines.get((product_id, variant_key))

    def __iter__(self) -> Iterator[LineItem]:
        return iter(list(self.lines.values()))

    def __len__(self) -> int:
        return len(self.lines)

    def to_list(self) -> list[dict]:
        return [item.to_dict() for item in self.lines.values()]
