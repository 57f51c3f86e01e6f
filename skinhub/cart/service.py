"""Cart manager: line-item state machine with serialized mutations."""
import threading
import time
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from skinhub import config
from skinhub.errors import (
    ERROR_EMPTY_PRODUCT_ID,
    ERROR_INVALID_PRICE,
    ERROR_INVALID_VARIANT_KEY,
    InvalidArgument,
    InvalidQuantity,
    OutOfStock,
)
from skinhub.logging import get_logger, sanitize_for_logging
from skinhub.services.money import parse_price, round_money
from .models import Cart, LineItem

logger = get_logger(__name__)


@dataclass(frozen=True)
class RestoreResult:
    """Outcome of CartManager.restore()."""
    restored: int
    skipped: int


def _check_product_id(product_id: Any) -> str:
    if not isinstance(product_id, str) or not product_id.strip():
        raise InvalidArgument(ERROR_EMPTY_PRODUCT_ID)
    return product_id


def _check_variant_key(variant_key: Any) -> Optional[str]:
    # "" and None both mean "no variant"
    if variant_key is None or variant_key == "":
        return None
    if not isinstance(variant_key, str):
        raise InvalidArgument(ERROR_INVALID_VARIANT_KEY)
    return variant_key


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _check_stock_limit(stock_limit: Any) -> Optional[int]:
    if stock_limit is None:
        return None
    if isinstance(stock_limit, bool) or not isinstance(stock_limit, int) or stock_limit < 0:
        raise InvalidArgument("stock_limit must be a non-negative integer")
    return stock_limit


class CartManager:
    """
    Owns one shopper's cart.

    Every mutation validates its arguments first and then runs inside a
    single critical section, so concurrent add_item calls on the same line
    never lose an increment and a failed call leaves the cart untouched.
    Persistence is the caller's job: see serialize() / restore().
    """

    def __init__(self, cart: Optional[Cart] = None):
        self._cart = cart if cart is not None else Cart()
        self._lock = threading.RLock()

    # ==================== MUTATIONS ====================

    def add_item(
        self,
        product_id: str,
        variant_key: Optional[str],
        unit_price: Any,
        quantity: int = 1,
        stock_limit: Optional[int] = None,
    ) -> LineItem:
        """
        Add units of a product/variant.

        An existing line for the same (product_id, variant_key) gets its
        quantity increased; its unit price snapshot is kept.

        Raises:
            InvalidArgument: empty product_id, bad variant key or price
            InvalidQuantity: quantity is not a positive integer
            OutOfStock: resulting quantity would exceed stock_limit
        """
        product_id = _check_product_id(product_id)
        variant_key = _check_variant_key(variant_key)
        if not _is_positive_int(quantity):
            raise InvalidQuantity()
        price = parse_price(unit_price)
        if price is None:
            raise InvalidArgument(ERROR_INVALID_PRICE)
        stock_limit = _check_stock_limit(stock_limit)

        with self._lock:
            existing = self._cart.get(product_id, variant_key)
            new_quantity = quantity + (existing.quantity if existing else 0)
            if stock_limit is not None and new_quantity > stock_limit:
                raise OutOfStock(requested=new_quantity, available=stock_limit)

            if existing:
                existing.quantity = new_quantity
                line = existing
            else:
                line = LineItem(
                    product_id=product_id,
                    variant_key=variant_key,
                    unit_price=price,
                    quantity=quantity,
                )
                self._cart.lines[line.key] = line

            logger.debug(
                "Cart add: product=%s variant=%s qty=%d",
                sanitize_for_logging(product_id),
                sanitize_for_logging(variant_key),
                line.quantity,
            )
            return replace(line)

    def update_quantity(
        self,
        product_id: str,
        variant_key: Optional[str],
        new_quantity: int,
        stock_limit: Optional[int] = None,
    ) -> Optional[LineItem]:
        """
        Set a line's quantity directly (0 or less = remove).

        Returns:
            The updated line, or None if the line was removed or never existed
        """
        product_id = _check_product_id(product_id)
        variant_key = _check_variant_key(variant_key)
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int):
            raise InvalidQuantity()
        if new_quantity <= 0:
            self.remove_item(product_id, variant_key)
            return None
        stock_limit = _check_stock_limit(stock_limit)
        if stock_limit is not None and new_quantity > stock_limit:
            raise OutOfStock(requested=new_quantity, available=stock_limit)

        with self._lock:
            line = self._cart.get(product_id, variant_key)
            if line is None:
                return None
            line.quantity = new_quantity
            return replace(line)

    def remove_item(self, product_id: str, variant_key: Optional[str]) -> bool:
        """Delete a line. Removing an absent line is a no-op (returns False)."""
        product_id = _check_product_id(product_id)
        variant_key = _check_variant_key(variant_key)
        with self._lock:
            return self._cart.lines.pop((product_id, variant_key), None) is not None

    def clear(self) -> None:
        """Empty the cart."""
        with self._lock:
            self._cart.lines.clear()

    # ==================== READS ====================

    def items(self) -> list[LineItem]:
        """Snapshot of the lines in insertion order."""
        with self._lock:
            return [replace(line) for line in self._cart]

    def get_item(self, product_id: str, variant_key: Optional[str] = None) -> Optional[LineItem]:
        with self._lock:
            line = self._cart.get(product_id, _check_variant_key(variant_key))
            return replace(line) if line else None

    def get_item_count(self) -> int:
        """Sum of quantities (badge count)."""
        with self._lock:
            return self._cart.item_count

    def get_subtotal(self) -> Decimal:
        """Exact sum of unit_price * quantity (not rounded)."""
        with self._lock:
            return self._cart.subtotal

    def is_empty(self) -> bool:
        with self._lock:
            return len(self._cart) == 0

    def summary(self) -> dict:
        """Cart state for API responses."""
        with self._lock:
            return {
                "is_empty": len(self._cart) == 0,
                "items": self._cart.to_list(),
                "item_count": self._cart.item_count,
                "subtotal": str(round_money(self._cart.subtotal)),
            }

    # ==================== PERSISTENCE ====================

    def serialize(self) -> list[dict]:
        """Flat list of line records (product_id, variant_key, unit_price, quantity)."""
        with self._lock:
            return self._cart.to_list()

    def restore(self, snapshot: Optional[Iterable[Any]]) -> RestoreResult:
        """
        Replace the cart with the lines in a snapshot.

        Malformed records are skipped and counted, never raised. Records
        repeating a (product_id, variant_key) pair are merged by summing
        their quantities.
        """
        if snapshot is None:
            records: list = []
        elif isinstance(snapshot, (list, tuple)):
            records = list(snapshot)
        else:
            logger.warning("Cart snapshot is not a list (%s); restoring empty cart", type(snapshot).__name__)
            with self._lock:
                self._cart.lines.clear()
            return RestoreResult(restored=0, skipped=1)

        lines: dict = {}
        skipped = 0
        for record in records:
            line = self._parse_record(record)
            if line is None:
                skipped += 1
                continue
            if line.key in lines:
                lines[line.key].quantity += line.quantity
            else:
                lines[line.key] = line

        with self._lock:
            self._cart.lines = lines

        if skipped:
            logger.warning("Skipped %d malformed cart record(s) on restore", skipped)
        return RestoreResult(restored=len(lines), skipped=skipped)

    @staticmethod
    def _parse_record(record: Any) -> Optional[LineItem]:
        if not isinstance(record, dict):
            return None
        product_id = record.get("product_id")
        if not isinstance(product_id, str) or not product_id.strip():
            return None
        variant_key = record.get("variant_key")
        if variant_key == "":
            variant_key = None
        if variant_key is not None and not isinstance(variant_key, str):
            return None
        quantity = record.get("quantity")
        if not _is_positive_int(quantity):
            return None
        price = parse_price(record.get("unit_price"))
        if price is None:
            return None
        return LineItem(product_id=product_id, variant_key=variant_key, unit_price=price, quantity=quantity)


class CartRegistry:
    """
    Per-session CartManager instances for the HTTP layer.

    A session untouched for idle_ttl seconds is evicted on the next access,
    matching the TTL of the stored cart.
    """

    def __init__(self, idle_ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.idle_ttl = config.CART_TTL_SECONDS if idle_ttl is None else idle_ttl
        self._clock = clock
        self._carts: dict[str, CartManager] = {}
        self._last_access: dict[str, float] = {}
        self._lock = threading.Lock()

    def _evict_idle(self, now: float) -> None:
        expired = [sid for sid, seen in self._last_access.items() if now - seen > self.idle_ttl]
        for sid in expired:
            del self._carts[sid]
            del self._last_access[sid]
        if expired:
            logger.debug("Evicted %d idle cart session(s)", len(expired))

    def get(self, session_id: str) -> CartManager:
        """Get the session's cart, creating an empty one on first use."""
        return self.get_or_set(session_id, None)

    def get_or_set(self, session_id: str, manager: Optional[CartManager]) -> CartManager:
        """
        Return the session's cart, registering manager if there is none.

        An already registered cart is returned and manager is discarded.
        """
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            existing = self._carts.get(session_id)
            if existing is None:
                existing = manager if manager is not None else CartManager()
                self._carts[session_id] = existing
            self._last_access[session_id] = now
            return existing

    def has(self, session_id: str) -> bool:
        with self._lock:
            self._evict_idle(self._clock())
            return session_id in self._carts

    def drop(self, session_id: str) -> None:
        with self._lock:
            self._carts.pop(session_id, None)
            self._last_access.pop(session_id, None)


_cart_registry: Optional[CartRegistry] = None


def get_cart_registry() -> CartRegistry:
    """Get the process-wide CartRegistry."""
    global _cart_registry
    if _cart_registry is None:
        _cart_registry = CartRegistry()
    return _cart_registry


__all__ = ["CartManager", "CartRegistry", "RestoreResult", "get_cart_registry"]
