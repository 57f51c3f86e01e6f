"""Product Source - supplies product snapshots to the catalog engine."""
import json
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from skinhub import config
from skinhub.logging import get_logger
from .models import Product

logger = get_logger(__name__)


class ProductSource:
    """
    In-memory product collection.

    Keeps catalog order. Hosting apps that read products from a remote
    store replace the contents with set_products() on refresh.
    """

    def __init__(self, products: Optional[Iterable[Any]] = None):
        self._products: list[Product] = []
        if products is not None:
            self.set_products(products)

    def set_products(self, products: Iterable[Any]) -> int:
        """Replace the snapshot; invalid documents are skipped. Returns count loaded."""
        loaded = []
        for raw in products:
            try:
                loaded.append(raw if isinstance(raw, Product) else Product.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid product document: {e.error_count()} error(s)")
        self._products = loaded
        return len(loaded)

    async def get_all(self) -> list[Product]:
        """Current snapshot (all statuses)."""
        return list(self._products)

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "ProductSource":
        """Load a JSON array of product documents."""
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, list):
            raise ValueError(f"Catalog file {path} must contain a JSON array")
        source = cls(data)
        logger.info(f"Loaded {len(source._products)} products from {path}")
        return source


_product_source: Optional[ProductSource] = None


def get_product_source() -> ProductSource:
    """Get ProductSource singleton (loaded from CATALOG_PATH when set)."""
    global _product_source
    if _product_source is None:
        if config.CATALOG_PATH:
            _product_source = ProductSource.from_json_file(config.CATALOG_PATH)
        else:
            _product_source = ProductSource()
    return _product_source
