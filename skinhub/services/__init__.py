# Services Module
from .catalog_source import ProductSource, get_product_source
from .models import Product, ProductVariant

__all__ = ["Product", "ProductVariant", "ProductSource", "get_product_source"]
