"""Catalog Models - Pydantic models for products supplied by the catalog."""
from decimal import Decimal
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from skinhub.services.money import to_decimal as _to_decimal

PUBLISHED = "published"
DRAFT = "draft"


class ProductVariant(BaseModel):
    """Purchasable variant of a product (size, shade, ...)."""
    id: str
    product_id: str = Field(default="", alias="productId")
    sku: str = ""
    attributes: dict[str, str] = {}  # e.g. {"size": "50ml"}
    price: Decimal
    original_price: Optional[Decimal] = Field(default=None, alias="originalPrice")
    stock: int = 0
    active: bool = True

    class Config:
        extra = "ignore"
        populate_by_name = True

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("original_price", mode="before")
    @classmethod
    def convert_original_price_to_decimal(cls, v):
        return _to_decimal(v) if v is not None else None

    @property
    def is_orderable(self) -> bool:
        return self.active and self.stock > 0


class Product(BaseModel):
    """Product model.

    Read-only from the engines' point of view. Field aliases accept the
    camelCase documents the catalog store returns.
    """
    id: str
    name: str = ""
    description: str = ""
    brand: str = ""
    category: str = ""
    skin_type: list[str] = Field(default=[], alias="skinType")
    price: Decimal = Decimal("0")
    rating: float = 0.0
    review_count: int = Field(default=0, alias="reviewCount")
    status: str = DRAFT  # draft | published
    featured: bool = False
    best_seller: bool = Field(default=False, alias="bestSeller")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    variants: list[ProductVariant] = []

    class Config:
        extra = "ignore"
        populate_by_name = True

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("skin_type", mode="before")
    @classmethod
    def split_skin_type(cls, v):
        # Older documents store skin types as one comma-separated string
        if isinstance(v, str):
            return [part for part in v.split(",")]
        return v or []

    @property
    def is_published(self) -> bool:
        return self.status == PUBLISHED

    def get_variant(self, variant_id: str | None) -> Optional[ProductVariant]:
        """Find a variant by id."""
        if variant_id is None:
            return None
        return next((v for v in self.variants if v.id == variant_id), None)
