"""
API Pydantic Models

Request bodies shared by the storefront endpoints.
"""
from pydantic import BaseModel


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: str
    variant_id: str | None = None
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    product_id: str
    variant_id: str | None = None
    quantity: int = 1  # 0 removes the line
