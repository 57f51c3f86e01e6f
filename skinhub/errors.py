"""
Common Errors

Error message constants shared by the engines and the HTTP layer, and the
exception types raised by the cart engine.
"""

# Cart errors
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer"
ERROR_OUT_OF_STOCK = "Requested quantity exceeds available stock"
ERROR_EMPTY_PRODUCT_ID = "product_id must be a non-empty string"
ERROR_INVALID_VARIANT_KEY = "variant_key must be a string or None"
ERROR_INVALID_PRICE = "unit_price must be a non-negative number"

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_VARIANT_NOT_FOUND = "Variant not found"
ERROR_PRODUCT_UNAVAILABLE = "Product is not published"

# Generic errors
ERROR_MISSING_SESSION = "X-Session-Id header is required"
ERROR_STORAGE_UNAVAILABLE = "Cart storage unavailable"


class CartError(ValueError):
    """Base class for cart engine failures.

    Raised before any mutation happens, so the cart keeps its prior state.
    """

    code = "cart_error"
    default_message = "Cart operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidQuantity(CartError):
    code = "invalid_quantity"
    default_message = ERROR_INVALID_QUANTITY


class OutOfStock(CartError):
    code = "out_of_stock"
    default_message = ERROR_OUT_OF_STOCK

    def __init__(self, message: str | None = None, requested: int = 0, available: int = 0):
        super().__init__(message or f"{ERROR_OUT_OF_STOCK} (requested {requested}, available {available})")
        self.requested = requested
        self.available = available


class InvalidArgument(CartError):
    code = "invalid_argument"
    default_message = ERROR_EMPTY_PRODUCT_ID
