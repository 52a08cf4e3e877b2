"""
Storefront error taxonomy.

Every error carries a ``message_key`` that the presentation layer turns
into a localized message via ``storefront.messages.get_text``.
Storage failures have no exception type: the cart store logs and
degrades instead of raising.
"""
from typing import Optional


class StorefrontError(Exception):
    message_key = "unexpected_error"


# ---------------------------
# Transient I/O
# ---------------------------
class CatalogUnavailableError(StorefrontError):
    """Network error or non-2xx response from the catalog service."""

    message_key = "catalog_unavailable"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class OrderRejectedError(CatalogUnavailableError):
    """The backend refused the order (4xx)."""

    message_key = "order_failed"


# ---------------------------
# Not found
# ---------------------------
class ProductNotFoundError(StorefrontError):
    message_key = "product_not_found"

    def __init__(self, product_id: str):
        super().__init__(f"product not found: {product_id}")
        self.product_id = product_id


# ---------------------------
# Validation
# ---------------------------
class CartValidationError(StorefrontError):
    message_key = "invalid_cart"


class EmptyCartError(CartValidationError):
    message_key = "empty_cart"

    def __init__(self):
        super().__init__("cart is empty")


class InvalidCartItemError(CartValidationError):
    message_key = "invalid_cart_item"

    def __init__(self, product_id: Optional[str], reason: str):
        super().__init__(f"invalid cart item {product_id!r}: {reason}")
        self.product_id = product_id
        self.reason = reason
