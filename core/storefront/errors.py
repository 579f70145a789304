"""
Storefront Workflows - Exceptions
=================================
Workflow validation errors. These are NOT authorization denials:
denials flow through core.access.exceptions.AccessDenied.
"""

from __future__ import annotations


class StorefrontError(Exception):
    """Base error for storefront workflows."""

    code = "STOREFRONT_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidQuantity(StorefrontError):
    code = "INVALID_QUANTITY"

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}.")


class EmptyCart(StorefrontError):
    code = "EMPTY_CART"

    def __init__(self):
        super().__init__("Cannot place an order from an empty cart.")


class InvalidShippingAddress(StorefrontError):
    code = "INVALID_SHIPPING_ADDRESS"

    def __init__(self):
        super().__init__("A shipping address is required.")


class InvalidRating(StorefrontError):
    code = "INVALID_RATING"

    def __init__(self, rating):
        self.rating = rating
        super().__init__(f"Rating must be an integer between 1 and 5, got {rating!r}.")


class DuplicateReview(StorefrontError):
    code = "DUPLICATE_REVIEW"

    def __init__(self, book_id):
        self.book_id = book_id
        super().__init__(f"Book '{book_id}' has already been reviewed by this principal.")


class InvalidOrderStatus(StorefrontError):
    code = "INVALID_ORDER_STATUS"

    def __init__(self, status):
        self.status = status
        super().__init__(f"Order status '{status}' is not a known status.")


class InvalidOrderTransition(StorefrontError):
    code = "INVALID_ORDER_TRANSITION"

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Order status cannot move from '{current}' to '{requested}'."
        )


class InvalidRole(StorefrontError):
    code = "INVALID_ROLE"

    def __init__(self, role):
        self.role = role
        super().__init__(f"Role '{role}' is not a known role.")
