# backend/services/errors.py


class StoreError(Exception):
    """Base class for every error raised by the order placement core."""

    reason = "Error"
    message = "Request could not be completed"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


# Cart errors

class CartError(StoreError):
    pass


class InvalidQuantity(CartError):
    reason = "InvalidQuantity"
    message = "Please enter a positive quantity"


class CartFull(CartError):
    reason = "CartFull"
    message = "Cart can hold at most 20 items in total"


class LineLimitExceeded(CartError):
    reason = "LineLimitExceeded"
    message = "Max 10 units per product"


# Checkout errors

class EmptyCart(StoreError):
    reason = "EmptyCart"
    message = "Cart is empty"


class UnknownProduct(StoreError):
    reason = "UnknownProduct"
    message = "Invalid product in cart"


class InsufficientStock(StoreError):
    reason = "InsufficientStock"
    message = "Insufficient stock"

    def __init__(self, product_name=None, available=None):
        if product_name:
            text = f"Insufficient stock for {product_name}"
        elif available is not None:
            text = f"Insufficient stock ({available} available)"
        else:
            text = None
        super().__init__(text)
        self.product_name = product_name
        self.available = available


class InsufficientFunds(StoreError):
    reason = "InsufficientFunds"
    message = "Insufficient funds, please top up!"


class FatalInconsistency(StoreError):
    """Stock or balance would go negative after validation passed.

    Signals a broken locking contract, never a user error.
    """

    reason = "FatalInconsistency"
    message = "Inventory or balance would become negative"
