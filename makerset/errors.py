"""
Cart Errors

Centralized error messages and the exceptions raised by cart operations.
Every exception carries a machine-readable ``code`` for the calling UI.
"""

from typing import Optional

# Auth errors
ERROR_LOGIN_REQUIRED = "LOGIN_REQUIRED"

# Catalog data errors
ERROR_PARTS_NOT_CONFIGURED = "Cannot add to cart: Parts not configured for this set"
ERROR_NO_REQUIRED_PARTS = "Cannot add to cart: No required parts configured for this set"

# Stock errors
ERROR_STOCK_VALIDATION_FAILED = "Failed to validate stock availability"
ERROR_STOCK_UNAVAILABLE = "Cannot place order due to stock issues"

# Checkout errors
ERROR_CART_EMPTY = "Cart is empty"


class CartError(Exception):
    """Base error for cart operations."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class LoginRequiredError(CartError):
    """The caller must sign in before adding to the cart."""

    def __init__(self) -> None:
        super().__init__(ERROR_LOGIN_REQUIRED, code="LOGIN_REQUIRED")


class PartsNotConfiguredError(CartError):
    """The set has no parts list."""

    def __init__(self, message: str = ERROR_PARTS_NOT_CONFIGURED) -> None:
        super().__init__(message, code="PARTS_NOT_CONFIGURED")


class NoRequiredPartsError(CartError):
    """Every part of the set is optional."""

    def __init__(self, message: str = ERROR_NO_REQUIRED_PARTS) -> None:
        super().__init__(message, code="NO_REQUIRED_PARTS")


class ProviderConflictError(CartError):
    """The set belongs to a different provider than the items already in the cart."""

    def __init__(self, existing_provider: str, incoming_provider: str) -> None:
        message = (
            "Cannot add items from different providers to the same order. "
            f"Your cart contains items from {existing_provider}. "
            "Please complete your current order or clear your cart before adding "
            f"items from {incoming_provider}."
        )
        super().__init__(message, code="PROVIDER_CONFLICT")
        self.existing_provider = existing_provider
        self.incoming_provider = incoming_provider


class StockValidationError(CartError):
    """The stock validation endpoint could not be reached or answered badly."""

    def __init__(self, message: str = ERROR_STOCK_VALIDATION_FAILED) -> None:
        super().__init__(message, code="STOCK_VALIDATION_FAILED")


class EmptyCartError(CartError):
    """Checkout was attempted with nothing in the cart."""

    def __init__(self, message: str = ERROR_CART_EMPTY) -> None:
        super().__init__(message, code="CART_EMPTY")


class StockUnavailableError(CartError):
    """Stock validation reported at least one item that cannot be fulfilled."""

    def __init__(self, issues: list[str]) -> None:
        message = ERROR_STOCK_UNAVAILABLE + ":\n" + "\n".join(issues)
        super().__init__(message, code="STOCK_UNAVAILABLE")
        self.issues = issues
