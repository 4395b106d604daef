"""
Custom exceptions for the catalog.
"""


class CatalogError(Exception):
    """Base exception for catalog errors."""
    pass


class ItemNumberExhaustedError(CatalogError):
    """Raised when no free four digit item number is left in a category."""

    def __init__(self, product, message=None):
        self.product = product
        if message is None:
            message = f"No free item number after '{product.item_number}' for '{product.name}'"
        super().__init__(message)
