"""
Custom exceptions for planning.
"""


class PlanningError(Exception):
    """Base exception for planning errors."""
    pass


class InvalidProductionCountError(PlanningError):
    """Raised when a production count is missing, zero or negative."""

    def __init__(self, product, production_count, message=None):
        self.product = product
        self.production_count = production_count
        if message is None:
            product_name = getattr(product, 'name', product)
            message = f"Production count for '{product_name}' must be positive, got {production_count!r}"
        super().__init__(message)


class SnapshotError(PlanningError):
    """Raised when a schedule snapshot cannot be built from the given products."""
    pass
