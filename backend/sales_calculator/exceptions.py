"""
Domain errors raised by the service layer.

Routes translate these into HTTP responses; the CLI prints them. Each error
carries an optional ``details`` dict for structured context.
"""


class SalesCalculatorError(Exception):
    """Base class for service-layer errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class NotFoundError(SalesCalculatorError):
    """Operation targets an id that does not exist."""


class EmptyCartError(SalesCalculatorError):
    """Checkout attempted with no cart lines."""


class InsufficientStockError(SalesCalculatorError):
    """Checkout would drive quantity on hand below zero while oversell is off."""


class StorageError(SalesCalculatorError):
    """The underlying database operation failed."""
