"""Domain-specific exceptions for invoice services."""

from apps.core.exceptions import LedgerError, NotFoundError, LedgerValidationError


class InvoicesServiceError(LedgerError):
    """Base exception for invoice services."""
    pass


class InvoiceNotFoundError(NotFoundError, InvoicesServiceError):
    """Raised when an invoice does not exist or belongs to another owner."""
    pass


class InvalidInvoiceError(LedgerValidationError, InvoicesServiceError):
    """Raised when invoice input fails validation before any write."""
    pass
