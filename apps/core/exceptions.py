"""
Shared domain exceptions for the ledger apps.

Every app keeps its own ``services/exceptions.py`` hierarchy, but they all
root at :class:`LedgerError` so views and management commands can catch any
business-rule failure in one place.

Exception Hierarchy:
    LedgerError (base)
    ├── NotAuthenticatedError
    ├── NotFoundError
    │   ├── ProjectNotFoundError      (apps.projects)
    │   ├── InvoiceNotFoundError      (apps.invoices)
    │   └── VendorNotFoundError       (apps.vendors)
    ├── LedgerValidationError
    │   ├── InvalidProjectError       (apps.projects)
    │   ├── InvalidInvoiceError       (apps.invoices)
    │   └── InvalidVendorError        (apps.vendors)
    └── BlockedOperationError         (apps.projects)
"""


class LedgerError(Exception):
    """Base exception for all ledger service errors."""
    pass


class NotAuthenticatedError(LedgerError):
    """Raised when a ledger operation is invoked without an owner."""
    pass


class NotFoundError(LedgerError):
    """Raised when an owner-scoped lookup finds nothing."""
    pass


class LedgerValidationError(LedgerError):
    """
    Raised when input fails a precondition before any write.

    ``field`` names the offending input when there is one, so views can
    return a field-keyed error body like DRF serializers do.
    """

    def __init__(self, message, *, field=None):
        super().__init__(message)
        self.field = field


class BlockedOperationError(LedgerError):
    """Raised when an operation is refused because of dependent records."""

    def __init__(self, message, *, reason=''):
        super().__init__(message)
        self.reason = reason
