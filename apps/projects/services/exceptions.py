"""Domain-specific exceptions for project services."""

from apps.core.exceptions import (
    LedgerError,
    NotFoundError,
    LedgerValidationError,
    BlockedOperationError as _BlockedOperationError,
)


class ProjectsServiceError(LedgerError):
    """Base exception for project services."""
    pass


class ProjectNotFoundError(NotFoundError, ProjectsServiceError):
    """Raised when a project does not exist or belongs to another owner."""
    pass


class InvalidProjectError(LedgerValidationError, ProjectsServiceError):
    """Raised when project input fails validation."""
    pass


class BlockedOperationError(_BlockedOperationError, ProjectsServiceError):
    """Raised when a project cannot be deleted because invoices reference it."""

    def __init__(self, message, *, reason='', invoice_count=0):
        super().__init__(message, reason=reason)
        self.invoice_count = invoice_count
