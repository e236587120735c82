"""Domain-specific exceptions for vendor services."""

from apps.core.exceptions import LedgerError, NotFoundError, LedgerValidationError


class VendorsServiceError(LedgerError):
    """Base exception for vendor services."""
    pass


class VendorNotFoundError(NotFoundError, VendorsServiceError):
    """Raised when a vendor does not exist or belongs to another owner."""
    pass


class InvalidVendorError(LedgerValidationError, VendorsServiceError):
    """Raised when vendor input fails validation."""
    pass


class DuplicateVendorError(InvalidVendorError):
    """Raised when a vendor with the same name already exists."""
    pass
