"""Services for invoice business logic."""

from .exceptions import (
    InvoicesServiceError,
    InvoiceNotFoundError,
    InvalidInvoiceError,
)
from .ledger import (
    invoice_store,
    LedgerResult,
    create_invoice,
    create_third_party_invoice,
    update_invoice,
    update_invoice_status,
    delete_invoice,
)

__all__ = [
    # Exceptions
    'InvoicesServiceError',
    'InvoiceNotFoundError',
    'InvalidInvoiceError',
    # Ledger
    'invoice_store',
    'LedgerResult',
    'create_invoice',
    'create_third_party_invoice',
    'update_invoice',
    'update_invoice_status',
    'delete_invoice',
]
