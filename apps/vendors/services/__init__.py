"""Services for vendor business logic."""

from .exceptions import (
    VendorsServiceError,
    VendorNotFoundError,
    InvalidVendorError,
    DuplicateVendorError,
)
from .reconciliation import (
    ReconciliationReport,
    derive_vendor_totals,
    reconcile_vendor_totals,
    apply_third_party_amount,
)
from .vendor_management import (
    vendor_store,
    normalize_name,
    find_similar_vendors,
    create_vendor,
    get_vendor_by_id,
    list_vendors,
    update_vendor,
    delete_vendor,
    get_vendor_invoices,
)

__all__ = [
    # Exceptions
    'VendorsServiceError',
    'VendorNotFoundError',
    'InvalidVendorError',
    'DuplicateVendorError',
    # Reconciliation
    'ReconciliationReport',
    'derive_vendor_totals',
    'reconcile_vendor_totals',
    'apply_third_party_amount',
    # Vendor management
    'vendor_store',
    'normalize_name',
    'find_similar_vendors',
    'create_vendor',
    'get_vendor_by_id',
    'list_vendors',
    'update_vendor',
    'delete_vendor',
    'get_vendor_invoices',
]
