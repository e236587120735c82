"""Vendor management service: CRUD plus fuzzy duplicate-name detection."""

import logging
import re
from typing import List, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from fuzzywuzzy import fuzz

from apps.accounts.models import User
from apps.core.store import OwnerScopedStore
from apps.invoices.models import ThirdPartyInvoice
from apps.vendors.models import Vendor, VendorStatus

from .exceptions import VendorNotFoundError, InvalidVendorError, DuplicateVendorError
from .reconciliation import derive_vendor_totals, ZERO

logger = logging.getLogger(__name__)

vendor_store = OwnerScopedStore(Vendor, not_found=VendorNotFoundError)

EDITABLE_FIELDS = ('name', 'contact_email', 'status')


def normalize_name(name: str) -> str:
    """Lowercase, collapse whitespace and drop punctuation for comparison."""
    name = name.lower().strip()
    name = re.sub(r'\s+', ' ', name)
    name = re.sub(r'[^\w\s-]', '', name)
    return name


def find_similar_vendors(
    *,
    user: User,
    name: str,
    threshold: Optional[int] = None,
    exclude_id=None
) -> List[Tuple[Vendor, int]]:
    """
    Find the owner's vendors whose names look like ``name``.

    Args:
        user: Vendor owner
        name: Candidate vendor name
        threshold: Minimum fuzz.ratio score (defaults to VENDOR_SIMILARITY_THRESHOLD)
        exclude_id: Vendor to leave out (the one being renamed)

    Returns:
        List of (vendor, similarity_score), best match first
    """
    if threshold is None:
        threshold = settings.VENDOR_SIMILARITY_THRESHOLD

    name_norm = normalize_name(name)
    vendors = vendor_store.scoped(getattr(user, 'id', None))
    if exclude_id is not None:
        vendors = vendors.exclude(pk=exclude_id)

    candidates = []
    for vendor in vendors:
        score = fuzz.ratio(name_norm, normalize_name(vendor.name))
        if score >= threshold:
            candidates.append((vendor, score))

    candidates.sort(key=lambda x: x[1], reverse=True)
    return candidates


def _validate_name(name: str) -> str:
    name = (name or '').strip()
    if not name:
        raise InvalidVendorError("Vendor name is required", field='name')
    return name


@transaction.atomic
def create_vendor(
    *,
    user: User,
    name: str,
    contact_email: str = '',
    status: str = VendorStatus.ACTIVE
) -> Vendor:
    """
    Create a vendor. Its total starts from any third-party invoices already
    billed under the same company name.

    Raises:
        InvalidVendorError: If the name is blank
        DuplicateVendorError: If the owner already has a vendor with this name
    """
    owner_id = getattr(user, 'id', None)
    name = _validate_name(name)

    if vendor_store.exists(owner_id, name=name):
        raise DuplicateVendorError(f"Vendor '{name}' already exists", field='name')

    existing = derive_vendor_totals(
        ThirdPartyInvoice.objects.filter(user_id=owner_id, third_party_company=name)
    )
    vendor = vendor_store.create(owner_id, {
        'name': name,
        'contact_email': contact_email,
        'status': status,
        'total_invoiced': existing.get(name, ZERO),
    })

    logger.info("Created vendor %s for user %s", vendor.id, owner_id)
    _invalidate(owner_id)
    return vendor


def get_vendor_by_id(*, user: User, vendor_id) -> Vendor:
    return vendor_store.get(getattr(user, 'id', None), vendor_id)


def list_vendors(*, user: User, status: Optional[str] = None, search: Optional[str] = None):
    """Owner's vendors by name, optionally filtered by status and a name/email search."""
    vendors = vendor_store.scoped(getattr(user, 'id', None)).order_by('name')
    if status:
        vendors = vendors.filter(status=status)
    if search:
        vendors = vendors.filter(Q(name__icontains=search) | Q(contact_email__icontains=search))
    return vendors


@transaction.atomic
def update_vendor(*, user: User, vendor_id, **changes) -> Vendor:
    """
    Edit name, contact email or status.

    A rename re-derives the total from invoices billed under the new name.

    Raises:
        VendorNotFoundError: If the vendor is missing or not the user's
        InvalidVendorError: On unknown fields or a blank name
        DuplicateVendorError: If renaming onto another vendor's name
    """
    owner_id = getattr(user, 'id', None)

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidVendorError(f"Cannot update vendor fields: {', '.join(sorted(unknown))}")

    vendor = vendor_store.lock(owner_id, vendor_id)

    if 'name' in changes:
        changes['name'] = _validate_name(changes['name'])
        if changes['name'] != vendor.name:
            if vendor_store.scoped(owner_id).filter(name=changes['name']).exclude(pk=vendor.pk).exists():
                raise DuplicateVendorError(f"Vendor '{changes['name']}' already exists", field='name')
            totals = derive_vendor_totals(
                ThirdPartyInvoice.objects.filter(user_id=owner_id, third_party_company=changes['name'])
            )
            changes['total_invoiced'] = totals.get(changes['name'], ZERO)

    vendor = vendor_store.save_fields(vendor, changes)
    _invalidate(owner_id)
    return vendor


@transaction.atomic
def delete_vendor(*, user: User, vendor_id) -> None:
    """
    Delete a vendor record. Invoices keep their company name, so a later
    reconciliation recreates the vendor while invoices still reference it.
    """
    owner_id = getattr(user, 'id', None)
    vendor_store.delete(owner_id, vendor_id)
    logger.info("Deleted vendor %s", vendor_id)
    _invalidate(owner_id)


def get_vendor_invoices(*, user: User, vendor_id):
    """Third-party invoices billed under the vendor's name, newest first."""
    vendor = get_vendor_by_id(user=user, vendor_id=vendor_id)
    return (
        ThirdPartyInvoice.objects
        .filter(user_id=vendor.user_id, third_party_company=vendor.name)
        .select_related('project')
        .order_by('-date', '-created_at')
    )


def _invalidate(owner_id):
    from apps.workspace.cache import invalidate_workspace
    transaction.on_commit(lambda: invalidate_workspace(owner_id))
