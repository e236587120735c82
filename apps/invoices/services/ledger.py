"""
Budget ledger.

Every invoice write and the matching change to the owning project's running
totals (``invoiced``, ``invoice_count`` and, on split projects, the partition
total for the invoice type) happen in one ``transaction.atomic`` block, so a
project's totals always equal the sum over its invoices.

Totals are moved with ``F()`` expressions. An update that matches no project
row means the project disappeared after the precondition check; on create
that is logged and the invoice rolled back, on delete the invoice is removed
anyway and the skipped adjustment is logged.

Example::

    result = create_invoice(
        user=user,
        project_id=project.id,
        invoice_number='INV-001',
        amount=Decimal('300.00'),
        date=date.today(),
    )
    result.project.invoiced        # Decimal('300.00')
    result.budget_check.exceeds    # advisory only
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.accounts.models import User
from apps.core.store import OwnerScopedStore
from apps.projects.models import Project
from apps.projects.services import (
    project_store,
    ProjectNotFoundError,
    BudgetCheck,
    check_budget,
    resolve_po,
)
from apps.vendors.services import apply_third_party_amount
from apps.invoices.models import (
    Invoice,
    InvoiceStatus,
    InvoiceType,
    UI_STATUSES,
    THIRD_PARTY_PREFIX,
)

from .exceptions import InvoiceNotFoundError, InvalidInvoiceError

logger = logging.getLogger(__name__)

invoice_store = OwnerScopedStore(Invoice, not_found=InvoiceNotFoundError)

ZERO = Decimal('0.00')
CENT = Decimal('0.01')

EDITABLE_FIELDS = (
    'invoice_number',
    'amount',
    'date',
    'description',
    'status',
    'type',
    'po_number',
    'third_party_company',
    'third_party_invoice_number',
    'third_party_amount',
)


@dataclass(frozen=True)
class LedgerResult:
    invoice: Invoice
    project: Optional[Project]
    budget_check: Optional[BudgetCheck] = None


# =============================================================================
# Helpers
# =============================================================================

def _owner_id(user):
    return getattr(user, 'id', None)


def _invalidate(user_id):
    from apps.workspace.cache import invalidate_workspace
    transaction.on_commit(lambda: invalidate_workspace(user_id))


def _to_amount(value, field='amount') -> Decimal:
    if value is None or value == '':
        raise InvalidInvoiceError("Amount is required", field=field)
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInvoiceError(f"Invalid amount: {value}", field=field)
    if not amount.is_finite() or amount < 0:
        raise InvalidInvoiceError("Amount cannot be negative", field=field)
    # Same precision as the column, so row and project delta agree
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _validate_type(project: Project, invoice_type):
    if invoice_type in (None, ''):
        if project.is_split:
            raise InvalidInvoiceError(
                "Invoice type (hardware or service) is required for split-budget projects",
                field='type'
            )
        return None
    if invoice_type not in InvoiceType.values:
        raise InvalidInvoiceError(f"Invalid invoice type: {invoice_type}", field='type')
    return invoice_type


def _validate_status(status):
    if status in (None, ''):
        return InvoiceStatus.PENDING
    if status not in InvoiceStatus.values:
        raise InvalidInvoiceError(f"Invalid status: {status}", field='status')
    return status


def _deltas(project: Project, amount: Decimal, invoice_type, count: int = 0) -> dict:
    """Field -> delta for moving ``amount`` (and ``count``) onto ``project``."""
    deltas = {'invoiced': amount}
    if count:
        deltas['invoice_count'] = count
    partition = project.partition_fields(invoice_type)
    if partition:
        _, invoiced_field = partition
        deltas[invoiced_field] = deltas.get(invoiced_field, ZERO) + amount
    return deltas


def _apply_to_project(project_id, deltas: dict) -> int:
    """Add ``deltas`` to the project row; returns the number of rows updated."""
    updates = {field: F(field) + delta for field, delta in deltas.items() if delta}
    if not updates:
        return Project.objects.filter(pk=project_id).count()
    return Project.objects.filter(pk=project_id).update(updated_at=timezone.now(), **updates)


def _vendor_share(invoice: Optional[Invoice]):
    """(company, amount) the invoice contributes to a vendor total, or None."""
    if invoice is None or not invoice.third_party_company:
        return None
    return invoice.third_party_company, invoice.third_party_amount or ZERO


def _vendor_adjustments(before, after) -> dict:
    """
    Company -> delta between two vendor shares of the same invoice.

    A company newly named by the invoice is kept even with a zero delta so
    its vendor record gets created.
    """
    adjustments = {}
    for share, sign in ((before, -1), (after, 1)):
        if share is not None:
            company, amount = share
            adjustments[company] = adjustments.get(company, ZERO) + sign * amount
    gained = after[0] if after is not None and (before is None or before[0] != after[0]) else None
    return {
        company: delta for company, delta in adjustments.items()
        if delta or company == gained
    }


def _apply_vendor_adjustments(user, adjustments: dict):
    for company, delta in adjustments.items():
        apply_third_party_amount(user=user, company=company, delta=delta)


# =============================================================================
# Create
# =============================================================================

@transaction.atomic
def create_invoice(
    *,
    user: User,
    project_id,
    invoice_number: str,
    amount,
    date,
    description: str = '',
    status: Optional[str] = None,
    type: Optional[str] = None,
    po_number: Optional[str] = None,
    third_party: Optional[dict] = None
) -> LedgerResult:
    """
    Record an invoice against a project and add it to the project's totals.

    Over-budget amounts are allowed; ``budget_check`` in the result reports
    the overrun. When ``po_number`` is None the project's default PO is
    filled in, unless several POs are eligible and the caller must choose.

    Args:
        user: Owner
        project_id: Project the invoice bills against
        invoice_number: Invoice number, required
        amount: Non-negative amount
        date: Invoice date
        description: Optional description
        status: Defaults to pending
        type: 'hardware' or 'service'; required on split projects
        po_number: PO number, or None to resolve from the project
        third_party: Optional {'company', 'invoice_number', 'amount'} for
            invoices passed through from a vendor

    Returns:
        LedgerResult with the invoice, the refreshed project and the
        advisory budget check

    Raises:
        NotAuthenticatedError: If user is None
        ProjectNotFoundError: If the project is missing or not the user's
        InvalidInvoiceError: On missing number, bad amount/type/status or an
            ambiguous PO
    """
    owner_id = _owner_id(user)
    project = project_store.get(owner_id, project_id)

    invoice_number = (invoice_number or '').strip()
    if not invoice_number:
        raise InvalidInvoiceError("Invoice number is required", field='invoice_number')
    amount = _to_amount(amount)
    invoice_type = _validate_type(project, type)
    status = _validate_status(status)

    if po_number is None:
        resolution = resolve_po(project, invoice_type)
        if resolution.requires_choice:
            numbers = ', '.join(option['number'] for option in resolution.options)
            raise InvalidInvoiceError(
                f"Several PO numbers are available, choose one: {numbers}",
                field='po_number'
            )
        po_number = resolution.default

    third_party_fields = {}
    if third_party:
        company = (third_party.get('company') or '').strip()
        if not company:
            raise InvalidInvoiceError("Third-party company is required", field='company')
        tp_amount = third_party.get('amount')
        third_party_fields = {
            'third_party_company': company,
            'third_party_invoice_number': third_party.get('invoice_number') or '',
            'third_party_amount': amount if tp_amount is None else _to_amount(tp_amount),
        }

    budget_check = check_budget(project=project, amount=amount, invoice_type=invoice_type)

    invoice = invoice_store.create(owner_id, {
        'project': project,
        'project_name': project.name,
        'invoice_number': invoice_number,
        'amount': amount,
        'date': date,
        'description': description or '',
        'status': status,
        'type': invoice_type,
        'po_number': po_number or '',
        **third_party_fields,
    })

    if not _apply_to_project(project.id, _deltas(project, amount, invoice_type, count=1)):
        logger.error(
            "Project %s vanished before invoice %s was added to its totals; rolling back",
            project.id, invoice.id
        )
        raise ProjectNotFoundError(f"Project with ID {project.id} not found")

    _apply_vendor_adjustments(user, _vendor_adjustments(None, _vendor_share(invoice)))

    project.refresh_from_db()
    logger.info(
        "Created invoice %s (%s) on project %s: amount=%s",
        invoice.id, invoice.invoice_number, project.id, amount
    )
    if budget_check.exceeds:
        logger.info(
            "Invoice %s exceeds remaining %s budget of project %s (remaining %s)",
            invoice.id, budget_check.partition or 'total', project.id, budget_check.remaining
        )

    _invalidate(owner_id)
    return LedgerResult(invoice=invoice, project=project, budget_check=budget_check)


def create_third_party_invoice(
    *,
    user: User,
    project_id,
    company: str,
    invoice_number: str,
    date,
    amount=None,
    description: str = '',
    client_invoice_id=None,
    type: Optional[str] = None,
    po_number: Optional[str] = None
) -> LedgerResult:
    """
    Record a vendor's invoice as a pass-through invoice on a project.

    The stored invoice number is ``TP-<invoice_number>``; the vendor's own
    number is kept in ``third_party_invoice_number``. ``amount`` defaults to
    the amount of ``client_invoice_id`` when given (pre-fill only, the link
    is not stored). The vendor total grows by the amount, creating the vendor
    if needed.

    Raises:
        InvoiceNotFoundError: If client_invoice_id is not one of the user's invoices
        plus everything create_invoice raises
    """
    invoice_number = (invoice_number or '').strip()
    if not invoice_number:
        raise InvalidInvoiceError("Invoice number is required", field='invoice_number')

    if amount is None and client_invoice_id is not None:
        amount = invoice_store.get(_owner_id(user), client_invoice_id).amount

    return create_invoice(
        user=user,
        project_id=project_id,
        invoice_number=f"{THIRD_PARTY_PREFIX}{invoice_number}",
        amount=amount,
        date=date,
        description=description,
        status=InvoiceStatus.PENDING,
        type=type,
        po_number=po_number,
        third_party={
            'company': company,
            'invoice_number': invoice_number,
            'amount': amount,
        },
    )


# =============================================================================
# Update
# =============================================================================

@transaction.atomic
def update_invoice(*, user: User, invoice_id, **patch) -> LedgerResult:
    """
    Apply a partial change to an invoice.

    An amount change moves the difference onto the project's totals. A type
    change on a split project moves the amount between partitions. Status,
    description, date and PO edits leave the totals alone. Third-party amount
    or company edits adjust the affected vendor totals.

    Raises:
        InvoiceNotFoundError: If the invoice is missing or not the user's
        InvalidInvoiceError: On unknown fields or invalid values
    """
    owner_id = _owner_id(user)

    unknown = set(patch) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidInvoiceError(f"Cannot update invoice fields: {', '.join(sorted(unknown))}")

    invoice = invoice_store.lock(owner_id, invoice_id)
    before = _vendor_share(invoice)
    project = Project.objects.select_for_update().filter(pk=invoice.project_id).first()

    changes = dict(patch)
    if 'invoice_number' in changes:
        changes['invoice_number'] = (changes['invoice_number'] or '').strip()
        if not changes['invoice_number']:
            raise InvalidInvoiceError("Invoice number is required", field='invoice_number')
    if 'amount' in changes:
        changes['amount'] = _to_amount(changes['amount'])
    if 'status' in changes:
        changes['status'] = _validate_status(changes['status'])
    if 'type' in changes:
        if project is not None:
            changes['type'] = _validate_type(project, changes['type'])
        elif changes['type'] not in (None, '', *InvoiceType.values):
            raise InvalidInvoiceError(f"Invalid invoice type: {changes['type']}", field='type')
    if 'third_party_amount' in changes and changes['third_party_amount'] is not None:
        changes['third_party_amount'] = _to_amount(changes['third_party_amount'], 'third_party_amount')
    if 'third_party_company' in changes:
        changes['third_party_company'] = (changes['third_party_company'] or '').strip()
    if 'po_number' in changes:
        changes['po_number'] = changes['po_number'] or ''
    if 'description' in changes:
        changes['description'] = changes['description'] or ''

    old_amount, old_type = invoice.amount, invoice.type
    new_amount = changes.get('amount', old_amount)
    new_type = changes.get('type', old_type)

    budget_check = None
    if project is not None:
        if new_amount != old_amount or new_type != old_type:
            # Take the old contribution off, put the new one on
            deltas = _deltas(project, -old_amount, old_type)
            for field, delta in _deltas(project, new_amount, new_type).items():
                deltas[field] = deltas.get(field, ZERO) + delta
            _apply_to_project(project.id, deltas)
            exclude = old_amount if project.partition_fields(new_type) == project.partition_fields(old_type) else ZERO
            budget_check = check_budget(
                project=project,
                amount=new_amount,
                invoice_type=new_type,
                exclude_amount=exclude
            )
        project.refresh_from_db()
    elif new_amount != old_amount:
        logger.warning(
            "Invoice %s amount changed but project %s is missing; totals not adjusted",
            invoice.id, invoice.project_id
        )

    invoice = invoice_store.save_fields(invoice, changes)
    _apply_vendor_adjustments(user, _vendor_adjustments(before, _vendor_share(invoice)))

    logger.info("Updated invoice %s fields=%s", invoice.id, sorted(changes))
    _invalidate(owner_id)
    return LedgerResult(invoice=invoice, project=project, budget_check=budget_check)


def update_invoice_status(*, user: User, invoice_id, status: str) -> LedgerResult:
    """
    Set the status from the UI status menu (paid, pending, overdue).

    Raises:
        InvalidInvoiceError: If status is outside the menu set
    """
    if status not in [s.value for s in UI_STATUSES]:
        raise InvalidInvoiceError(f"Invalid status: {status}", field='status')
    return update_invoice(user=user, invoice_id=invoice_id, status=status)


# =============================================================================
# Delete
# =============================================================================

@transaction.atomic
def delete_invoice(*, user: User, invoice_id) -> LedgerResult:
    """
    Delete an invoice and take it off its project's totals.

    When the project is gone the invoice is still deleted and the skipped
    adjustment is logged. Third-party invoices also come off the vendor total.

    Raises:
        InvoiceNotFoundError: If the invoice is missing or not the user's
    """
    owner_id = _owner_id(user)
    invoice = invoice_store.lock(owner_id, invoice_id)
    project = Project.objects.select_for_update().filter(pk=invoice.project_id).first()

    if project is None or not _apply_to_project(
        project.id, _deltas(project, -invoice.amount, invoice.type, count=-1)
    ):
        logger.warning(
            "Project %s not found while deleting invoice %s; totals not adjusted",
            invoice.project_id, invoice.id
        )
        project = None

    adjustments = _vendor_adjustments(_vendor_share(invoice), None)
    invoice.delete()
    _apply_vendor_adjustments(user, adjustments)

    if project is not None:
        project.refresh_from_db()
    logger.info("Deleted invoice %s", invoice_id)
    _invalidate(owner_id)
    return LedgerResult(invoice=invoice, project=project)
