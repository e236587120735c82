"""
Project management service.

Project CRUD with the split-budget rules and the delete guard. Running totals
are owned by the invoice ledger and rejected here.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Sum, Q

from apps.accounts.models import User
from apps.core.store import OwnerScopedStore
from apps.projects.models import Project, ProjectStatus, BudgetPartition, AGGREGATE_FIELDS, ZERO

from .exceptions import (
    ProjectNotFoundError,
    InvalidProjectError,
    BlockedOperationError,
)
from .po_resolution import normalize_active_pos

logger = logging.getLogger(__name__)

project_store = OwnerScopedStore(Project, not_found=ProjectNotFoundError)

EDITABLE_FIELDS = (
    'name',
    'client',
    'status',
    'start_date',
    'end_date',
    'budget',
    'hardware_budget',
    'service_budget',
    'po_hardware',
    'po_software',
    'po_combined',
    'active_pos',
    'gst_enabled',
    'gst_percentage',
    'tds_enabled',
    'tds_percentage',
)


def _invalidate(user_id):
    from apps.workspace.cache import invalidate_workspace
    transaction.on_commit(lambda: invalidate_workspace(user_id))


def _validate_budget(budget, hardware_budget, service_budget):
    if (hardware_budget is None) != (service_budget is None):
        raise InvalidProjectError(
            "Split budget needs both hardware_budget and service_budget",
            field='hardware_budget' if hardware_budget is None else 'service_budget'
        )
    for name, value in (
        ('budget', budget),
        ('hardware_budget', hardware_budget),
        ('service_budget', service_budget),
    ):
        if value is not None and Decimal(value) < 0:
            raise InvalidProjectError(f"{name} cannot be negative", field=name)
    if budget is None and hardware_budget is None:
        raise InvalidProjectError("Budget is required", field='budget')


def _validate_dates(start_date, end_date):
    if start_date and end_date and end_date < start_date:
        raise InvalidProjectError("End date cannot be before start date", field='end_date')


@transaction.atomic
def create_project(
    *,
    user: User,
    name: str,
    client: str,
    start_date,
    end_date,
    budget=None,
    hardware_budget=None,
    service_budget=None,
    status: str = ProjectStatus.ACTIVE,
    po_hardware: str = '',
    po_software: str = '',
    po_combined: str = '',
    active_pos: Optional[list] = None,
    current_po: Optional[str] = None,
    gst_enabled: bool = False,
    gst_percentage=Decimal('18.00'),
    tds_enabled: bool = False,
    tds_percentage=Decimal('2.00'),
) -> Project:
    """
    Create a project with zeroed running totals.

    Either ``budget`` or both split fields must be given; with a split the
    total budget is their sum regardless of ``budget``.

    Raises:
        NotAuthenticatedError: If user is None
        InvalidProjectError: On missing/negative budgets or reversed dates
    """
    _validate_budget(budget, hardware_budget, service_budget)
    _validate_dates(start_date, end_date)

    project = project_store.create(getattr(user, 'id', None), {
        'name': name,
        'client': client,
        'status': status,
        'start_date': start_date,
        'end_date': end_date,
        'budget': budget if budget is not None else ZERO,
        'hardware_budget': hardware_budget,
        'service_budget': service_budget,
        'po_hardware': po_hardware,
        'po_software': po_software,
        'po_combined': po_combined,
        'active_pos': normalize_active_pos(active_pos, current_po),
        'gst_enabled': gst_enabled,
        'gst_percentage': gst_percentage,
        'tds_enabled': tds_enabled,
        'tds_percentage': tds_percentage,
    })

    logger.info("Created project %s for user %s", project.id, user.id)
    _invalidate(user.id)
    return project


def get_project_by_id(*, user: User, project_id) -> Project:
    """
    Raises:
        ProjectNotFoundError: If the project is missing or not the user's
    """
    return project_store.get(getattr(user, 'id', None), project_id)


def list_projects(*, user: User, status: Optional[str] = None) -> list:
    """Projects ordered by most recently updated first."""
    projects = project_store.list(getattr(user, 'id', None), order_by='updated_at', direction='desc')
    if status:
        projects = [project for project in projects if project.status == status]
    return projects


@transaction.atomic
def update_project(*, user: User, project_id, **changes) -> Project:
    """
    Edit a project's attributes.

    Turning the split on recomputes the partition totals from the project's
    invoices and is refused while any invoice has no type. Turning it off
    clears them.

    Raises:
        ProjectNotFoundError: If the project is missing or not the user's
        InvalidProjectError: On running-total edits, unknown fields or bad budgets
    """
    from apps.invoices.models import Invoice

    blocked = set(changes) & set(AGGREGATE_FIELDS)
    if blocked:
        raise InvalidProjectError(
            f"Running totals are maintained by the ledger: {', '.join(sorted(blocked))}",
            field=sorted(blocked)[0]
        )

    if 'current_po' in changes:
        current_po = changes.pop('current_po')
        if 'active_pos' not in changes:
            changes['active_pos'] = normalize_active_pos(None, current_po)
    if 'active_pos' in changes:
        changes['active_pos'] = normalize_active_pos(changes['active_pos'])

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidProjectError(f"Unknown project fields: {', '.join(sorted(unknown))}")

    project = project_store.lock(getattr(user, 'id', None), project_id)
    was_split = project.is_split

    hardware_budget = changes.get('hardware_budget', project.hardware_budget)
    service_budget = changes.get('service_budget', project.service_budget)
    budget = changes.get('budget', project.budget)
    _validate_budget(budget, hardware_budget, service_budget)
    _validate_dates(
        changes.get('start_date', project.start_date),
        changes.get('end_date', project.end_date),
    )

    becomes_split = hardware_budget is not None and service_budget is not None
    if becomes_split and not was_split:
        invoices = Invoice.objects.filter(project=project)
        untyped = invoices.filter(Q(type__isnull=True) | Q(type='')).count()
        if untyped:
            raise InvalidProjectError(
                f"Cannot split the budget: {untyped} invoice(s) have no type",
                field='hardware_budget'
            )
        totals = invoices.aggregate(
            hardware=Sum('amount', filter=Q(type=BudgetPartition.HARDWARE)),
            service=Sum('amount', filter=Q(type=BudgetPartition.SERVICE)),
        )
        changes['hardware_invoiced'] = totals['hardware'] or ZERO
        changes['service_invoiced'] = totals['service'] or ZERO
    elif was_split and not becomes_split:
        changes['hardware_invoiced'] = ZERO
        changes['service_invoiced'] = ZERO

    project = project_store.save_fields(project, changes)

    logger.info("Updated project %s fields=%s", project.id, sorted(changes))
    _invalidate(user.id)
    return project


@transaction.atomic
def delete_project(*, user: User, project_id) -> None:
    """
    Delete a project that no invoice references.

    Never cascades: with any invoice attached nothing is deleted.

    Raises:
        ProjectNotFoundError: If the project is missing or not the user's
        BlockedOperationError: If one or more invoices reference the project
    """
    from apps.invoices.models import Invoice

    project = project_store.lock(getattr(user, 'id', None), project_id)

    invoice_count = Invoice.objects.filter(project=project).count()
    if invoice_count:
        logger.info(
            "Refused to delete project %s: %d invoice(s) attached",
            project.id, invoice_count
        )
        raise BlockedOperationError(
            f"Cannot delete project '{project.name}': "
            f"{invoice_count} invoice(s) are associated with it. "
            f"Delete the invoices first.",
            reason='invoices_exist',
            invoice_count=invoice_count
        )

    project.delete()
    logger.info("Deleted project %s", project_id)
    _invalidate(user.id)
