"""
Aggregate recompute sweep.

Rebuilds each project's running totals from its invoices. The ledger keeps
them in step on every write; this sweep repairs rows touched outside it (admin
edits, raw SQL, restores).
"""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Count, Q, Sum

from apps.accounts.models import User
from apps.projects.models import Project, BudgetPartition, AGGREGATE_FIELDS, ZERO

logger = logging.getLogger(__name__)


def expected_aggregates(project: Project) -> dict:
    """Running totals as derived from the project's current invoices."""
    from apps.invoices.models import Invoice

    totals = Invoice.objects.filter(project=project).aggregate(
        invoiced=Sum('amount'),
        invoice_count=Count('id'),
        hardware=Sum('amount', filter=Q(type=BudgetPartition.HARDWARE)),
        service=Sum('amount', filter=Q(type=BudgetPartition.SERVICE)),
    )

    return {
        'invoiced': totals['invoiced'] or ZERO,
        'invoice_count': totals['invoice_count'],
        'hardware_invoiced': (totals['hardware'] or ZERO) if project.is_split else ZERO,
        'service_invoiced': (totals['service'] or ZERO) if project.is_split else ZERO,
    }


@transaction.atomic
def recompute_project_aggregates(
    *,
    user: Optional[User] = None,
    project_id=None,
    dry_run: bool = False
) -> list:
    """
    Compare stored running totals with the invoice set and fix drift.

    Args:
        user: Limit the sweep to one owner (all owners when None)
        project_id: Limit the sweep to one project
        dry_run: Report differences without writing

    Returns:
        List of {'project': Project, 'changes': {field: (stored, expected)}}
        for every project whose totals differed
    """
    projects = Project.objects.select_for_update().order_by('created_at')
    if user is not None:
        projects = projects.filter(user=user)
    if project_id is not None:
        projects = projects.filter(pk=project_id)

    corrections = []
    for project in projects:
        expected = expected_aggregates(project)
        changes = {
            field: (getattr(project, field), expected[field])
            for field in AGGREGATE_FIELDS
            if getattr(project, field) != expected[field]
        }
        if not changes:
            continue

        logger.warning(
            "Project %s aggregates drifted: %s%s",
            project.id,
            ', '.join(f"{f} {old} -> {new}" for f, (old, new) in changes.items()),
            ' (dry run)' if dry_run else ''
        )

        if not dry_run:
            for field, (_, new) in changes.items():
                setattr(project, field, new)
            project.save(update_fields=list(changes) + ['updated_at'])

        corrections.append({'project': project, 'changes': changes})

    if corrections and not dry_run:
        from apps.workspace.cache import invalidate_workspace
        for owner_id in {correction['project'].user_id for correction in corrections}:
            transaction.on_commit(lambda owner_id=owner_id: invalidate_workspace(owner_id))

    return corrections
