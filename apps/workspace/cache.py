"""
Workspace snapshot cache.

A read-through container over Django's cache framework holding everything the
dashboard needs for one user: projects, invoices (with displayed statuses),
vendors and dashboard totals. Ledger, project and vendor writes call
:func:`invalidate_workspace` on commit; ``refresh()`` reloads on demand.

Usage::

    workspace = WorkspaceCache(request.user)
    data = workspace.snapshot()   # served from cache when warm
    workspace.refresh()           # drop and reload
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from apps.invoices.models import Invoice
from apps.invoices.presentation import display_status
from apps.invoices.serializers import InvoiceSerializer
from apps.projects.models import Project, ProjectStatus
from apps.projects.serializers import ProjectSerializer
from apps.vendors.models import Vendor
from apps.vendors.serializers import VendorSerializer

logger = logging.getLogger(__name__)

RECENT_INVOICES = 5


def cache_key(user_id) -> str:
    return f'workspace:{user_id}'


def invalidate_workspace(user_id) -> None:
    """Drop the cached snapshot for ``user_id``."""
    cache.delete(cache_key(user_id))


def build_dashboard(projects, invoices) -> dict:
    """Totals shown on the dashboard, from model instances."""
    total_budget = sum((project.budget for project in projects), Decimal('0.00'))
    total_invoiced = sum((project.invoiced for project in projects), Decimal('0.00'))
    recent = sorted(invoices, key=lambda invoice: invoice.created_at, reverse=True)

    return {
        'total_budget': total_budget,
        'total_invoiced': total_invoiced,
        'total_remaining': total_budget - total_invoiced,
        'active_projects': sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
        'pending_invoices': sum(
            1 for invoice in invoices if display_status(invoice.status) == 'pending'
        ),
        'third_party_invoices': sum(1 for invoice in invoices if invoice.is_third_party),
        'recent_invoice_ids': [str(invoice.id) for invoice in recent[:RECENT_INVOICES]],
    }


class WorkspaceCache:
    """Cached snapshot of one user's workspace."""

    def __init__(self, user, timeout=None):
        self.user = user
        self.timeout = settings.WORKSPACE_CACHE_TIMEOUT if timeout is None else timeout

    @property
    def key(self):
        return cache_key(self.user.id)

    def snapshot(self) -> dict:
        """Return the cached snapshot, loading it on a miss."""
        data = cache.get(self.key)
        if data is None:
            data = self._load()
            cache.set(self.key, data, self.timeout)
        return data

    def invalidate(self) -> None:
        invalidate_workspace(self.user.id)

    def refresh(self) -> dict:
        """Drop the snapshot and reload it from the database."""
        self.invalidate()
        return self.snapshot()

    def _load(self) -> dict:
        projects = list(Project.objects.filter(user=self.user).order_by('-updated_at'))
        invoices = list(Invoice.objects.filter(user=self.user).order_by('-created_at'))
        vendors = list(Vendor.objects.filter(user=self.user).order_by('name'))

        logger.debug(
            "Loaded workspace for user %s: %d projects, %d invoices, %d vendors",
            self.user.id, len(projects), len(invoices), len(vendors)
        )

        return {
            'projects': [dict(item) for item in ProjectSerializer(projects, many=True).data],
            'invoices': [dict(item) for item in InvoiceSerializer(invoices, many=True).data],
            'vendors': [dict(item) for item in VendorSerializer(vendors, many=True).data],
            'dashboard': build_dashboard(projects, invoices),
            'loaded_at': timezone.now(),
        }
