"""
Vendor total reconciliation.

A vendor's ``total_invoiced`` is the sum of ``third_party_amount`` over the
owner's invoices whose ``third_party_company`` equals the vendor name. Two
paths keep it current and must agree:

* incremental: :func:`apply_third_party_amount` applies one invoice's delta
  when a third-party invoice is created, edited or deleted;
* full: :func:`reconcile_vendor_totals` recomputes every total from the
  invoice set and writes only what differs.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from django.db import transaction

from apps.accounts.models import User
from apps.invoices.models import ThirdPartyInvoice
from apps.vendors.models import Vendor, VendorStatus

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


@dataclass
class ReconciliationReport:
    created: list = field(default_factory=list)
    updated: list = field(default_factory=list)
    unchanged: list = field(default_factory=list)

    @property
    def writes(self) -> int:
        return len(self.created) + len(self.updated)

    def as_dict(self):
        return {
            'created': self.created,
            'updated': self.updated,
            'unchanged': self.unchanged,
            'writes': self.writes,
        }


def derive_vendor_totals(invoices: Iterable) -> dict:
    """Map company name -> summed third-party amount. Exact name match only."""
    totals = defaultdict(lambda: ZERO)
    for invoice in invoices:
        company = invoice.third_party_company
        if company:
            totals[company] += invoice.third_party_amount or ZERO
    return dict(totals)


@transaction.atomic
def reconcile_vendor_totals(*, user: User, dry_run: bool = False) -> ReconciliationReport:
    """
    Bring every vendor total in line with the owner's invoices.

    Missing vendors are created active with a blank contact email. Vendors
    without third-party invoices are left alone. Running it twice on an
    unchanged invoice set writes nothing the second time.
    """
    totals = derive_vendor_totals(ThirdPartyInvoice.objects.filter(user=user))
    vendors = {
        vendor.name: vendor
        for vendor in Vendor.objects.select_for_update().filter(user=user)
    }

    report = ReconciliationReport()
    for name in sorted(totals):
        total = totals[name]
        vendor = vendors.get(name)

        if vendor is None:
            if not dry_run:
                Vendor.objects.create(
                    user=user,
                    name=name,
                    contact_email='',
                    status=VendorStatus.ACTIVE,
                    total_invoiced=total
                )
            report.created.append(name)
        elif vendor.total_invoiced != total:
            if not dry_run:
                vendor.total_invoiced = total
                vendor.save(update_fields=['total_invoiced', 'updated_at'])
            report.updated.append(name)
        else:
            report.unchanged.append(name)

    if report.writes:
        logger.info(
            "Reconciled vendors for user %s: created=%s updated=%s%s",
            user.id, report.created, report.updated, ' (dry run)' if dry_run else ''
        )
        if not dry_run:
            from apps.workspace.cache import invalidate_workspace
            transaction.on_commit(lambda: invalidate_workspace(user.id))

    return report


@transaction.atomic
def apply_third_party_amount(*, user: User, company: str, delta) -> Optional[Vendor]:
    """
    Add ``delta`` to the named vendor's total, creating the vendor if absent.

    A zero delta only makes sure the vendor exists. A negative delta for an
    unknown vendor is ignored and returns None.
    """
    delta = Decimal(delta)
    if not company:
        return None

    vendor = Vendor.objects.select_for_update().filter(user=user, name=company).first()
    if vendor is not None and not delta:
        return vendor
    if vendor is None:
        if delta < 0:
            logger.warning(
                "Skipped vendor adjustment of %s for unknown vendor %r (user %s)",
                delta, company, user.id
            )
            return None
        vendor = Vendor.objects.create(
            user=user,
            name=company,
            contact_email='',
            status=VendorStatus.ACTIVE,
            total_invoiced=delta
        )
        logger.info("Created vendor %r for user %s", company, user.id)
        return vendor

    vendor.total_invoiced += delta
    vendor.save(update_fields=['total_invoiced', 'updated_at'])
    return vendor
