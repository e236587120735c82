"""Budget checks and summaries. Advisory only: nothing here blocks a write."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from apps.projects.models import Project, BudgetPartition, ZERO


CENT = Decimal('0.01')


@dataclass(frozen=True)
class BudgetCheck:
    remaining: Decimal
    exceeds: bool
    partition: Optional[str] = None

    def as_dict(self):
        return {
            'remaining': self.remaining,
            'exceeds': self.exceeds,
            'partition': self.partition,
        }


def check_budget(
    *,
    project: Project,
    amount,
    invoice_type: Optional[str] = None,
    exclude_amount=ZERO
) -> BudgetCheck:
    """
    Report whether ``amount`` would overrun the remaining budget.

    On a split project with a valid ``invoice_type`` the partition's remaining
    amount is used, otherwise the total. ``exclude_amount`` is added back to
    the remaining figure when an existing invoice is being re-priced.
    """
    amount = Decimal(amount)
    fields = project.partition_fields(invoice_type)

    if fields:
        budget_field, invoiced_field = fields
        remaining = getattr(project, budget_field) - getattr(project, invoiced_field)
        partition = invoice_type
    else:
        remaining = project.remaining
        partition = None

    remaining += Decimal(exclude_amount)
    return BudgetCheck(remaining=remaining, exceeds=amount > remaining, partition=partition)


def _percent(part, whole):
    if not whole:
        return ZERO
    return (Decimal(part) / Decimal(whole) * 100).quantize(CENT)


def _line(budget, invoiced):
    return {
        'budget': budget,
        'invoiced': invoiced,
        'remaining': budget - invoiced,
        'percent_used': _percent(invoiced, budget),
    }


def get_budget_summary(project: Project) -> dict:
    """
    Budget, invoiced and remaining per total and partition.

    GST and TDS amounts are computed on the invoiced total for display when
    enabled on the project; they are never part of the ledger figures.
    """
    summary = {
        'total': _line(project.budget, project.invoiced),
        'invoice_count': project.invoice_count,
        'is_split': project.is_split,
        'partitions': {},
        'taxes': {},
    }

    if project.is_split:
        summary['partitions'] = {
            BudgetPartition.HARDWARE.value: _line(project.hardware_budget, project.hardware_invoiced),
            BudgetPartition.SERVICE.value: _line(project.service_budget, project.service_invoiced),
        }

    if project.gst_enabled:
        summary['taxes']['gst'] = {
            'percentage': project.gst_percentage,
            'amount': (project.invoiced * project.gst_percentage / 100).quantize(CENT),
        }
    if project.tds_enabled:
        summary['taxes']['tds'] = {
            'percentage': project.tds_percentage,
            'amount': (project.invoiced * project.tds_percentage / 100).quantize(CENT),
        }

    return summary
