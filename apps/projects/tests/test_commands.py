import pytest
from datetime import date
from decimal import Decimal
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError

from apps.invoices.services import create_invoice
from apps.projects.models import Project


@pytest.mark.django_db
class TestRecomputeProjectTotals:
    """Tests for the recompute_project_totals command."""

    def test_reports_consistent_totals(self, project):
        out = StringIO()

        call_command('recompute_project_totals', stdout=out)

        assert 'All project totals match' in out.getvalue()

    def test_repairs_drift(self, user, project):
        create_invoice(
            user=user,
            project_id=project.id,
            invoice_number='INV-001',
            amount=Decimal('40.00'),
            date=date(2025, 3, 1),
        )
        Project.objects.filter(id=project.id).update(invoiced=Decimal('0.00'))
        out = StringIO()

        call_command('recompute_project_totals', user=user.email, stdout=out)

        assert 'Corrected 1 project(s).' in out.getvalue()
        project.refresh_from_db()
        assert project.invoiced == Decimal('40.00')

    def test_dry_run(self, project):
        Project.objects.filter(id=project.id).update(invoice_count=3)
        out = StringIO()

        call_command('recompute_project_totals', dry_run=True, stdout=out)

        assert 'No changes made' in out.getvalue()
        project.refresh_from_db()
        assert project.invoice_count == 3

    def test_unknown_user(self, db):
        with pytest.raises(CommandError):
            call_command('recompute_project_totals', user='nobody@example.com', stdout=StringIO())
