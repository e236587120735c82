"""
Service layer unit tests for vendors app.

Tests cover:
- Vendor CRUD and duplicate names
- Fuzzy similar-name lookup
- Incremental vendor totals
- Full reconciliation (including idempotence)
- reconcile_vendors management command
"""

import pytest
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

from django.core.management import call_command
from django.core.management.base import CommandError

from apps.invoices.services import create_third_party_invoice
from apps.vendors.models import Vendor, VendorStatus
from apps.vendors.services import (
    normalize_name,
    find_similar_vendors,
    create_vendor,
    get_vendor_by_id,
    list_vendors,
    update_vendor,
    delete_vendor,
    get_vendor_invoices,
    derive_vendor_totals,
    reconcile_vendor_totals,
    apply_third_party_amount,
)
from apps.vendors.services.exceptions import (
    VendorNotFoundError,
    InvalidVendorError,
    DuplicateVendorError,
)


def _third_party(user, project, company, amount, number='TP-1'):
    return create_third_party_invoice(
        user=user,
        project_id=project.id,
        company=company,
        invoice_number=number,
        amount=Decimal(amount),
        date=date(2025, 3, 1),
    ).invoice


# =============================================================================
# Vendor Management Tests
# =============================================================================

@pytest.mark.django_db
class TestVendorManagement:
    """Tests for vendor_management.py service functions."""

    def test_create_vendor(self, user):
        vendor = create_vendor(user=user, name='  Byte Works ', contact_email='ap@byte.example')

        assert vendor.name == 'Byte Works'
        assert vendor.status == VendorStatus.ACTIVE
        assert vendor.total_invoiced == Decimal('0')

    def test_create_vendor_blank_name(self, user):
        with pytest.raises(InvalidVendorError) as exc_info:
            create_vendor(user=user, name='   ')

        assert exc_info.value.field == 'name'

    def test_create_duplicate_vendor(self, user):
        create_vendor(user=user, name='Byte Works')

        with pytest.raises(DuplicateVendorError):
            create_vendor(user=user, name='Byte Works')

    def test_same_name_allowed_for_different_owners(self, user, other_user):
        create_vendor(user=user, name='Byte Works')
        create_vendor(user=other_user, name='Byte Works')

        assert Vendor.objects.filter(name='Byte Works').count() == 2

    def test_create_vendor_picks_up_existing_invoices(self, user, project):
        _third_party(user, project, 'Pixel Partners', '250.00')
        Vendor.objects.filter(user=user).delete()

        vendor = create_vendor(user=user, name='Pixel Partners')

        assert vendor.total_invoiced == Decimal('250.00')

    def test_get_vendor_of_other_user(self, user, other_user):
        vendor = create_vendor(user=other_user, name='Byte Works')

        with pytest.raises(VendorNotFoundError):
            get_vendor_by_id(user=user, vendor_id=vendor.id)

    def test_get_unknown_vendor(self, user):
        with pytest.raises(VendorNotFoundError):
            get_vendor_by_id(user=user, vendor_id=uuid4())

    def test_list_vendors_filters(self, user):
        create_vendor(user=user, name='Byte Works', contact_email='ap@byte.example')
        create_vendor(user=user, name='Pixel Partners', status=VendorStatus.INACTIVE)

        assert [v.name for v in list_vendors(user=user)] == ['Byte Works', 'Pixel Partners']
        assert [v.name for v in list_vendors(user=user, status='inactive')] == ['Pixel Partners']
        assert [v.name for v in list_vendors(user=user, search='byte.example')] == ['Byte Works']

    def test_update_vendor_contact(self, user):
        vendor = create_vendor(user=user, name='Byte Works')

        updated = update_vendor(user=user, vendor_id=vendor.id, contact_email='new@byte.example')

        assert updated.contact_email == 'new@byte.example'

    def test_update_vendor_rejects_total(self, user):
        vendor = create_vendor(user=user, name='Byte Works')

        with pytest.raises(InvalidVendorError):
            update_vendor(user=user, vendor_id=vendor.id, total_invoiced=Decimal('10.00'))

    def test_rename_rederives_total(self, user, project):
        _third_party(user, project, 'Pixel Partners Ltd', '80.00')
        Vendor.objects.filter(user=user).delete()
        vendor = create_vendor(user=user, name='Pixel Partners')
        assert vendor.total_invoiced == Decimal('0')

        renamed = update_vendor(user=user, vendor_id=vendor.id, name='Pixel Partners Ltd')

        assert renamed.total_invoiced == Decimal('80.00')

    def test_rename_onto_existing_name(self, user):
        create_vendor(user=user, name='Byte Works')
        vendor = create_vendor(user=user, name='Pixel Partners')

        with pytest.raises(DuplicateVendorError):
            update_vendor(user=user, vendor_id=vendor.id, name='Byte Works')

    def test_delete_vendor(self, user):
        vendor = create_vendor(user=user, name='Byte Works')

        delete_vendor(user=user, vendor_id=vendor.id)

        assert not Vendor.objects.filter(id=vendor.id).exists()

    def test_vendor_invoices(self, user, project):
        _third_party(user, project, 'Pixel Partners', '80.00', number='A')
        _third_party(user, project, 'Byte Works', '20.00', number='B')
        vendor = Vendor.objects.get(user=user, name='Pixel Partners')

        invoices = list(get_vendor_invoices(user=user, vendor_id=vendor.id))

        assert [invoice.invoice_number for invoice in invoices] == ['TP-A']


# =============================================================================
# Similar Name Tests
# =============================================================================

@pytest.mark.django_db
class TestSimilarVendors:
    """Tests for find_similar_vendors."""

    def test_normalize_name(self):
        assert normalize_name('  Pixel   Partners, Inc. ') == 'pixel partners inc'

    def test_near_duplicate_found(self, user):
        vendor = create_vendor(user=user, name='Pixel Partners')
        create_vendor(user=user, name='Byte Works')

        matches = find_similar_vendors(user=user, name='Pixel Partner')

        assert [(v.id, score >= 90) for v, score in matches] == [(vendor.id, True)]

    def test_punctuation_and_case_ignored(self, user):
        create_vendor(user=user, name='Pixel Partners Inc')

        matches = find_similar_vendors(user=user, name='pixel partners inc.')

        assert matches[0][1] == 100

    def test_threshold(self, user):
        create_vendor(user=user, name='Pixel Partners')

        assert find_similar_vendors(user=user, name='Pixel Partners Ltd', threshold=95) == []
        assert len(find_similar_vendors(user=user, name='Pixel Partners Ltd', threshold=80)) == 1

    def test_exclude_and_scope(self, user, other_user):
        vendor = create_vendor(user=user, name='Pixel Partners')
        create_vendor(user=other_user, name='Pixel Partners')

        assert find_similar_vendors(user=user, name='Pixel Partners', exclude_id=vendor.id) == []


# =============================================================================
# Vendor Total Tests
# =============================================================================

@pytest.mark.django_db
class TestVendorTotals:
    """Incremental updates and the full reconciliation."""

    def test_apply_creates_vendor(self, user):
        vendor = apply_third_party_amount(user=user, company='Byte Works', delta=Decimal('30.00'))

        assert vendor.total_invoiced == Decimal('30.00')
        assert vendor.contact_email == ''
        assert vendor.status == VendorStatus.ACTIVE

    def test_apply_negative_to_unknown_vendor_is_skipped(self, user):
        assert apply_third_party_amount(user=user, company='Ghost', delta=Decimal('-5.00')) is None
        assert not Vendor.objects.filter(user=user).exists()

    def test_apply_zero_delta_creates_missing_vendor(self, user):
        vendor = apply_third_party_amount(user=user, company='Byte Works', delta=Decimal('0'))

        assert vendor.total_invoiced == Decimal('0')
        assert Vendor.objects.filter(user=user, name='Byte Works').count() == 1

    def test_apply_zero_delta_leaves_existing_vendor(self, user):
        existing = create_vendor(user=user, name='Byte Works')
        Vendor.objects.filter(id=existing.id).update(total_invoiced=Decimal('5.00'))

        vendor = apply_third_party_amount(user=user, company='Byte Works', delta=Decimal('0'))

        assert vendor.id == existing.id
        assert vendor.total_invoiced == Decimal('5.00')

    def test_zero_amount_invoice_agrees_with_reconcile(self, user, project):
        _third_party(user, project, 'Zero Co', '0')

        assert list(Vendor.objects.filter(user=user).values_list('name', 'total_invoiced')) == [
            ('Zero Co', Decimal('0.00'))
        ]
        report = reconcile_vendor_totals(user=user)
        assert report.writes == 0
        assert report.unchanged == ['Zero Co']

    def test_derive_totals_exact_name_only(self, user, project):
        a = _third_party(user, project, 'Pixel Partners', '10.00', number='A')
        b = _third_party(user, project, 'Pixel Partners', '15.00', number='B')
        c = _third_party(user, project, 'pixel partners', '1.00', number='C')

        totals = derive_vendor_totals([a, b, c])

        assert totals == {'Pixel Partners': Decimal('25.00'), 'pixel partners': Decimal('1.00')}

    def test_incremental_and_full_agree(self, user, project):
        _third_party(user, project, 'Pixel Partners', '10.00', number='A')
        _third_party(user, project, 'Byte Works', '15.00', number='B')

        report = reconcile_vendor_totals(user=user)

        assert report.writes == 0
        assert sorted(report.unchanged) == ['Byte Works', 'Pixel Partners']

    def test_reconcile_fixes_drift_and_creates_missing(self, user, project):
        _third_party(user, project, 'Pixel Partners', '10.00', number='A')
        _third_party(user, project, 'Byte Works', '15.00', number='B')
        Vendor.objects.filter(name='Pixel Partners').update(total_invoiced=Decimal('99.00'))
        Vendor.objects.filter(name='Byte Works').delete()

        report = reconcile_vendor_totals(user=user)

        assert report.created == ['Byte Works']
        assert report.updated == ['Pixel Partners']
        assert Vendor.objects.get(name='Pixel Partners').total_invoiced == Decimal('10.00')
        created = Vendor.objects.get(name='Byte Works')
        assert created.total_invoiced == Decimal('15.00')
        assert created.contact_email == ''

    def test_reconcile_is_idempotent(self, user, project):
        _third_party(user, project, 'Pixel Partners', '10.00')
        Vendor.objects.filter(user=user).delete()

        first = reconcile_vendor_totals(user=user)
        second = reconcile_vendor_totals(user=user)

        assert first.writes == 1
        assert second.writes == 0

    def test_reconcile_leaves_vendors_without_invoices(self, user):
        create_vendor(user=user, name='Byte Works')
        Vendor.objects.filter(name='Byte Works').update(total_invoiced=Decimal('5.00'))

        report = reconcile_vendor_totals(user=user)

        assert report.writes == 0
        assert Vendor.objects.get(name='Byte Works').total_invoiced == Decimal('5.00')

    def test_reconcile_dry_run(self, user, project):
        _third_party(user, project, 'Pixel Partners', '10.00')
        Vendor.objects.filter(user=user).delete()

        report = reconcile_vendor_totals(user=user, dry_run=True)

        assert report.created == ['Pixel Partners']
        assert not Vendor.objects.filter(user=user).exists()

    def test_deleted_vendor_recreated_by_reconcile(self, user, project):
        _third_party(user, project, 'Pixel Partners', '10.00')
        vendor = Vendor.objects.get(user=user)
        delete_vendor(user=user, vendor_id=vendor.id)

        report = reconcile_vendor_totals(user=user)

        assert report.created == ['Pixel Partners']


# =============================================================================
# Management Command Tests
# =============================================================================

@pytest.mark.django_db
class TestReconcileCommand:
    """Tests for the reconcile_vendors command."""

    def test_command_reports_writes(self, user, project):
        _third_party(user, project, 'Pixel Partners', '10.00')
        Vendor.objects.filter(user=user).delete()
        out = StringIO()

        call_command('reconcile_vendors', stdout=out)

        assert 'Pixel Partners (created)' in out.getvalue()
        assert Vendor.objects.filter(user=user, name='Pixel Partners').exists()

    def test_command_up_to_date(self, user):
        out = StringIO()

        call_command('reconcile_vendors', stdout=out)

        assert 'up to date' in out.getvalue()

    def test_command_unknown_user(self, db):
        with pytest.raises(CommandError):
            call_command('reconcile_vendors', user='nobody@example.com', stdout=StringIO())
