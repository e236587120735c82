import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4
from django.core.cache import cache
from django.urls import reverse
from rest_framework import status

from apps.invoices.models import Invoice, InvoiceStatus
from apps.invoices.services import create_invoice, create_third_party_invoice
from apps.vendors.models import Vendor
from apps.workspace.cache import WorkspaceCache, cache_key


@pytest.fixture
def invoice(user, project):
    """Pending 300.00 client invoice on ``project``."""
    return create_invoice(
        user=user,
        project_id=project.id,
        invoice_number='INV-001',
        amount=Decimal('300.00'),
        date=date(2025, 3, 1),
        po_number='',
    ).invoice


# =============================================================================
# Invoice List Tests
# =============================================================================

@pytest.mark.django_db
class TestInvoiceList:
    """Tests for GET /api/invoices/"""

    def test_list_requires_auth(self, api_client):
        response = api_client.get(reverse('invoices:invoice-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_own_invoices(self, authenticated_client, invoice, other_user, other_project):
        create_invoice(
            user=other_user,
            project_id=other_project.id,
            invoice_number='X-1',
            amount=Decimal('1.00'),
            date=date(2025, 3, 1),
        )

        response = authenticated_client.get(reverse('invoices:invoice-list'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['id'] == str(invoice.id)
        assert response.data['results'][0]['kind'] == 'client'
        assert response.data['results'][0]['third_party'] is None

    def test_cancelled_displays_as_pending(self, authenticated_client, invoice):
        Invoice.objects.filter(id=invoice.id).update(status=InvoiceStatus.CANCELLED)

        response = authenticated_client.get(reverse('invoices:invoice-list'), {'status': 'pending'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['status'] == 'pending'

    def test_filter_by_status(self, authenticated_client, invoice):
        response = authenticated_client.get(reverse('invoices:invoice-list'), {'status': 'paid'})

        assert response.data['count'] == 0

    def test_filter_by_kind(self, authenticated_client, user, project, invoice):
        create_third_party_invoice(
            user=user,
            project_id=project.id,
            company='Pixel Partners',
            invoice_number='PP-1',
            amount=Decimal('50.00'),
            date=date(2025, 3, 2),
        )

        response = authenticated_client.get(reverse('invoices:invoice-list'), {'kind': 'third_party'})

        assert response.data['count'] == 1
        result = response.data['results'][0]
        assert result['invoice_number'] == 'TP-PP-1'
        assert result['third_party']['company'] == 'Pixel Partners'
        assert result['third_party']['amount'] == '50.00'

    def test_filter_by_project(self, authenticated_client, user, project, split_project, invoice):
        response = authenticated_client.get(
            reverse('invoices:invoice-list'),
            {'project': str(split_project.id)}
        )

        assert response.data['count'] == 0

    def test_invalid_date_range(self, authenticated_client):
        response = authenticated_client.get(
            reverse('invoices:invoice-list'),
            {'date_from': '2025-05-01', 'date_to': '2025-01-01'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Invoice Create Tests
# =============================================================================

@pytest.mark.django_db
class TestInvoiceCreate:
    """Tests for POST /api/invoices/"""

    def test_create_invoice(self, authenticated_client, project):
        data = {
            'project_id': str(project.id),
            'invoice_number': 'INV-010',
            'amount': '450.00',
            'date': '2025-03-01',
            'description': 'Initial payment',
        }
        response = authenticated_client.post(reverse('invoices:invoice-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['invoice']['status'] == 'pending'
        assert response.data['project']['invoiced'] == '450.00'
        assert response.data['project']['invoice_count'] == 1
        assert response.data['budget_check']['exceeds'] is False

    def test_create_over_budget(self, authenticated_client, project):
        data = {
            'project_id': str(project.id),
            'invoice_number': 'INV-011',
            'amount': '1500.00',
            'date': '2025-03-01',
        }
        response = authenticated_client.post(reverse('invoices:invoice-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['budget_check']['exceeds'] is True
        assert response.data['project']['remaining'] == '-500.00'

    def test_create_on_other_users_project(self, authenticated_client, other_project):
        data = {
            'project_id': str(other_project.id),
            'invoice_number': 'INV-012',
            'amount': '10.00',
            'date': '2025-03-01',
        }
        response = authenticated_client.post(reverse('invoices:invoice-list'), data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert Invoice.objects.count() == 0

    def test_create_requires_type_on_split_project(self, authenticated_client, split_project):
        data = {
            'project_id': str(split_project.id),
            'invoice_number': 'INV-013',
            'amount': '10.00',
            'date': '2025-03-01',
        }
        response = authenticated_client.post(reverse('invoices:invoice-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['field'] == 'type'

    def test_create_rejects_negative_amount(self, authenticated_client, project):
        data = {
            'project_id': str(project.id),
            'invoice_number': 'INV-014',
            'amount': '-5.00',
            'date': '2025-03-01',
        }
        response = authenticated_client.post(reverse('invoices:invoice-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'amount' in response.data

    def test_create_ambiguous_po(self, authenticated_client, po_project):
        data = {
            'project_id': str(po_project.id),
            'invoice_number': 'INV-015',
            'amount': '10.00',
            'date': '2025-03-01',
        }
        response = authenticated_client.post(reverse('invoices:invoice-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['field'] == 'po_number'

    def test_create_invalidates_workspace(self, authenticated_client, user, project,
                                          django_capture_on_commit_callbacks):
        WorkspaceCache(user).snapshot()
        assert cache.get(cache_key(user.id)) is not None

        data = {
            'project_id': str(project.id),
            'invoice_number': 'INV-016',
            'amount': '10.00',
            'date': '2025-03-01',
        }
        with django_capture_on_commit_callbacks(execute=True):
            response = authenticated_client.post(reverse('invoices:invoice-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert cache.get(cache_key(user.id)) is None


# =============================================================================
# Third-party Tests
# =============================================================================

@pytest.mark.django_db
class TestThirdPartyCreate:
    """Tests for POST /api/invoices/third_party/"""

    def test_create_third_party(self, authenticated_client, user, project):
        data = {
            'project_id': str(project.id),
            'company': 'Pixel Partners',
            'invoice_number': 'PP-9',
            'amount': '120.00',
            'date': '2025-03-01',
        }
        response = authenticated_client.post(reverse('invoices:invoice-third-party'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['invoice']['invoice_number'] == 'TP-PP-9'
        assert response.data['invoice']['kind'] == 'third_party'
        assert Vendor.objects.get(user=user, name='Pixel Partners').total_invoiced == Decimal('120.00')

    def test_amount_from_client_invoice(self, authenticated_client, project, invoice):
        data = {
            'project_id': str(project.id),
            'company': 'Pixel Partners',
            'invoice_number': 'PP-10',
            'client_invoice_id': str(invoice.id),
            'date': '2025-03-01',
        }
        response = authenticated_client.post(reverse('invoices:invoice-third-party'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['invoice']['amount'] == '300.00'

    def test_amount_or_client_invoice_required(self, authenticated_client, project):
        data = {
            'project_id': str(project.id),
            'company': 'Pixel Partners',
            'invoice_number': 'PP-11',
            'date': '2025-03-01',
        }
        response = authenticated_client.post(reverse('invoices:invoice-third-party'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'amount' in response.data


# =============================================================================
# Invoice Detail Tests
# =============================================================================

@pytest.mark.django_db
class TestInvoiceDetail:
    """Tests for GET/PATCH/DELETE /api/invoices/{id}/ and the status action."""

    def test_retrieve(self, authenticated_client, invoice):
        response = authenticated_client.get(reverse('invoices:invoice-detail', args=[invoice.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['amount'] == '300.00'
        assert response.data['project_name'] == 'Website Redesign'

    def test_retrieve_unknown(self, authenticated_client):
        response = authenticated_client.get(reverse('invoices:invoice-detail', args=[uuid4()]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retrieve_other_users_invoice(self, other_client, invoice):
        response = other_client.get(reverse('invoices:invoice-detail', args=[invoice.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_partial_update_amount(self, authenticated_client, project, invoice):
        url = reverse('invoices:invoice-detail', args=[invoice.id])
        response = authenticated_client.patch(url, {'amount': '200.00'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['project']['invoiced'] == '200.00'
        project.refresh_from_db()
        assert project.invoiced == Decimal('200.00')

    def test_delete(self, authenticated_client, project, invoice):
        response = authenticated_client.delete(reverse('invoices:invoice-detail', args=[invoice.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        project.refresh_from_db()
        assert project.invoice_count == 0
        assert project.invoiced == Decimal('0')

    def test_set_status(self, authenticated_client, project, invoice):
        url = reverse('invoices:invoice-set-status', args=[invoice.id])
        response = authenticated_client.post(url, {'status': 'paid'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'paid'
        project.refresh_from_db()
        assert project.invoiced == Decimal('300.00')

    def test_set_status_rejects_cancelled(self, authenticated_client, invoice):
        url = reverse('invoices:invoice-set-status', args=[invoice.id])
        response = authenticated_client.post(url, {'status': 'cancelled'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
