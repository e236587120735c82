import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from rest_framework import status

from apps.core.exceptions import (
    NotAuthenticatedError,
    NotFoundError,
    LedgerValidationError,
    BlockedOperationError,
)
from apps.core.responses import error_response
from apps.core.store import OwnerScopedStore
from apps.projects.models import Project
from apps.projects.services.exceptions import (
    ProjectNotFoundError,
    BlockedOperationError as ProjectBlockedError,
)


@pytest.fixture
def store():
    return OwnerScopedStore(Project, not_found=ProjectNotFoundError)


def _data(**overrides):
    data = {
        'name': 'Website',
        'client': 'Acme',
        'budget': Decimal('100.00'),
        'start_date': date(2025, 1, 1),
        'end_date': date(2025, 2, 1),
    }
    data.update(overrides)
    return data


# =============================================================================
# Store Tests
# =============================================================================

@pytest.mark.django_db
class TestOwnerScopedStore:
    """Tests for OwnerScopedStore."""

    def test_create_and_get(self, store, user):
        project = store.create(user.id, _data())

        assert store.get(user.id, project.id) == project
        assert project.user_id == user.id

    def test_missing_owner_refused(self, store, user):
        project = store.create(user.id, _data())

        with pytest.raises(NotAuthenticatedError):
            store.get(None, project.id)
        with pytest.raises(NotAuthenticatedError):
            store.create(None, _data())
        with pytest.raises(NotAuthenticatedError):
            store.list(None)

    def test_foreign_record_not_found(self, store, user, other_user):
        project = store.create(other_user.id, _data())

        with pytest.raises(ProjectNotFoundError):
            store.get(user.id, project.id)

    def test_malformed_id_not_found(self, store, user):
        with pytest.raises(ProjectNotFoundError):
            store.get(user.id, 'not-a-uuid')

    def test_list_ordering(self, store, user):
        first = store.create(user.id, _data(name='A'))
        second = store.create(user.id, _data(name='B'))

        names = [p.name for p in store.list(user.id, order_by='name', direction='asc')]
        assert names == ['A', 'B']
        assert {p.id for p in store.list(user.id)} == {first.id, second.id}

    def test_update_merges_fields(self, store, user):
        project = store.create(user.id, _data())

        updated = store.update(user.id, project.id, {'status': 'completed'})

        updated.refresh_from_db()
        assert updated.status == 'completed'
        assert updated.name == 'Website'

    def test_query_by_field(self, store, user, other_user):
        store.create(user.id, _data(client='Acme'))
        store.create(user.id, _data(client='Globex'))
        store.create(other_user.id, _data(client='Acme'))

        assert len(store.query_by_field(user.id, 'client', 'Acme')) == 1

    def test_delete(self, store, user):
        project = store.create(user.id, _data())

        assert store.delete(user.id, project.id) is True
        with pytest.raises(ProjectNotFoundError):
            store.get(user.id, project.id)

    def test_delete_unknown(self, store, user):
        with pytest.raises(ProjectNotFoundError):
            store.delete(user.id, uuid4())


# =============================================================================
# Error Response Tests
# =============================================================================

class TestErrorResponse:
    """Tests for error_response."""

    def test_status_codes(self):
        assert error_response(NotAuthenticatedError('x')).status_code == status.HTTP_401_UNAUTHORIZED
        assert error_response(NotFoundError('x')).status_code == status.HTTP_404_NOT_FOUND
        assert error_response(LedgerValidationError('x')).status_code == status.HTTP_400_BAD_REQUEST
        assert error_response(BlockedOperationError('x')).status_code == status.HTTP_409_CONFLICT

    def test_field_included(self):
        response = error_response(LedgerValidationError('Bad amount', field='amount'))

        assert response.data == {'error': 'Bad amount', 'field': 'amount'}

    def test_blocked_body(self):
        response = error_response(
            ProjectBlockedError('In use', reason='invoices_exist', invoice_count=3)
        )

        assert response.data == {'error': 'In use', 'reason': 'invoices_exist', 'invoice_count': 3}
