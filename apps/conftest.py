import pytest
from datetime import date
from decimal import Decimal
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.projects.services import create_project


@pytest.fixture(autouse=True)
def clear_cache():
    """Workspace snapshots live in the cache; start every test cold."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
        display_name='Other User',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_user):
    """API client authenticated as other_user."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def project(user):
    """Single-budget project with no POs."""
    return create_project(
        user=user,
        name='Website Redesign',
        client='Acme Corporation',
        budget=Decimal('1000.00'),
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
    )


@pytest.fixture
def split_project(user):
    """Project with hardware/service partitions (700 + 300)."""
    return create_project(
        user=user,
        name='Office Fit-out',
        client='Global Industries',
        hardware_budget=Decimal('700.00'),
        service_budget=Decimal('300.00'),
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
    )


@pytest.fixture
def po_project(user):
    """Project with all three PO numbers and nothing marked active."""
    return create_project(
        user=user,
        name='Network Upgrade',
        client='Tech Innovators',
        budget=Decimal('5000.00'),
        start_date=date(2025, 1, 1),
        end_date=date(2025, 12, 31),
        po_hardware='H1',
        po_software='S1',
        po_combined='C1',
    )


@pytest.fixture
def other_project(other_user):
    """Project owned by other_user."""
    return create_project(
        user=other_user,
        name='Someone Else',
        client='Other Client',
        budget=Decimal('500.00'),
        start_date=date(2025, 1, 1),
        end_date=date(2025, 6, 30),
    )
