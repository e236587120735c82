import pytest
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User, UserProfile


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'display_name': 'New User',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_register_creates_default_profile(self, api_client):
        """Registration seeds a profile with default regional settings."""
        url = reverse('users:register')
        data = {
            'email': 'profiled@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'display_name': 'Profiled',
        }
        api_client.post(url, data)

        profile = UserProfile.objects.get(user__email='profiled@example.com')
        assert profile.name == 'Profiled'
        assert profile.currency == 'USD'
        assert profile.notifications['email']['invoicePaid'] is True

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('users:register')
        data = {
            'email': user.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_weak_password(self, api_client):
        """Registration fails with weak password."""
        url = reverse('users:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'testuser@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['email'] == user.email

    def test_login_wrong_password(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'testuser@example.com',
            'password': 'WrongPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_nonexistent_user(self, api_client):
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'nobody@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, user_inactive):
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'inactive@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_updates_last_login(self, api_client, user):
        assert user.last_login is None
        url = reverse('users:login')
        api_client.post(url, {
            'email': 'testuser@example.com',
            'password': 'TestPass123!',
        })

        user.refresh_from_db()
        assert user.last_login is not None


# =============================================================================
# Current User / Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email

    def test_get_current_user_unauthenticated(self, api_client):
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestProfile:
    """Tests for /api/auth/profile/"""

    def test_get_profile_creates_defaults(self, authenticated_client, user):
        url = reverse('users:profile')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['currency'] == 'USD'
        assert response.data['currency_symbol'] == '$'
        assert response.data['date_format'] == 'MM/DD/YYYY'
        assert UserProfile.objects.filter(user=user).exists()

    def test_update_profile_fields(self, authenticated_client, user):
        url = reverse('users:profile')
        response = authenticated_client.patch(url, {
            'company': 'Acme Studio',
            'date_format': 'YYYY-MM-DD',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['company'] == 'Acme Studio'
        assert response.data['date_format'] == 'YYYY-MM-DD'

    def test_country_applies_default_currency(self, authenticated_client, user):
        url = reverse('users:profile')
        response = authenticated_client.patch(url, {'country': 'Germany'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['currency'] == 'EUR'
        assert response.data['currency_symbol'] == '€'

    def test_explicit_currency_wins_over_country(self, authenticated_client, user):
        url = reverse('users:profile')
        response = authenticated_client.patch(url, {
            'country': 'Germany',
            'currency': 'USD',
        }, format='json')

        assert response.data['currency'] == 'USD'

    def test_unsupported_currency_rejected(self, authenticated_client, user):
        url = reverse('users:profile')
        response = authenticated_client.patch(url, {'currency': 'XYZ'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_profile_unauthenticated(self, api_client):
        url = reverse('users:profile')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestNotifications:
    """Tests for PUT /api/auth/profile/notifications/"""

    def test_replace_notifications(self, authenticated_client, user):
        url = reverse('users:notifications')
        response = authenticated_client.put(url, {
            'email': {'invoicePaid': False},
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        notifications = response.data['notifications']
        assert notifications['email']['invoicePaid'] is False
        assert notifications['email']['invoiceCreated'] is True
        assert notifications['app']['newComment'] is True

    def test_unknown_event_rejected(self, authenticated_client, user):
        url = reverse('users:notifications')
        response = authenticated_client.put(url, {
            'app': {'somethingElse': True},
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Model Tests
# =============================================================================

@pytest.mark.django_db
class TestUserModel:

    def test_create_user(self, db):
        user = User.objects.create_user(email='model@example.com', password='TestPass123!')

        assert user.check_password('TestPass123!')
        assert user.is_active
        assert not user.is_staff

    def test_create_superuser(self, db):
        admin = User.objects.create_superuser(email='admin@example.com', password='AdminPass123!')

        assert admin.is_staff
        assert admin.is_superuser

    def test_get_display_name(self, user):
        assert user.get_display_name() == 'Test User'
        user.display_name = ''
        assert user.get_display_name() == 'testuser'

    def test_user_str(self, user):
        assert str(user) == 'testuser@example.com'
