"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidProfileError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user
from .profile_management import (
    get_or_create_profile,
    get_user_profile,
    save_user_profile,
    update_notifications,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidProfileError',
    # Services
    'register_user',
    'authenticate_user',
    'get_or_create_profile',
    'get_user_profile',
    'save_user_profile',
    'update_notifications',
]
