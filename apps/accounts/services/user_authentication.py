"""Login for ledger owners."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError
from .profile_management import get_or_create_profile

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check credentials and stamp last_login.

    Owners created through the admin have no profile yet; one is created
    here so every authenticated owner has regional settings.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Account is deactivated
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=email.strip())
        .first()
    )
    if user is None or not user.check_password(password):
        logger.info("Failed login for %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    User.objects.filter(pk=user.pk).update(last_login=timezone.now())
    get_or_create_profile(user=user)

    return user
