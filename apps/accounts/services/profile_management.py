"""Profile management service - regional, currency and notification settings."""

from typing import Optional

from django.db import transaction

from apps.accounts.models import (
    User,
    UserProfile,
    COUNTRY_CURRENCIES,
    CURRENCY_SYMBOLS,
    NOTIFICATION_CHANNELS,
    NOTIFICATION_EVENTS,
)
from .exceptions import InvalidProfileError


PROFILE_FIELDS = (
    'name',
    'company',
    'position',
    'phone',
    'country',
    'time_zone',
    'currency',
    'date_format',
    'language',
    'notifications',
)


def get_or_create_profile(*, user: User, **defaults) -> UserProfile:
    """Return the user's profile, creating one with default settings if missing."""
    profile, _ = UserProfile.objects.get_or_create(user=user, defaults=defaults)
    return profile


def get_user_profile(*, user: User) -> Optional[UserProfile]:
    """Return the user's profile, or None if it was never saved."""
    return UserProfile.objects.filter(user=user).first()


@transaction.atomic
def save_user_profile(*, user: User, **fields) -> UserProfile:
    """
    Create or update the user's profile.

    When a country is given without a currency, the country's default
    currency is applied (e.g. Germany -> EUR).

    Args:
        user: Profile owner
        **fields: Any subset of PROFILE_FIELDS

    Returns:
        Saved UserProfile

    Raises:
        InvalidProfileError: On unknown fields, currencies or notification keys
    """
    unknown = set(fields) - set(PROFILE_FIELDS)
    if unknown:
        raise InvalidProfileError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

    if 'country' in fields and 'currency' not in fields:
        country_currency = COUNTRY_CURRENCIES.get(fields['country'])
        if country_currency:
            fields['currency'] = country_currency

    if 'currency' in fields and fields['currency'] not in CURRENCY_SYMBOLS:
        raise InvalidProfileError(f"Unsupported currency: {fields['currency']}")

    if 'notifications' in fields:
        fields['notifications'] = _validate_notifications(fields['notifications'])

    profile = UserProfile.objects.select_for_update().filter(user=user).first()
    if profile is None:
        return UserProfile.objects.create(user=user, **fields)

    for field, value in fields.items():
        setattr(profile, field, value)
    profile.save(update_fields=list(fields) + ['updated_at'])
    return profile


@transaction.atomic
def update_notifications(*, user: User, notifications: dict) -> UserProfile:
    """
    Replace the user's notification preferences.

    Raises:
        InvalidProfileError: If the profile does not exist yet or the
            notification mapping is malformed
    """
    profile = UserProfile.objects.select_for_update().filter(user=user).first()
    if profile is None:
        raise InvalidProfileError("User profile not found")

    profile.notifications = _validate_notifications(notifications)
    profile.save(update_fields=['notifications', 'updated_at'])
    return profile


def _validate_notifications(notifications) -> dict:
    if not isinstance(notifications, dict):
        raise InvalidProfileError("Notifications must be an object")

    cleaned = {}
    for channel in NOTIFICATION_CHANNELS:
        events = notifications.get(channel, {})
        if not isinstance(events, dict):
            raise InvalidProfileError(f"Notifications for '{channel}' must be an object")
        unknown = set(events) - set(NOTIFICATION_EVENTS)
        if unknown:
            raise InvalidProfileError(
                f"Unknown notification events: {', '.join(sorted(unknown))}"
            )
        cleaned[channel] = {event: bool(events.get(event, True)) for event in NOTIFICATION_EVENTS}
    return cleaned
