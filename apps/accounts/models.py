from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Account owning a ledger workspace.

    The ledger only ever uses ``user.id`` as an opaque partition key; every
    project, invoice and vendor row points back here.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['created_at'], name='users_created_at_idx'),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return display name or email prefix."""
        return self.display_name or self.email.split('@')[0]


# Currency symbols shown next to amounts
CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'CAD': 'CA$',
    'AUD': 'A$',
    'JPY': '¥',
    'CNY': '¥',
    'INR': '₹',
}

# Default currency applied when a country is picked without a currency
COUNTRY_CURRENCIES = {
    'United States': 'USD',
    'Canada': 'CAD',
    'United Kingdom': 'GBP',
    'Germany': 'EUR',
    'France': 'EUR',
    'Japan': 'JPY',
    'China': 'CNY',
    'Australia': 'AUD',
    'India': 'INR',
}


class DateFormat(models.TextChoices):
    US = 'MM/DD/YYYY', 'MM/DD/YYYY'
    EUROPEAN = 'DD/MM/YYYY', 'DD/MM/YYYY'
    ISO = 'YYYY-MM-DD', 'YYYY-MM-DD'


NOTIFICATION_EVENTS = ('invoiceCreated', 'invoicePaid', 'projectDeadline', 'newComment')
NOTIFICATION_CHANNELS = ('email', 'app')


def default_notifications():
    """Every channel/event pair enabled."""
    return {
        channel: {event: True for event in NOTIFICATION_EVENTS}
        for channel in NOTIFICATION_CHANNELS
    }


class UserProfile(models.Model):
    """Regional, currency and notification settings for one user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='profile'
    )

    # Personal details
    name = models.CharField(max_length=100, blank=True)
    company = models.CharField(max_length=200, blank=True)
    position = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=50, blank=True)

    # Regional settings
    country = models.CharField(max_length=100, default='United States')
    time_zone = models.CharField(max_length=64, default='America/New_York')
    currency = models.CharField(max_length=3, default='USD')
    date_format = models.CharField(
        max_length=10,
        choices=DateFormat.choices,
        default=DateFormat.US
    )
    language = models.CharField(max_length=10, default='en-US')

    notifications = models.JSONField(default=default_notifications, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_profiles'

    def __str__(self):
        return f"Profile of {self.user.email} ({self.currency})"

    @property
    def currency_symbol(self):
        return CURRENCY_SYMBOLS.get(self.currency, '$')
