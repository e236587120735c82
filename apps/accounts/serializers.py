from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from .models import (
    User,
    UserProfile,
    CURRENCY_SYMBOLS,
    DateFormat,
    NOTIFICATION_CHANNELS,
    NOTIFICATION_EVENTS,
)


# =============================================================================
# INPUT SERIALIZERS
# =============================================================================

class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class NotificationsSerializer(serializers.Serializer):
    """Per-channel notification switches, e.g. {'email': {'invoicePaid': False}}."""

    email = serializers.DictField(child=serializers.BooleanField(), required=False)
    app = serializers.DictField(child=serializers.BooleanField(), required=False)

    def validate(self, attrs):
        for channel in NOTIFICATION_CHANNELS:
            unknown = set(attrs.get(channel, {})) - set(NOTIFICATION_EVENTS)
            if unknown:
                raise serializers.ValidationError({
                    channel: f"Unknown events: {', '.join(sorted(unknown))}"
                })
        return attrs


class UserProfileUpdateSerializer(serializers.Serializer):
    """Partial profile update; every field is optional."""

    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    company = serializers.CharField(max_length=200, required=False, allow_blank=True)
    position = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False)
    time_zone = serializers.CharField(max_length=64, required=False)
    currency = serializers.ChoiceField(choices=sorted(CURRENCY_SYMBOLS), required=False)
    date_format = serializers.ChoiceField(choices=DateFormat.choices, required=False)
    language = serializers.CharField(max_length=10, required=False)
    notifications = NotificationsSerializer(required=False)


# =============================================================================
# OUTPUT SERIALIZERS
# =============================================================================

class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for account display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'created_at', 'last_login']


class UserProfileSerializer(serializers.ModelSerializer):
    """Profile settings including the resolved currency symbol."""

    email = serializers.EmailField(source='user.email', read_only=True)
    currency_symbol = serializers.CharField(read_only=True)

    class Meta:
        model = UserProfile
        fields = [
            'id',
            'email',
            'name',
            'company',
            'position',
            'phone',
            'country',
            'time_zone',
            'currency',
            'currency_symbol',
            'date_format',
            'language',
            'notifications',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
