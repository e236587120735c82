from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    UserProfileSerializer,
    UserProfileUpdateSerializer,
    NotificationsSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    get_or_create_profile,
    save_user_profile,
    update_notifications,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidProfileError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _auth_response(user, message, status_code=status.HTTP_200_OK):
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    }, status=status_code)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new account and receive JWT tokens. A default profile is created.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except UserRegistrationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return _auth_response(user, 'Registration successful', status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return _auth_response(user, 'Login successful')


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    methods=['GET'],
    responses={200: UserProfileSerializer},
    description="Get the current user's profile settings (currency, region, notifications).",
    tags=['profile'],
)
@extend_schema(
    methods=['PATCH'],
    request=UserProfileUpdateSerializer,
    responses={
        200: UserProfileSerializer,
        400: ErrorResponseSerializer,
    },
    description="Update profile settings. Picking a country without a currency applies "
                "that country's default currency.",
    tags=['profile'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def profile(request):
    """Get or update the user's profile settings."""
    if request.method == 'GET':
        user_profile = get_or_create_profile(user=request.user, name=request.user.display_name)
        return Response(UserProfileSerializer(user_profile).data)

    serializer = UserProfileUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user_profile = save_user_profile(user=request.user, **serializer.validated_data)
    except InvalidProfileError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(UserProfileSerializer(user_profile).data)


@extend_schema(
    request=NotificationsSerializer,
    responses={
        200: UserProfileSerializer,
        400: ErrorResponseSerializer,
    },
    description="Replace notification preferences. Omitted events default to enabled.",
    tags=['profile'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def notifications(request):
    """Replace notification preferences."""
    serializer = NotificationsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    get_or_create_profile(user=request.user, name=request.user.display_name)
    try:
        user_profile = update_notifications(
            user=request.user,
            notifications=serializer.validated_data
        )
    except InvalidProfileError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(UserProfileSerializer(user_profile).data)
