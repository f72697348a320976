from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from .models import UserSettings, AuditLog
from .serializers import (
    UserSerializer, ProfileSerializer, UserSettingsSerializer, AuditLogSerializer,
    settings_payload
)
from .utils import create_audit_log, filter_date_range

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['display_name'] = user.display_name
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that answers 401 when the user behind the token is gone"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except User.DoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with company settings"""
    user_data = UserSerializer(request.user).data
    user_data['settings'] = settings_payload(request.user)
    return Response(user_data)


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def profile_detail(request):
    """Retrieve or update the profile of the current user"""
    user = request.user

    if request.method == 'GET':
        return Response(ProfileSerializer(user).data)

    # Profile lives on the user row, so PUT behaves as an upsert of the editable fields
    serializer = ProfileSerializer(user, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        create_audit_log(
            request=request,
            action='update',
            model_name='User',
            object_id=user.id,
            object_name=user.display_name,
            changes={'fields': sorted(serializer.validated_data.keys())},
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def settings_detail(request):
    """Retrieve or update settings of the current user (created on first access)"""
    user_settings, _ = UserSettings.objects.get_or_create(user=request.user)

    if request.method == 'GET':
        return Response(UserSettingsSerializer(user_settings).data)

    serializer = UserSettingsSerializer(
        user_settings, data=request.data, partial=request.method == 'PATCH'
    )
    if serializer.is_valid():
        serializer.save()
        create_audit_log(
            request=request,
            action='update',
            model_name='UserSettings',
            object_id=user_settings.id,
            object_name=user_settings.company_name or request.user.username,
            changes={'fields': sorted(serializer.validated_data.keys())},
        )
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs of the current user with filtering"""
    queryset = AuditLog.objects.filter(user=request.user).select_related('user')

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    try:
        queryset = filter_date_range(queryset, request.query_params)
    except ValueError:
        return Response({'error': 'Invalid date. Use YYYY-MM-DD.'}, status=status.HTTP_400_BAD_REQUEST)

    queryset = queryset.order_by('-created_at')
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk, user=request.user)
    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)
