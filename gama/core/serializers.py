from rest_framework import serializers
from .models import User, UserSettings, AuditLog


class UserSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'avatar_url',
                  'display_name', 'is_active', 'is_staff', 'created_at', 'updated_at']
        read_only_fields = ['username', 'is_active', 'is_staff', 'created_at', 'updated_at']


class ProfileSerializer(serializers.ModelSerializer):
    """Editable subset of the user row"""
    avatar_url = serializers.URLField(max_length=500, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ['id', 'first_name', 'last_name', 'phone', 'avatar_url', 'updated_at']
        read_only_fields = ['updated_at']


class UserSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserSettings
        fields = ['id', 'service_order_template', 'default_guarantee_terms', 'company_name',
                  'company_cnpj', 'company_phone', 'company_address', 'company_slogan',
                  'company_logo_url', 'updated_at']
        read_only_fields = ['updated_at']


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'changes', 'ip_address', 'created_at']


def settings_payload(user):
    """Serialized settings of a user, defaults when never saved"""
    instance = UserSettings.objects.filter(user=user).first()
    if instance is None:
        instance = UserSettings(user=user)
    return UserSettingsSerializer(instance).data
