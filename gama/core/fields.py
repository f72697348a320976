"""Serializer fields and validators shared by the business apps"""
from rest_framework import serializers


def validate_min_length(value, length, label):
    if len((value or '').strip()) < length:
        raise serializers.ValidationError(f"{label} must be at least {length} characters.")
    return value.strip()


class OwnedPrimaryKeyRelatedField(serializers.PrimaryKeyRelatedField):
    """Primary key field limited to rows owned by the requesting user"""

    def get_queryset(self):
        queryset = super().get_queryset()
        request = self.context.get('request')
        if request is None or not request.user.is_authenticated:
            return queryset.none()
        return queryset.filter(user=request.user)


class LocalizedDecimalField(serializers.DecimalField):
    """DecimalField that also accepts comma decimals such as "1234,50" """

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = data.strip().replace(',', '.')
        return super().to_internal_value(data)
