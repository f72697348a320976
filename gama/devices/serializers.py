from rest_framework import serializers
from gama.core.fields import OwnedPrimaryKeyRelatedField, validate_min_length
from gama.parties.models import Customer
from .models import Device


class DeviceSerializer(serializers.ModelSerializer):
    customer = OwnedPrimaryKeyRelatedField(queryset=Customer.objects.all())
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    checklist = serializers.ListField(child=serializers.CharField(max_length=200), required=False)

    class Meta:
        model = Device
        fields = ['id', 'customer', 'customer_name', 'brand', 'model', 'serial_number',
                  'defect_description', 'password_info', 'checklist', 'created_at', 'updated_at']

    def validate_brand(self, value):
        return validate_min_length(value, 2, 'Brand')

    def validate_model(self, value):
        return validate_min_length(value, 2, 'Model')

    def validate_defect_description(self, value):
        return validate_min_length(value, 10, 'Defect description')
