from rest_framework import serializers
from gama.core.fields import validate_min_length
from .models import Customer, Supplier


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ['id', 'name', 'phone', 'email', 'address', 'created_at', 'updated_at']

    def validate_name(self, value):
        return validate_min_length(value, 2, 'Name')


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'name', 'contact_person', 'phone', 'email', 'address', 'created_at', 'updated_at']

    def validate_name(self, value):
        return validate_min_length(value, 2, 'Name')
