from decimal import Decimal
from rest_framework import serializers
from gama.core.fields import LocalizedDecimalField, OwnedPrimaryKeyRelatedField, validate_min_length
from gama.parties.models import Supplier
from .models import InventoryItem


class InventoryItemSerializer(serializers.ModelSerializer):
    supplier = OwnedPrimaryKeyRelatedField(queryset=Supplier.objects.all(), required=False, allow_null=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, default=None)
    cost_price = LocalizedDecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'), required=False)
    selling_price = LocalizedDecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'), required=False)
    image_urls = serializers.ListField(child=serializers.URLField(max_length=500), required=False)

    class Meta:
        model = InventoryItem
        fields = ['id', 'name', 'description', 'sku', 'category', 'quantity', 'cost_price',
                  'selling_price', 'supplier', 'supplier_name', 'image_urls', 'created_at', 'updated_at']

    def validate_name(self, value):
        return validate_min_length(value, 2, 'Name')


class CatalogItemSerializer(serializers.ModelSerializer):
    """Fields safe to expose without authentication"""

    class Meta:
        model = InventoryItem
        fields = ['id', 'name', 'description', 'selling_price', 'category', 'image_urls']


class CatalogItemDetailSerializer(serializers.ModelSerializer):
    supplier = serializers.CharField(source='supplier.name', read_only=True, default=None)

    class Meta:
        model = InventoryItem
        fields = ['id', 'name', 'description', 'sku', 'selling_price', 'category', 'supplier', 'image_urls']
