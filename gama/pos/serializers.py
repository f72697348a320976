from rest_framework import serializers
from gama.core.fields import OwnedPrimaryKeyRelatedField
from gama.inventory.models import InventoryItem
from gama.parties.models import Customer
from .models import POSSale, POSSaleItem, PAYMENT_METHOD_CHOICES


class POSSaleItemSerializer(serializers.ModelSerializer):
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    inventory_item_sku = serializers.CharField(source='inventory_item.sku', read_only=True)
    line_total = serializers.DecimalField(source='get_line_total', max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = POSSaleItem
        fields = ['id', 'inventory_item', 'inventory_item_name', 'inventory_item_sku', 'quantity',
                  'price_at_time', 'line_total']


class POSSaleSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True, default=None)
    items = POSSaleItemSerializer(many=True, read_only=True)
    items_count = serializers.IntegerField(source='get_items_count', read_only=True)

    class Meta:
        model = POSSale
        fields = ['id', 'customer', 'customer_name', 'total_amount', 'payment_method', 'finalized_at',
                  'items', 'items_count', 'created_at']


class CartItemSerializer(serializers.Serializer):
    inventory_item = OwnedPrimaryKeyRelatedField(queryset=InventoryItem.objects.all())
    quantity = serializers.IntegerField(min_value=1)


class CheckoutSerializer(serializers.Serializer):
    """Cart submitted at the counter"""
    customer = OwnedPrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES)
    items = CartItemSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("The cart is empty.")
        ids = [entry['inventory_item'].id for entry in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Each item may appear only once in the cart.")
        return value
