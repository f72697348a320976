from rest_framework import serializers
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from gama.core.fields import OwnedPrimaryKeyRelatedField
from gama.inventory.models import InventoryItem
from .models import PurchaseRequest


class PurchaseRequestSerializer(serializers.ModelSerializer):
    inventory_item = OwnedPrimaryKeyRelatedField(queryset=InventoryItem.objects.all())
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    inventory_item_sku = serializers.CharField(source='inventory_item.sku', read_only=True)
    current_stock = serializers.IntegerField(source='inventory_item.quantity', read_only=True)
    requested_quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = PurchaseRequest
        fields = ['id', 'inventory_item', 'inventory_item_name', 'inventory_item_sku', 'current_stock',
                  'requested_quantity', 'status', 'notes', 'received_at', 'created_at', 'updated_at']
        read_only_fields = ['received_at', 'created_at', 'updated_at']

    def create(self, validated_data):
        with transaction.atomic():
            purchase_request = super().create(validated_data)
            if purchase_request.status == 'received':
                self.receive(purchase_request)
        return purchase_request

    def update(self, instance, validated_data):
        with transaction.atomic():
            locked = PurchaseRequest.objects.select_for_update().get(pk=instance.pk)
            instance.received_at = locked.received_at
            instance = super().update(instance, validated_data)
            if instance.status == 'received' and not instance.stock_applied:
                self.receive(instance)
        return instance

    def receive(self, purchase_request):
        """Add the requested quantity to stock, once per request"""
        now = timezone.now()
        # Only the writer that stamps received_at adds stock
        claimed = PurchaseRequest.objects.filter(pk=purchase_request.pk, received_at__isnull=True).update(
            received_at=now, updated_at=now
        )
        purchase_request.refresh_from_db(fields=['received_at', 'updated_at'])
        if claimed:
            InventoryItem.objects.filter(pk=purchase_request.inventory_item_id).update(
                quantity=F('quantity') + purchase_request.requested_quantity
            )
        purchase_request.inventory_item.refresh_from_db(fields=['quantity'])
