from django.db import models
from decimal import Decimal
from gama.core.models import User
from gama.parties.models import Supplier


class InventoryItem(models.Model):
    """Stock item sold at the counter or used as a service part"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='inventory_items')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    sku = models.CharField(max_length=100, blank=True)
    category = models.CharField(max_length=100, blank=True)
    quantity = models.PositiveIntegerField(default=0)
    cost_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    selling_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, null=True, blank=True, related_name='inventory_items')
    image_urls = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def delete_blockers(self):
        blockers = []
        if self.pos_sale_items.exists():
            blockers.append('POS sales')
        if self.service_order_items.exists():
            blockers.append('service order parts')
        if self.purchase_requests.exists():
            blockers.append('purchase requests')
        return blockers

    class Meta:
        db_table = 'inventory_items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category'], name='idx_inventory_category'),
            models.Index(fields=['sku'], name='idx_inventory_sku'),
        ]
