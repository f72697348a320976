from django.db import models
from gama.core.models import User
from gama.inventory.models import InventoryItem


class PurchaseRequest(models.Model):
    """Restock request for an inventory item"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('ordered', 'Ordered'),
        ('received', 'Received'),
        ('cancelled', 'Cancelled'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='purchase_requests')
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='purchase_requests')
    requested_quantity = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    notes = models.TextField(blank=True)
    received_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.inventory_item.name} x{self.requested_quantity} ({self.status})"

    @property
    def stock_applied(self):
        """Stock is added the first time a request is received"""
        return self.received_at is not None

    class Meta:
        db_table = 'purchase_requests'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_purchase_request_status'),
        ]
