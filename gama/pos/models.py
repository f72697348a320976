from django.db import models
from decimal import Decimal
from gama.core.models import User
from gama.inventory.models import InventoryItem
from gama.parties.models import Customer

PAYMENT_METHOD_CHOICES = [
    ('pix', 'PIX'),
    ('cash', 'Cash'),
    ('credit_card', 'Credit Card'),
    ('debit_card', 'Debit Card'),
]


class POSSale(models.Model):
    """Counter sale of inventory items"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='pos_sales')
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, null=True, blank=True, related_name='pos_sales')
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    finalized_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"POS-{self.id}"

    def get_items_count(self):
        return sum(item.quantity for item in self.items.all())

    class Meta:
        db_table = 'pos_sales'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='idx_pos_sale_user_created'),
        ]


class POSSaleItem(models.Model):
    """POS sale line"""
    pos_sale = models.ForeignKey(POSSale, on_delete=models.CASCADE, related_name='items')
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='pos_sale_items')
    quantity = models.PositiveIntegerField()
    price_at_time = models.DecimalField(max_digits=10, decimal_places=2)

    def get_line_total(self):
        return self.quantity * self.price_at_time

    class Meta:
        db_table = 'pos_sale_items'
