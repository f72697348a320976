from django.db import models
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
import uuid
from gama.core.models import User
from gama.devices.models import Device
from gama.inventory.models import InventoryItem
from gama.parties.models import Customer, Supplier


def generate_os_number():
    """OS-YYYYMMDD-XXXX, unique across all orders"""
    while True:
        os_number = f"OS-{timezone.localdate().strftime('%Y%m%d')}-{uuid.uuid4().hex[:4].upper()}"
        if not ServiceOrder.objects.filter(os_number=os_number).exists():
            return os_number


class ServiceOrder(models.Model):
    """Repair order for a customer device"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('in_progress', 'In Progress'),
        ('ready', 'Ready'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    APPROVAL_STATUS_CHOICES = [
        ('none', 'None'),
        ('pending_approval', 'Pending Approval'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='service_orders')
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='service_orders')
    device = models.ForeignKey(Device, on_delete=models.PROTECT, related_name='service_orders')
    os_number = models.CharField(max_length=50, unique=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    approval_status = models.CharField(max_length=20, choices=APPROVAL_STATUS_CHOICES, default='none')
    issue_description = models.TextField(blank=True)
    service_details = models.TextField(blank=True)
    parts_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    service_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    freight_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    part_supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, null=True, blank=True, related_name='service_orders')
    guarantee_terms = models.TextField(blank=True)
    warranty_days = models.PositiveIntegerField(default=90)
    customer_signature = models.TextField(blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    finalized_at = models.DateTimeField(null=True, blank=True)
    client_checklist = models.JSONField(default=dict, blank=True)
    photos = models.JSONField(default=list, blank=True)
    is_untestable = models.BooleanField(default=False)
    casing_status = models.CharField(max_length=100, blank=True)
    quote_token = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.os_number or f"OS-{self.id}"

    def save(self, *args, **kwargs):
        if not self.os_number:
            self.os_number = generate_os_number()
        super().save(*args, **kwargs)

    @property
    def is_paid(self):
        return self.transactions.filter(type='income').exists()

    @property
    def warranty_expires_on(self):
        if not self.finalized_at or not self.warranty_days:
            return None
        return timezone.localtime(self.finalized_at).date() + timedelta(days=self.warranty_days)

    class Meta:
        db_table = 'service_orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='idx_so_user_status'),
            models.Index(fields=['user', '-created_at'], name='idx_so_user_created'),
        ]


class ServiceOrderItem(models.Model):
    """Inventory part used in a service order"""
    service_order = models.ForeignKey(ServiceOrder, on_delete=models.CASCADE, related_name='items')
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='service_order_items')
    quantity_used = models.PositiveIntegerField()
    price_at_time = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    def get_line_total(self):
        return self.quantity_used * self.price_at_time

    class Meta:
        db_table = 'service_order_items'


class ServiceOrderCustomField(models.Model):
    """User-defined extra field shown on service orders"""
    FIELD_TYPE_CHOICES = [
        ('text', 'Text'),
        ('textarea', 'Textarea'),
        ('select', 'Select'),
        ('checkbox', 'Checkbox'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='service_order_custom_fields')
    field_name = models.CharField(max_length=100)
    field_type = models.CharField(max_length=20, choices=FIELD_TYPE_CHOICES)
    is_required = models.BooleanField(default=False)
    options = models.JSONField(null=True, blank=True)
    order_index = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.field_name

    class Meta:
        db_table = 'service_order_custom_fields'
        ordering = ['order_index', 'id']


class ServiceOrderFieldValue(models.Model):
    """Value of a custom field for one service order"""
    service_order = models.ForeignKey(ServiceOrder, on_delete=models.CASCADE, related_name='field_values')
    custom_field = models.ForeignKey(ServiceOrderCustomField, on_delete=models.CASCADE, related_name='values')
    value = models.TextField(blank=True)

    class Meta:
        db_table = 'service_order_field_values'
        unique_together = [['service_order', 'custom_field']]
