from django.db import models
from gama.core.models import User


class Customer(models.Model):
    """Customers of the shop"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='customers')
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def delete_blockers(self):
        """Names of related records that prevent deletion"""
        blockers = []
        if self.devices.exists():
            blockers.append('devices')
        if self.service_orders.exists():
            blockers.append('service orders')
        if self.sales.exists():
            blockers.append('sales')
        if self.pos_sales.exists():
            blockers.append('POS sales')
        return blockers

    class Meta:
        db_table = 'customers'
        ordering = ['name']


class Supplier(models.Model):
    """Suppliers of parts, stock items and devices"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='suppliers')
    name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def delete_blockers(self):
        blockers = []
        if self.inventory_items.exists():
            blockers.append('inventory items')
        if self.sales.exists():
            blockers.append('sales')
        if self.service_orders.exists():
            blockers.append('service orders')
        return blockers

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']
