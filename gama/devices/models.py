from django.db import models
from gama.core.models import User
from gama.parties.models import Customer


class Device(models.Model):
    """Customer device brought in for service"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='devices')
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='devices')
    brand = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    serial_number = models.CharField(max_length=100, blank=True)
    defect_description = models.TextField()
    password_info = models.CharField(max_length=255, blank=True)
    checklist = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.brand} {self.model}"

    class Meta:
        db_table = 'devices'
        ordering = ['-created_at']
