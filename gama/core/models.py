from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Extended user model; the profile fields live on the user row"""
    phone = models.CharField(max_length=20, blank=True, null=True)
    avatar_url = models.URLField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def display_name(self):
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username

    class Meta:
        db_table = 'users'


class UserSettings(models.Model):
    """Per-user preferences used by print views and new service orders"""
    TEMPLATE_CHOICES = [
        ('default', 'Default'),
        ('compact', 'Compact'),
        ('detailed', 'Detailed'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='app_settings')
    service_order_template = models.CharField(max_length=20, choices=TEMPLATE_CHOICES, default='default')
    default_guarantee_terms = models.TextField(blank=True)
    company_name = models.CharField(max_length=200, blank=True)
    company_cnpj = models.CharField(max_length=30, blank=True)
    company_phone = models.CharField(max_length=30, blank=True)
    company_address = models.TextField(blank=True)
    company_slogan = models.CharField(max_length=255, blank=True)
    company_logo_url = models.URLField(max_length=500, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Settings for {self.user.username}"

    class Meta:
        db_table = 'user_settings'


class AuditLog(models.Model):
    """Audit log for create/update/delete and other state changes"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('status_change', 'Status Change'),
        ('stock_adjust', 'Stock Adjustment'),
        ('payment_add', 'Payment Added'),
        ('pos_checkout', 'POS Checkout'),
        ('quote_approve', 'Quote Approved'),
        ('quote_reject', 'Quote Rejected'),
        ('register_open', 'Cash Register Opened'),
        ('register_close', 'Cash Register Closed'),
        ('achievement_award', 'Achievement Awarded'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., customer name, OS number)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_audit_created'),
            models.Index(fields=['action'], name='idx_audit_action'),
            models.Index(fields=['model_name'], name='idx_audit_model'),
        ]
