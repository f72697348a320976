from django.db import models
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
from gama.core.models import User
from gama.parties.models import Customer, Supplier

WARRANTY_TEMPLATES = {
    0: "Produto vendido sem garantia.",
    30: "Garantia de 30 dias para o aparelho, cobrindo defeitos de fabricação. Não cobre danos por mau uso, quedas ou contato com líquidos.",
    90: "Garantia de 90 dias para o aparelho, cobrindo defeitos de fabricação. Não cobre danos por mau uso, quedas ou contato com líquidos.",
    180: "Garantia de 180 dias para o aparelho, cobrindo defeitos de fabricação. Não cobre danos por mau uso, quedas ou contato com líquidos.",
}


class Sale(models.Model):
    """Sale of a used or new device, optionally with a trade-in"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sales')
    device_brand = models.CharField(max_length=100)
    device_model = models.CharField(max_length=100)
    imei_serial = models.CharField(max_length=100)
    condition = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, null=True, blank=True, related_name='sales')
    purchase_date = models.DateField(null=True, blank=True)
    acquisition_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, null=True, blank=True, related_name='sales')
    sale_price = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=50, blank=True)
    warranty_days = models.PositiveIntegerField(default=90)
    warranty_policy = models.TextField(blank=True)
    trade_in_details = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.device_brand} {self.device_model} ({self.imei_serial})"

    @property
    def profit(self):
        return self.sale_price - self.acquisition_cost

    @property
    def warranty_expires_on(self):
        if not self.warranty_days or not self.created_at:
            return None
        return timezone.localtime(self.created_at).date() + timedelta(days=self.warranty_days)

    class Meta:
        db_table = 'sales'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='idx_sale_user_created'),
        ]
