from django.db import models
from django.db.models import Q, Sum
from decimal import Decimal
from gama.core.models import User
from gama.pos.models import POSSale, PAYMENT_METHOD_CHOICES
from gama.sales.models import Sale
from gama.service_orders.models import ServiceOrder


class CashRegister(models.Model):
    """Cash register session; at most one open per user"""
    STATUS_CHOICES = [
        ('open', 'Open'),
        ('closed', 'Closed'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='cash_registers')
    initial_balance = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    final_balance = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    opening_time = models.DateTimeField()
    closing_time = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='open')
    notes = models.TextField(blank=True)

    def __str__(self):
        return f"Register #{self.id} ({self.status})"

    def get_totals(self):
        """Income and expense recorded against this register"""
        totals = self.transactions.aggregate(
            income=Sum('amount', filter=Q(type='income')),
            expense=Sum('amount', filter=Q(type='expense')),
        )
        return totals['income'] or Decimal('0.00'), totals['expense'] or Decimal('0.00')

    def get_running_balance(self):
        income, expense = self.get_totals()
        return self.initial_balance + income - expense

    class Meta:
        db_table = 'cash_registers'
        ordering = ['-opening_time']
        constraints = [
            models.UniqueConstraint(fields=['user'], condition=Q(status='open'), name='uniq_open_register_per_user'),
        ]


class FinancialTransaction(models.Model):
    """Ledger entry; income from orders, sales and POS, or a manual entry"""
    TYPE_CHOICES = [
        ('income', 'Income'),
        ('expense', 'Expense'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='financial_transactions')
    transaction_date = models.DateTimeField()
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    category = models.CharField(max_length=100, blank=True)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    cash_register = models.ForeignKey(CashRegister, on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    related_service_order = models.ForeignKey(ServiceOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    related_sale = models.ForeignKey(Sale, on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    related_pos_sale = models.ForeignKey(POSSale, on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.type} {self.amount} - {self.description}"

    @property
    def kind(self):
        if self.related_service_order_id:
            return 'service_order'
        if self.related_sale_id:
            return 'device_sale'
        if self.related_pos_sale_id:
            return 'pos_sale'
        return 'manual'

    class Meta:
        db_table = 'financial_transactions'
        ordering = ['-transaction_date', '-id']
        indexes = [
            models.Index(fields=['user', '-transaction_date'], name='idx_fin_tx_user_date'),
            models.Index(fields=['type'], name='idx_fin_tx_type'),
        ]
