from django.contrib import admin
from .models import CashRegister, FinancialTransaction


@admin.register(CashRegister)
class CashRegisterAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'status', 'initial_balance', 'final_balance', 'opening_time', 'closing_time']
    list_filter = ['status', 'opening_time']
    ordering = ['-opening_time']


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'transaction_date', 'description', 'type', 'amount', 'category', 'payment_method',
                    'cash_register', 'user']
    list_filter = ['type', 'category', 'payment_method', 'transaction_date']
    search_fields = ['description', 'category']
    ordering = ['-transaction_date']
    date_hierarchy = 'transaction_date'
