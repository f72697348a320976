from django.urls import path
from .views import (
    cash_register_list, cash_register_open, cash_register_current, cash_register_detail,
    cash_register_close, transaction_list_create, expense_create, transaction_detail,
)

urlpatterns = [
    # CashRegister endpoints
    path('cash-registers/', cash_register_list, name='cash-register-list'),
    path('cash-registers/open/', cash_register_open, name='cash-register-open'),
    path('cash-registers/current/', cash_register_current, name='cash-register-current'),
    path('cash-registers/<int:pk>/', cash_register_detail, name='cash-register-detail'),
    path('cash-registers/<int:pk>/close/', cash_register_close, name='cash-register-close'),

    # FinancialTransaction endpoints
    path('transactions/', transaction_list_create, name='transaction-list-create'),
    path('transactions/expense/', expense_create, name='transaction-expense'),
    path('transactions/<int:pk>/', transaction_detail, name='transaction-detail'),
]
