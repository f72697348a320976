"""Ledger helpers shared by service order payments and POS checkout"""
import logging
from django.utils import timezone
from .models import CashRegister, FinancialTransaction

logger = logging.getLogger(__name__)


def get_open_register(user, lock=False):
    queryset = CashRegister.objects.filter(user=user, status='open')
    if lock:
        queryset = queryset.select_for_update()
    return queryset.first()


def record_income(user, amount, description, category, payment_method='', **related):
    """
    Record an income transaction linked to the open cash register (if any).

    related accepts related_service_order, related_sale or related_pos_sale.
    Must be called inside the caller's transaction.atomic() block.
    """
    register = get_open_register(user)
    transaction_row = FinancialTransaction.objects.create(
        user=user,
        transaction_date=timezone.now(),
        description=description,
        amount=amount,
        type='income',
        category=category,
        payment_method=payment_method,
        cash_register=register,
        **related,
    )
    logger.info(
        f"Income recorded for user {user.id}: {amount} ({category}), "
        f"register={register.id if register else None}"
    )
    return transaction_row
