"""
Cache invalidation signals
Bump the owner's report cache version whenever a reported row changes
"""
from django.db.models.signals import post_save, post_delete
import logging

from .cache_utils import bump_reports_version

logger = logging.getLogger(__name__)


def invalidate_owner_reports(sender, instance, **kwargs):
    owner_id = getattr(instance, 'user_id', None)
    if owner_id:
        bump_reports_version(owner_id)


def connect_report_signals():
    from gama.financials.models import FinancialTransaction, CashRegister
    from gama.pos.models import POSSale
    from gama.sales.models import Sale
    from gama.service_orders.models import ServiceOrder

    for model in (FinancialTransaction, CashRegister, POSSale, Sale, ServiceOrder):
        post_save.connect(invalidate_owner_reports, sender=model, dispatch_uid=f'reports_save_{model.__name__}')
        post_delete.connect(invalidate_owner_reports, sender=model, dispatch_uid=f'reports_delete_{model.__name__}')
    logger.debug("Report cache invalidation signals connected")
