"""Shared helpers: audit logging, money formatting and month ranges"""
import calendar
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.utils import timezone

from .models import AuditLog

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, status_change, ...)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., customer name, OS number)
    """
    if not action or not model_name or object_id is None:
        logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
        return None

    audit_user = user
    if audit_user is None and request is not None and hasattr(request, 'user'):
        audit_user = request.user

    try:
        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            changes=changes or {},
            ip_address=get_client_ip(request) if request else None,
        )
    except Exception as e:
        # Audit failures never break the main operation
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def to_decimal(value, default=Decimal('0.00')):
    """Coerce numbers and localized strings ("1234,50") into Decimal"""
    if value is None or value == '':
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip().replace(',', '.'))
    except (InvalidOperation, ValueError):
        return default


def money(value):
    """Format an amount with two decimal places, e.g. 60 -> '60.00'"""
    return str(to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def month_range(value=None):
    """
    Return (first_day, last_day) for a `YYYY-MM` string.

    Falls back to the current month when value is empty. Raises ValueError for
    malformed input so views can answer with HTTP 400.
    """
    if value:
        parsed = datetime.strptime(value, '%Y-%m').date()
    else:
        parsed = timezone.localdate()
    first_day = parsed.replace(day=1)
    last_day = parsed.replace(day=calendar.monthrange(parsed.year, parsed.month)[1])
    return first_day, last_day


def filter_date_range(queryset, params, field='created_at'):
    """
    Apply ?date_from / ?date_to (YYYY-MM-DD) on the date part of `field`.

    Raises ValueError for malformed dates so views can answer with HTTP 400.
    """
    for param, lookup in (('date_from', 'gte'), ('date_to', 'lte')):
        value = params.get(param, None)
        if value:
            day = datetime.strptime(value, '%Y-%m-%d').date()
            queryset = queryset.filter(**{f'{field}__date__{lookup}': day})
    return queryset
