from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import F
from django.db.models.functions import TruncDate
from django.utils import timezone
from functools import wraps
import logging

from gama.core.cache_utils import cached_report
from gama.core.utils import month_range, money
from gama.financials.models import FinancialTransaction
from gama.financials.serializers import FinancialTransactionSerializer
from gama.pos.models import POSSale
from gama.pos.serializers import POSSaleSerializer
from gama.sales.models import Sale
from gama.sales.serializers import SaleSerializer
from gama.service_orders.models import ServiceOrder
from gama.service_orders.serializers import ServiceOrderListSerializer
from . import aggregations

logger = logging.getLogger(__name__)


def month_report(view):
    """Parse ?month=YYYY-MM (default current month) into first_day/last_day"""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            first_day, last_day = month_range(request.query_params.get('month', None))
        except ValueError:
            return Response({'error': 'Invalid month. Use YYYY-MM.'}, status=status.HTTP_400_BAD_REQUEST)
        return view(request, first_day, last_day, *args, **kwargs)
    return wrapper


def period(first_day, last_day):
    return {'from': first_day.isoformat(), 'to': last_day.isoformat()}


def month_transactions(user, first_day, last_day):
    return FinancialTransaction.objects.filter(
        user=user, transaction_date__date__gte=first_day, transaction_date__date__lte=last_day
    )


def month_rows(model, user, first_day, last_day):
    return model.objects.filter(user=user, created_at__date__gte=first_day, created_at__date__lte=last_day)


# Builders shared by the single widgets and the dashboard bundle
def build_financial_summary(user, first_day, last_day):
    rows = list(month_transactions(user, first_day, last_day).values('type', 'amount'))
    return aggregations.financial_summary(rows)


def build_sales_summary(user, first_day, last_day):
    return aggregations.sales_summary(list(month_rows(Sale, user, first_day, last_day).values('sale_price')))


def build_pos_sales_summary(user, first_day, last_day):
    rows = month_transactions(user, first_day, last_day).filter(type='income', related_pos_sale__isnull=False)
    return aggregations.pos_sales_summary(list(rows.values('amount')))


def build_service_order_summary(user):
    statuses = list(ServiceOrder.objects.filter(user=user).values_list('status', flat=True))
    return aggregations.status_counts(statuses)


def build_sales_overview(user, first_day, last_day):
    rows = month_rows(Sale, user, first_day, last_day).values('device_model', 'sale_price', 'acquisition_cost')
    return aggregations.sales_overview(list(rows))


def ticket_entries(user, first_day, last_day):
    entries = []
    for model, amount_field in ((ServiceOrder, 'total_amount'), (Sale, 'sale_price'), (POSSale, 'total_amount')):
        rows = (
            month_rows(model, user, first_day, last_day)
            .filter(customer__isnull=False)
            .values('customer_id', customer_name=F('customer__name'), amount=F(amount_field))
        )
        entries.extend(rows)
    return entries


def build_average_ticket(user, first_day, last_day):
    return aggregations.average_ticket(ticket_entries(user, first_day, last_day))


def service_details(user, first_day, last_day):
    return list(
        month_rows(ServiceOrder, user, first_day, last_day)
        .exclude(service_details='')
        .values_list('service_details', flat=True)
    )


def warranty_sales(user, first_day, last_day):
    rows = (
        month_rows(Sale, user, first_day, last_day)
        .filter(warranty_days__gt=0)
        .annotate(created_on=TruncDate('created_at'))
        .values('id', 'created_on', 'warranty_days', 'device_brand', 'device_model', 'imei_serial',
                customer_name=F('customer__name'))
    )
    return list(rows)


@cached_report('dashboard')
def build_dashboard(user, first_day, last_day):
    today = timezone.localdate()
    average = build_average_ticket(user, first_day, last_day)
    return {
        'period': period(first_day, last_day),
        'financial_summary': build_financial_summary(user, first_day, last_day),
        'sales_summary': build_sales_summary(user, first_day, last_day),
        'pos_sales_summary': build_pos_sales_summary(user, first_day, last_day),
        'service_order_summary': build_service_order_summary(user),
        'sales_overview': build_sales_overview(user, first_day, last_day),
        'average_ticket': {key: average[key] for key in ('average_ticket', 'total_revenue', 'total_customers')},
        'common_services': aggregations.common_services(service_details(user, first_day, last_day)),
        'warranty_overview': aggregations.warranty_overview(warranty_sales(user, first_day, last_day), today),
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def dashboard(request, first_day, last_day):
    """Every dashboard widget payload at once (cached per user)"""
    return Response(build_dashboard(request.user, first_day, last_day))


# Financial reports
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def financial_summary(request, first_day, last_day):
    """Income, expense and balance of the month"""
    return Response({'period': period(first_day, last_day), **build_financial_summary(request.user, first_day, last_day)})


def transaction_report(request, first_day, last_day, tx_type=None):
    queryset = month_transactions(request.user, first_day, last_day)
    if tx_type:
        queryset = queryset.filter(type=tx_type)
    queryset = queryset.order_by('-transaction_date', '-id')
    rows = list(queryset)
    summary = aggregations.financial_summary([{'type': row.type, 'amount': row.amount} for row in rows])
    return Response({
        'period': period(first_day, last_day),
        'transactions': FinancialTransactionSerializer(rows, many=True).data,
        **summary,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def income_report(request, first_day, last_day):
    """Income transactions of the month"""
    return transaction_report(request, first_day, last_day, 'income')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def expense_report(request, first_day, last_day):
    """Expense transactions of the month"""
    return transaction_report(request, first_day, last_day, 'expense')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def balance_report(request, first_day, last_day):
    """Every transaction of the month with income, expense and balance"""
    return transaction_report(request, first_day, last_day)


# Device sales reports
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def sales_summary(request, first_day, last_day):
    return Response({'period': period(first_day, last_day), **build_sales_summary(request.user, first_day, last_day)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def sales_overview(request, first_day, last_day):
    """Units sold, revenue, profit and top models"""
    return Response({'period': period(first_day, last_day), **build_sales_overview(request.user, first_day, last_day)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def sales_report(request, first_day, last_day):
    sales = month_rows(Sale, request.user, first_day, last_day).select_related('customer', 'supplier').order_by('-created_at')
    data = SaleSerializer(sales, many=True).data
    return Response({
        'period': period(first_day, last_day),
        'sales': data,
        **aggregations.sales_overview([
            {'device_model': row['device_model'], 'sale_price': row['sale_price'],
             'acquisition_cost': row['acquisition_cost']}
            for row in data
        ]),
    })


# POS reports
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def pos_sales_summary(request, first_day, last_day):
    """POS revenue of the month, from income transactions linked to POS sales"""
    return Response({'period': period(first_day, last_day), **build_pos_sales_summary(request.user, first_day, last_day)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def pos_sales_report(request, first_day, last_day):
    pos_sales = (
        month_rows(POSSale, request.user, first_day, last_day)
        .select_related('customer')
        .prefetch_related('items__inventory_item')
        .order_by('-created_at')
    )
    data = POSSaleSerializer(pos_sales, many=True).data
    return Response({
        'period': period(first_day, last_day),
        'pos_sales': data,
        'count': len(data),
        'total': money(aggregations.total_amount(data, 'total_amount')),
    })


# Service order reports
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def service_order_summary(request):
    """Order counts per status, all time"""
    return Response(build_service_order_summary(request.user))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def service_order_report(request, first_day, last_day):
    """The month's orders grouped by status"""
    orders = (
        month_rows(ServiceOrder, request.user, first_day, last_day)
        .select_related('customer', 'device')
        .order_by('-created_at')
    )
    data = ServiceOrderListSerializer(orders, many=True).data
    grouped = aggregations.group_by_status(data)
    return Response({
        'period': period(first_day, last_day),
        'counts': aggregations.status_counts([row['status'] for row in data]),
        'orders': grouped,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def common_services(request, first_day, last_day):
    """Top 5 service descriptions of the month"""
    return Response({
        'period': period(first_day, last_day),
        'services': aggregations.common_services(service_details(request.user, first_day, last_day)),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def common_services_report(request, first_day, last_day):
    """Every service description of the month with its count"""
    return Response({
        'period': period(first_day, last_day),
        'services': aggregations.common_services(service_details(request.user, first_day, last_day), limit=None),
    })


# Customer reports
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def average_ticket(request, first_day, last_day):
    """Revenue per distinct customer across orders, sales and POS sales"""
    result = build_average_ticket(request.user, first_day, last_day)
    result.pop('customers')
    return Response({'period': period(first_day, last_day), **result})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def average_ticket_report(request, first_day, last_day):
    """Per-customer totals behind the average ticket, highest first"""
    return Response({'period': period(first_day, last_day), **build_average_ticket(request.user, first_day, last_day)})


# Warranty reports
@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def warranty_overview(request, first_day, last_day):
    """Warranties of the month's sales: active, expiring in 30 days, expired"""
    sales = warranty_sales(request.user, first_day, last_day)
    return Response({
        'period': period(first_day, last_day),
        **aggregations.warranty_overview(sales, timezone.localdate()),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@month_report
def warranty_report(request, first_day, last_day):
    sales = warranty_sales(request.user, first_day, last_day)
    return Response({
        'period': period(first_day, last_day),
        'warranties': aggregations.warranty_report(sales, timezone.localdate()),
    })
