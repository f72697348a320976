"""
Pure reductions behind the dashboard widgets and report dialogs.

Inputs are plain dicts (as returned by `QuerySet.values()`), so every function
can be exercised without a database.
"""
from collections import Counter
from datetime import timedelta
from decimal import Decimal

from gama.core.utils import money, to_decimal

EXPIRING_SOON_DAYS = 30
TOP_LIMIT = 5

SERVICE_ORDER_STATUSES = ['pending', 'in_progress', 'ready', 'completed', 'cancelled']


def total_amount(rows, field='amount'):
    return sum((to_decimal(row.get(field)) for row in rows), Decimal('0.00'))


def financial_summary(transactions):
    """Income, expense and balance of a list of {type, amount} rows"""
    income = total_amount([t for t in transactions if t['type'] == 'income'])
    expense = total_amount([t for t in transactions if t['type'] == 'expense'])
    return {
        'income': money(income),
        'expense': money(expense),
        'balance': money(income - expense),
    }


def sales_summary(sales):
    return {
        'count': len(sales),
        'total': money(total_amount(sales, 'sale_price')),
    }


def pos_sales_summary(pos_income):
    """POS revenue from income transactions linked to POS sales"""
    return {
        'count': len(pos_income),
        'total': money(total_amount(pos_income)),
    }


def status_counts(statuses):
    counts = Counter(statuses)
    summary = {status: counts.get(status, 0) for status in SERVICE_ORDER_STATUSES}
    summary['total'] = len(statuses)
    return summary


def group_by_status(orders):
    grouped = {status: [] for status in SERVICE_ORDER_STATUSES}
    for order in orders:
        grouped.setdefault(order['status'], []).append(order)
    return grouped


def sales_overview(sales, limit=TOP_LIMIT):
    """Units sold, revenue, profit and the most sold models"""
    revenue = total_amount(sales, 'sale_price')
    cost = total_amount(sales, 'acquisition_cost')
    model_counts = Counter(sale['device_model'] for sale in sales)
    return {
        'total_sold': len(sales),
        'revenue': money(revenue),
        'profit': money(revenue - cost),
        'top_models': [{'model': model, 'count': count} for model, count in model_counts.most_common(limit)],
    }


def average_ticket(entries):
    """
    Revenue per distinct customer.

    entries: {customer_id, customer_name, amount} rows from service orders,
    device sales and POS sales; rows without a customer are ignored.
    """
    per_customer = {}
    for entry in entries:
        customer_id = entry.get('customer_id')
        if customer_id is None:
            continue
        bucket = per_customer.setdefault(customer_id, {
            'customer_id': customer_id,
            'customer_name': entry.get('customer_name') or '',
            'total': Decimal('0.00'),
            'transactions': 0,
        })
        bucket['total'] += to_decimal(entry.get('amount'))
        bucket['transactions'] += 1

    revenue = sum((bucket['total'] for bucket in per_customer.values()), Decimal('0.00'))
    customers = len(per_customer)
    ranking = sorted(per_customer.values(), key=lambda bucket: bucket['total'], reverse=True)
    return {
        'average_ticket': money(revenue / customers if customers else 0),
        'total_revenue': money(revenue),
        'total_customers': customers,
        'customers': [{**bucket, 'total': money(bucket['total'])} for bucket in ranking],
    }


def common_services(details, limit=TOP_LIMIT):
    """Most frequent service_details strings; limit=None returns all"""
    counts = Counter(detail.strip() for detail in details if detail and detail.strip())
    return [{'service': service, 'count': count} for service, count in counts.most_common(limit)]


def warranty_entry(sale, today):
    start = sale['created_on']
    end_date = start + timedelta(days=sale['warranty_days'])
    days_remaining = (end_date - today).days
    if days_remaining > 0:
        status = 'expiring_soon' if days_remaining <= EXPIRING_SOON_DAYS else 'active'
    else:
        status = 'expired'
    return {**sale, 'warranty_end_date': end_date, 'days_remaining': days_remaining, 'status': status}


def warranty_overview(sales, today):
    """
    Active, expiring soon and expired warranties.

    sales: {id, created_on (date), warranty_days, device_brand, device_model}.
    Expiring-soon warranties are also counted as active.
    """
    entries = [warranty_entry(sale, today) for sale in sales if sale.get('warranty_days')]
    expiring = [entry for entry in entries if entry['status'] == 'expiring_soon']
    return {
        'total_active': sum(1 for entry in entries if entry['status'] != 'expired'),
        'expiring_soon': len(expiring),
        'expired': sum(1 for entry in entries if entry['status'] == 'expired'),
        'expiring_sales': sorted(expiring, key=lambda entry: entry['days_remaining']),
    }


def warranty_report(sales, today):
    entries = [warranty_entry(sale, today) for sale in sales if sale.get('warranty_days')]
    return sorted(entries, key=lambda entry: entry['warranty_end_date'])
