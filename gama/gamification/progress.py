"""Points ranking and goal progress"""
from decimal import Decimal, ROUND_HALF_UP
from django.db.models import Sum, Value
from django.db.models.functions import Coalesce
from gama.core.models import User
from gama.pos.models import POSSale, POSSaleItem
from gama.sales.models import Sale
from gama.service_orders.models import ServiceOrder
from .models import Goal


def dense_rank(rows, key):
    """Assign a 1-based dense rank to rows already sorted by key, descending"""
    ranked = []
    rank = 0
    previous = None
    for row in rows:
        value = row[key]
        if value != previous:
            rank += 1
            previous = value
        ranked.append({**row, 'rank': rank})
    return ranked


def points_ranking(current_user=None):
    users = (
        User.objects.filter(is_active=True)
        .annotate(total_points=Coalesce(Sum('achievements__achievement__points_reward'), Value(0)))
        .order_by('-total_points', 'username')
    )
    rows = [
        {
            'user_id': user.id,
            'username': user.username,
            'display_name': user.display_name,
            'avatar_url': user.avatar_url,
            'total_points': user.total_points,
        }
        for user in users
    ]
    ranked = dense_rank(rows, 'total_points')
    for row in ranked:
        row['is_current_user'] = current_user is not None and row['user_id'] == current_user.id
    return ranked


def goal_current_value(goal):
    """Value reached for the goal's metric between start_date and end_date"""
    owner_filter = {} if goal.scope == 'global' else {'user': goal.created_by}
    window = {'created_at__date__gte': goal.start_date, 'created_at__date__lte': goal.end_date}

    if goal.metric == Goal.METRIC_REVENUE:
        sales = Sale.objects.filter(**owner_filter, **window).aggregate(total=Sum('sale_price'))['total']
        pos = POSSale.objects.filter(**owner_filter, **window).aggregate(total=Sum('total_amount'))['total']
        return (sales or Decimal('0.00')) + (pos or Decimal('0.00'))
    if goal.metric == Goal.METRIC_SERVICE_ORDERS:
        return Decimal(ServiceOrder.objects.filter(
            **owner_filter,
            status='completed',
            finalized_at__date__gte=goal.start_date,
            finalized_at__date__lte=goal.end_date,
        ).count())
    if goal.metric == Goal.METRIC_ITEMS:
        item_owner = {'pos_sale__user': goal.created_by} if goal.scope != 'global' else {}
        total = POSSaleItem.objects.filter(
            **item_owner,
            pos_sale__created_at__date__gte=goal.start_date,
            pos_sale__created_at__date__lte=goal.end_date,
        ).aggregate(total=Sum('quantity'))['total']
        return Decimal(total or 0)
    return Decimal('0.00')


def progress_percentage(current_value, target_value):
    if not target_value or target_value <= 0:
        return Decimal('0.00')
    percentage = Decimal(current_value) / Decimal(target_value) * 100
    return min(percentage, Decimal('100')).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def goal_progress(goal):
    current_value = goal_current_value(goal)
    return {
        'current_value': str(current_value),
        'target_value': str(goal.target_value),
        'percentage': str(progress_percentage(current_value, goal.target_value)),
    }
