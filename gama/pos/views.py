from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import F
from django.shortcuts import get_object_or_404
from django.utils import timezone
from decimal import Decimal
import logging

from gama.core.serializers import settings_payload
from gama.core.utils import create_audit_log, filter_date_range
from gama.financials.utils import record_income
from gama.inventory.models import InventoryItem
from gama.parties.serializers import CustomerSerializer
from .models import POSSale, POSSaleItem
from .serializers import POSSaleSerializer, CheckoutSerializer

logger = logging.getLogger(__name__)


class InsufficientStock(Exception):
    pass


def pos_sale_queryset(user):
    return (
        POSSale.objects.filter(user=user)
        .select_related('customer')
        .prefetch_related('items__inventory_item')
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def pos_checkout(request):
    """
    Finalize a counter sale.

    Locks the cart's inventory rows, checks stock, creates the sale and its
    lines, decrements stock and records the income, all in one transaction.
    """
    serializer = CheckoutSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    cart = {entry['inventory_item'].id: entry['quantity'] for entry in data['items']}

    try:
        with transaction.atomic():
            locked_items = InventoryItem.objects.select_for_update().filter(pk__in=cart.keys()).order_by('pk')
            total = Decimal('0.00')
            for item in locked_items:
                if cart[item.id] > item.quantity:
                    raise InsufficientStock(
                        f"Insufficient stock for '{item.name}'. Available: {item.quantity}, requested: {cart[item.id]}"
                    )
                total += item.selling_price * cart[item.id]

            sale = POSSale.objects.create(
                user=request.user,
                customer=data.get('customer'),
                total_amount=total,
                payment_method=data['payment_method'],
                finalized_at=timezone.now(),
            )
            POSSaleItem.objects.bulk_create([
                POSSaleItem(pos_sale=sale, inventory_item=item, quantity=cart[item.id], price_at_time=item.selling_price)
                for item in locked_items
            ])
            for item in locked_items:
                InventoryItem.objects.filter(pk=item.pk).update(quantity=F('quantity') - cart[item.id])

            record_income(
                request.user,
                amount=total,
                description=f"Venda PDV #{sale.id}",
                category='pos_sale',
                payment_method=data['payment_method'],
                related_pos_sale=sale,
            )
    except InsufficientStock as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"POS checkout failed for user {request.user.id}: {str(e)}", exc_info=True)
        return Response({'error': f'Erro ao finalizar venda: {str(e)}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(
        request=request,
        action='pos_checkout',
        model_name='POSSale',
        object_id=sale.id,
        object_name=str(sale),
        changes={'total_amount': str(total), 'items': {str(k): v for k, v in cart.items()}},
    )
    logger.info(f"POS sale {sale.id} finalized: {total} via {sale.payment_method}")
    return Response(POSSaleSerializer(pos_sale_queryset(request.user).get(pk=sale.pk)).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pos_sale_list(request):
    """List POS sales, optionally within date_from/date_to"""
    queryset = pos_sale_queryset(request.user)
    try:
        queryset = filter_date_range(queryset, request.query_params)
    except ValueError:
        return Response({'error': 'Invalid date. Use YYYY-MM-DD.'}, status=status.HTTP_400_BAD_REQUEST)
    serializer = POSSaleSerializer(queryset.order_by('-created_at'), many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pos_sale_detail(request, pk):
    """Retrieve a POS sale with its lines"""
    sale = get_object_or_404(pos_sale_queryset(request.user), pk=pk)
    return Response(POSSaleSerializer(sale).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def pos_sale_receipt(request, pk):
    """Printable receipt: sale, lines, customer and company settings"""
    sale = get_object_or_404(pos_sale_queryset(request.user), pk=pk)
    return Response({
        'sale': POSSaleSerializer(sale).data,
        'customer': CustomerSerializer(sale.customer).data if sale.customer else None,
        'settings': settings_payload(request.user),
    })
