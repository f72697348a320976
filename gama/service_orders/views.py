from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.core.files.storage import default_storage
from django.db import transaction
from django.db.models import Q, F
from django.shortcuts import get_object_or_404
from django.utils import timezone
from PIL import Image, UnidentifiedImageError
import logging
import os
import uuid

from gama.core.serializers import settings_payload
from gama.core.utils import create_audit_log
from gama.financials.utils import record_income
from gama.inventory.models import InventoryItem
from gama.parties.serializers import CustomerSerializer
from gama.pos.models import PAYMENT_METHOD_CHOICES
from .label_generator import generate_service_order_label
from .models import ServiceOrder, ServiceOrderItem, ServiceOrderCustomField
from .serializers import (
    ServiceOrderSerializer, ServiceOrderCompositeSerializer, ServiceOrderListSerializer,
    ServiceOrderItemSerializer, ServiceOrderCustomFieldSerializer, DeviceInfoSerializer,
    QuoteSerializer, apply_status,
)

logger = logging.getLogger(__name__)

ALLOWED_PHOTO_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.gif'}


def order_queryset(user):
    return (
        ServiceOrder.objects.filter(user=user)
        .select_related('customer', 'device', 'part_supplier')
        .prefetch_related('items__inventory_item', 'field_values__custom_field')
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def service_order_list_create(request):
    """List service orders (search, status) or create customer + device + order at once"""
    if request.method == 'GET':
        queryset = ServiceOrder.objects.filter(user=request.user).select_related('customer', 'device')
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(os_number__icontains=search) |
                Q(customer__name__icontains=search) |
                Q(device__brand__icontains=search) |
                Q(device__model__icontains=search) |
                Q(issue_description__icontains=search)
            )
        serializer = ServiceOrderListSerializer(queryset.order_by('-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = ServiceOrderCompositeSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            order = serializer.save(user=request.user)
        except Exception as e:
            logger.error(f"Error creating service order: {str(e)}", exc_info=True)
            return Response(
                {'error': f'Erro ao criar Ordem de Serviço: {str(e)}'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        create_audit_log(
            request=request,
            action='create',
            model_name='ServiceOrder',
            object_id=order.id,
            object_name=order.os_number,
            changes={'customer_id': order.customer_id, 'device_id': order.device_id},
        )
        return Response(ServiceOrderSerializer(order).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def service_order_detail(request, pk):
    """Retrieve, update (with customer and device) or delete a service order"""
    order = get_object_or_404(order_queryset(request.user), pk=pk)

    if request.method == 'GET':
        return Response(ServiceOrderSerializer(order).data)
    elif request.method in ('PUT', 'PATCH'):
        old_status = order.status
        serializer = ServiceOrderCompositeSerializer(
            order, data=request.data, partial=request.method == 'PATCH', context={'request': request}
        )
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            order = serializer.save()
        except Exception as e:
            logger.error(f"Error updating service order {pk}: {str(e)}", exc_info=True)
            return Response(
                {'error': f'Erro ao atualizar Ordem de Serviço: {str(e)}'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        changes = {'fields': sorted(serializer.validated_data.keys())}
        if order.status != old_status:
            changes['status'] = {'old': old_status, 'new': order.status}
        create_audit_log(
            request=request,
            action='update',
            model_name='ServiceOrder',
            object_id=order.id,
            object_name=order.os_number,
            changes=changes,
        )
        return Response(ServiceOrderSerializer(order_queryset(request.user).get(pk=order.pk)).data)
    else:  # DELETE
        order_id, os_number = order.id, order.os_number
        with transaction.atomic():
            # Parts go back to stock
            for item in order.items.all():
                InventoryItem.objects.filter(pk=item.inventory_item_id).update(
                    quantity=F('quantity') + item.quantity_used
                )
            order.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='ServiceOrder',
            object_id=order_id,
            object_name=os_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def service_order_kanban(request):
    """Orders grouped in one column per status"""
    orders = ServiceOrder.objects.filter(user=request.user).select_related('customer', 'device').order_by('-created_at')
    grouped = {value: [] for value, _ in ServiceOrder.STATUS_CHOICES}
    for data in ServiceOrderListSerializer(orders, many=True).data:
        grouped[data['status']].append(data)
    columns = [
        {'status': value, 'label': label, 'count': len(grouped[value]), 'orders': grouped[value]}
        for value, label in ServiceOrder.STATUS_CHOICES
    ]
    return Response({'columns': columns})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def service_order_change_status(request, pk):
    """Move an order to another status column"""
    order = get_object_or_404(ServiceOrder, pk=pk, user=request.user)
    new_status = request.data.get('status')
    valid_statuses = [value for value, _ in ServiceOrder.STATUS_CHOICES]
    if new_status not in valid_statuses:
        return Response(
            {'error': f"Invalid status. Must be one of: {', '.join(valid_statuses)}"},
            status=status.HTTP_400_BAD_REQUEST
        )
    old_status = order.status
    apply_status(order, new_status)
    order.save(update_fields=['status', 'finalized_at', 'updated_at'])
    create_audit_log(
        request=request,
        action='status_change',
        model_name='ServiceOrder',
        object_id=order.id,
        object_name=order.os_number,
        changes={'status': {'old': old_status, 'new': new_status}},
    )
    return Response(ServiceOrderListSerializer(order).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def service_order_request_approval(request, pk):
    """Mark an order as waiting for the customer's quote approval"""
    order = get_object_or_404(ServiceOrder, pk=pk, user=request.user)
    if order.status in ('completed', 'cancelled'):
        return Response(
            {'error': f'Cannot request approval for a {order.status} service order.'},
            status=status.HTTP_400_BAD_REQUEST
        )
    order.approval_status = 'pending_approval'
    order.save(update_fields=['approval_status', 'updated_at'])
    logger.info(f"Quote approval requested for service order {order.os_number}")
    return Response({
        'approval_status': order.approval_status,
        'quote_token': str(order.quote_token),
        'quote_url': request.build_absolute_uri(f'/api/v1/quotes/{order.quote_token}/'),
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def quote_detail(request, token):
    """Public quote shared with the customer"""
    order = get_object_or_404(ServiceOrder.objects.select_related('customer', 'device'), quote_token=token)
    return Response(QuoteSerializer(order).data)


@api_view(['POST'])
@permission_classes([AllowAny])
def quote_approve(request, token):
    """Customer approves the quote with a signature"""
    signature = (request.data.get('signature') or '').strip()
    if not signature:
        return Response({'error': 'Signature is required to approve the quote.'}, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        order = get_object_or_404(
            ServiceOrder.objects.select_for_update().select_related('customer', 'device'), quote_token=token
        )
        if order.approval_status != 'pending_approval':
            return Response(
                {'error': 'This quote is not waiting for approval.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        order.approval_status = 'approved'
        order.status = 'in_progress'
        order.customer_signature = signature
        order.approved_at = timezone.now()
        order.save(update_fields=['approval_status', 'status', 'customer_signature', 'approved_at', 'updated_at'])

    create_audit_log(
        request=request,
        action='quote_approve',
        model_name='ServiceOrder',
        object_id=order.id,
        object_name=order.os_number,
        user=order.user,
    )
    logger.info(f"Quote approved for service order {order.os_number}")
    return Response(QuoteSerializer(order).data)


@api_view(['POST'])
@permission_classes([AllowAny])
def quote_reject(request, token):
    """Customer rejects the quote; the order is cancelled"""
    with transaction.atomic():
        order = get_object_or_404(
            ServiceOrder.objects.select_for_update().select_related('customer', 'device'), quote_token=token
        )
        if order.approval_status != 'pending_approval':
            return Response(
                {'error': 'This quote is not waiting for approval.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        order.approval_status = 'rejected'
        order.status = 'cancelled'
        order.save(update_fields=['approval_status', 'status', 'updated_at'])

    create_audit_log(
        request=request,
        action='quote_reject',
        model_name='ServiceOrder',
        object_id=order.id,
        object_name=order.os_number,
        user=order.user,
    )
    logger.info(f"Quote rejected for service order {order.os_number}")
    return Response(QuoteSerializer(order).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def service_order_upload_photos(request, pk):
    """Upload one or more photos (field 'photos') and append their URLs"""
    order = get_object_or_404(ServiceOrder, pk=pk, user=request.user)
    files = request.FILES.getlist('photos')
    if not files:
        return Response({'error': 'No photos provided.'}, status=status.HTTP_400_BAD_REQUEST)

    for upload in files:
        extension = os.path.splitext(upload.name)[1].lower()
        if extension not in ALLOWED_PHOTO_EXTENSIONS:
            return Response({'error': f"Unsupported file type: {upload.name}"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            Image.open(upload).verify()
        except (UnidentifiedImageError, OSError):
            return Response({'error': f"Invalid image: {upload.name}"}, status=status.HTTP_400_BAD_REQUEST)
        upload.seek(0)

    urls = []
    for upload in files:
        extension = os.path.splitext(upload.name)[1].lower()
        path = default_storage.save(f"service_orders/{order.id}/{uuid.uuid4().hex}{extension}", upload)
        urls.append(request.build_absolute_uri(default_storage.url(path)))

    order.photos = list(order.photos or []) + urls
    order.save(update_fields=['photos', 'updated_at'])
    logger.info(f"{len(urls)} photo(s) added to service order {order.os_number}")
    return Response({'photos': order.photos}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def service_order_payment(request, pk):
    """Register payment of the order total and complete the order"""
    payment_method = request.data.get('payment_method')
    valid_methods = [value for value, _ in PAYMENT_METHOD_CHOICES]
    if payment_method not in valid_methods:
        return Response(
            {'error': f"Invalid payment method. Must be one of: {', '.join(valid_methods)}"},
            status=status.HTTP_400_BAD_REQUEST
        )

    order = get_object_or_404(ServiceOrder, pk=pk, user=request.user)
    try:
        with transaction.atomic():
            order = ServiceOrder.objects.select_for_update().get(pk=order.pk)
            if order.is_paid:
                return Response({'error': 'This service order has already been paid.'}, status=status.HTTP_400_BAD_REQUEST)
            if order.status == 'cancelled':
                return Response({'error': 'Cannot pay a cancelled service order.'}, status=status.HTTP_400_BAD_REQUEST)
            if order.total_amount <= 0:
                return Response(
                    {'error': 'Service order total must be greater than zero.'},
                    status=status.HTTP_400_BAD_REQUEST
                )
            payment = record_income(
                request.user,
                amount=order.total_amount,
                description=f"Pagamento {order.os_number}",
                category='service_order',
                payment_method=payment_method,
                related_service_order=order,
            )
            apply_status(order, 'completed')
            order.save(update_fields=['status', 'finalized_at', 'updated_at'])
    except Exception as e:
        logger.error(f"Error registering payment for service order {pk}: {str(e)}", exc_info=True)
        return Response({'error': f'Erro ao registrar pagamento: {str(e)}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    create_audit_log(
        request=request,
        action='payment_add',
        model_name='ServiceOrder',
        object_id=order.id,
        object_name=order.os_number,
        changes={'amount': str(payment.amount), 'payment_method': payment_method, 'transaction_id': payment.id},
    )
    return Response({
        'transaction_id': payment.id,
        'cash_register': payment.cash_register_id,
        'amount': str(payment.amount),
        'status': order.status,
        'finalized_at': order.finalized_at,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def service_order_items(request, pk):
    """List parts used in an order or add a part (decrements stock)"""
    order = get_object_or_404(ServiceOrder, pk=pk, user=request.user)

    if request.method == 'GET':
        items = order.items.select_related('inventory_item')
        return Response(ServiceOrderItemSerializer(items, many=True).data)

    serializer = ServiceOrderItemSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    quantity = serializer.validated_data['quantity_used']
    with transaction.atomic():
        inventory_item = InventoryItem.objects.select_for_update().get(pk=serializer.validated_data['inventory_item'].pk)
        if inventory_item.quantity < quantity:
            return Response(
                {'error': f"Insufficient stock for '{inventory_item.name}'. Available: {inventory_item.quantity}"},
                status=status.HTTP_400_BAD_REQUEST
            )
        inventory_item.quantity = F('quantity') - quantity
        inventory_item.save(update_fields=['quantity', 'updated_at'])
        item = serializer.save(
            service_order=order,
            inventory_item=inventory_item,
            price_at_time=serializer.validated_data.get('price_at_time', inventory_item.selling_price),
        )

    create_audit_log(
        request=request,
        action='stock_adjust',
        model_name='ServiceOrder',
        object_id=order.id,
        object_name=order.os_number,
        changes={'inventory_item_id': inventory_item.id, 'quantity_used': quantity},
    )
    item.refresh_from_db()
    return Response(ServiceOrderItemSerializer(item).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def service_order_item_delete(request, pk, item_id):
    """Remove a part from an order and return it to stock"""
    item = get_object_or_404(
        ServiceOrderItem.objects.select_related('service_order'),
        pk=item_id, service_order_id=pk, service_order__user=request.user
    )
    with transaction.atomic():
        InventoryItem.objects.filter(pk=item.inventory_item_id).update(quantity=F('quantity') + item.quantity_used)
        item.delete()
    create_audit_log(
        request=request,
        action='stock_adjust',
        model_name='ServiceOrder',
        object_id=pk,
        object_name=item.service_order.os_number,
        changes={'inventory_item_id': item.inventory_item_id, 'quantity_returned': item.quantity_used},
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def service_order_print(request, pk):
    """Printable service order"""
    order = get_object_or_404(order_queryset(request.user), pk=pk)
    return Response({
        'order': ServiceOrderSerializer(order).data,
        'customer': CustomerSerializer(order.customer).data,
        'device': DeviceInfoSerializer(order.device).data,
        'items': ServiceOrderItemSerializer(order.items.all(), many=True).data,
        'settings': settings_payload(request.user),
        'warranty_expires_on': order.warranty_expires_on,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def service_order_warranty_print(request, pk):
    """Printable warranty note, valid from the finalization date"""
    order = get_object_or_404(ServiceOrder.objects.select_related('customer', 'device'), pk=pk, user=request.user)
    return Response({
        'os_number': order.os_number,
        'created_at': order.created_at,
        'finalized_at': order.finalized_at,
        'service_details': order.service_details,
        'total_amount': str(order.total_amount),
        'guarantee_terms': order.guarantee_terms,
        'warranty_days': order.warranty_days,
        'warranty_expires_on': order.warranty_expires_on,
        'customer': {'name': order.customer.name, 'phone': order.customer.phone},
        'device': {'brand': order.device.brand, 'model': order.device.model, 'serial_number': order.device.serial_number},
        'settings': settings_payload(request.user),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def service_order_label(request, pk):
    """Printable Code128 label of the OS number"""
    order = get_object_or_404(ServiceOrder.objects.select_related('customer', 'device'), pk=pk, user=request.user)
    try:
        image = generate_service_order_label(
            os_number=order.os_number,
            customer_name=order.customer.name,
            device_name=str(order.device),
            received_on=timezone.localtime(order.created_at).strftime('%d/%m/%Y'),
        )
    except Exception as e:
        logger.error(f"Label generation failed for {order.os_number}: {str(e)}", exc_info=True)
        return Response({'error': f'Erro ao gerar etiqueta: {str(e)}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'os_number': order.os_number, 'image': image})


# Custom field views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def custom_field_list_create(request):
    """List or create service order custom fields"""
    if request.method == 'GET':
        fields = ServiceOrderCustomField.objects.filter(user=request.user).order_by('order_index', 'id')
        return Response(ServiceOrderCustomFieldSerializer(fields, many=True).data)
    serializer = ServiceOrderCustomFieldSerializer(data=request.data)
    if serializer.is_valid():
        field = serializer.save(user=request.user)
        create_audit_log(
            request=request,
            action='create',
            model_name='ServiceOrderCustomField',
            object_id=field.id,
            object_name=field.field_name,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def custom_field_detail(request, pk):
    """Retrieve, update or delete a custom field (its values go with it)"""
    field = get_object_or_404(ServiceOrderCustomField, pk=pk, user=request.user)

    if request.method == 'GET':
        return Response(ServiceOrderCustomFieldSerializer(field).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ServiceOrderCustomFieldSerializer(field, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        field_id, field_name = field.id, field.field_name
        field.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='ServiceOrderCustomField',
            object_id=field_id,
            object_name=field_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
