from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
import logging

from gama.core.utils import create_audit_log
from .models import PurchaseRequest
from .serializers import PurchaseRequestSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_request_list_create(request):
    """List purchase requests (search, status filters) or create one"""
    if request.method == 'GET':
        queryset = PurchaseRequest.objects.filter(user=request.user).select_related('inventory_item')
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(inventory_item__name__icontains=search) |
                Q(inventory_item__sku__icontains=search) |
                Q(notes__icontains=search)
            )
        serializer = PurchaseRequestSerializer(queryset.order_by('-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = PurchaseRequestSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            purchase_request = serializer.save(user=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='PurchaseRequest',
                object_id=purchase_request.id,
                object_name=str(purchase_request),
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_request_detail(request, pk):
    """Retrieve, update or delete a purchase request"""
    purchase_request = get_object_or_404(
        PurchaseRequest.objects.select_related('inventory_item'), pk=pk, user=request.user
    )

    if request.method == 'GET':
        serializer = PurchaseRequestSerializer(purchase_request)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        old_status = purchase_request.status
        serializer = PurchaseRequestSerializer(
            purchase_request, data=request.data, partial=request.method == 'PATCH', context={'request': request}
        )
        if serializer.is_valid():
            purchase_request = serializer.save()
            if purchase_request.status != old_status:
                create_audit_log(
                    request=request,
                    action='status_change',
                    model_name='PurchaseRequest',
                    object_id=purchase_request.id,
                    object_name=str(purchase_request),
                    changes={'status': {'old': old_status, 'new': purchase_request.status}},
                )
                if purchase_request.status == 'received':
                    logger.info(
                        f"Purchase request {purchase_request.id} received: "
                        f"+{purchase_request.requested_quantity} for item {purchase_request.inventory_item_id}"
                    )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        request_id, request_name = purchase_request.id, str(purchase_request)
        purchase_request.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='PurchaseRequest',
            object_id=request_id,
            object_name=request_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
