from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.shortcuts import get_object_or_404
import logging

from gama.core.utils import create_audit_log
from .filters import InventoryItemFilter, CatalogFilter
from .models import InventoryItem
from .serializers import InventoryItemSerializer, CatalogItemSerializer, CatalogItemDetailSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_item_list_create(request):
    """List inventory items (search, category, in_stock filters) or create one"""
    if request.method == 'GET':
        queryset = InventoryItem.objects.filter(user=request.user).select_related('supplier').order_by('name')
        filterset = InventoryItemFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = InventoryItemSerializer(filterset.qs, many=True)
        return Response(serializer.data)
    else:
        serializer = InventoryItemSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            item = serializer.save(user=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='InventoryItem',
                object_id=item.id,
                object_name=item.name,
                changes={'quantity': item.quantity},
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_item_detail(request, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(InventoryItem.objects.select_related('supplier'), pk=pk, user=request.user)

    if request.method == 'GET':
        serializer = InventoryItemSerializer(item)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        old_quantity = item.quantity
        serializer = InventoryItemSerializer(
            item, data=request.data, partial=request.method == 'PATCH', context={'request': request}
        )
        if serializer.is_valid():
            serializer.save()
            changes = {'fields': sorted(serializer.validated_data.keys())}
            action = 'update'
            if item.quantity != old_quantity:
                action = 'stock_adjust'
                changes['quantity'] = {'old': old_quantity, 'new': item.quantity}
            create_audit_log(
                request=request,
                action=action,
                model_name='InventoryItem',
                object_id=item.id,
                object_name=item.name,
                changes=changes,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        blockers = item.delete_blockers()
        if blockers:
            return Response(
                {'error': f"Cannot delete item '{item.name}': it is referenced by {', '.join(blockers)}."},
                status=status.HTTP_400_BAD_REQUEST
            )
        item_id, item_name = item.id, item.name
        item.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='InventoryItem',
            object_id=item_id,
            object_name=item_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_categories(request):
    """Distinct categories used by the current user's items"""
    categories = (
        InventoryItem.objects.filter(user=request.user)
        .exclude(category='')
        .values_list('category', flat=True)
        .distinct()
        .order_by('category')
    )
    return Response(list(categories))


@api_view(['GET'])
@permission_classes([AllowAny])
def catalog_list(request):
    """Public catalog of items in stock, optionally limited to ids=1,2,3 or a category"""
    queryset = InventoryItem.objects.filter(quantity__gt=0).order_by('name')
    filterset = CatalogFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
    serializer = CatalogItemSerializer(filterset.qs, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([AllowAny])
def catalog_item_detail(request, pk):
    """Public product detail; out of stock items are not found"""
    item = InventoryItem.objects.filter(pk=pk, quantity__gt=0).select_related('supplier').first()
    if item is None:
        return Response(
            {'error': 'Produto não encontrado ou fora de estoque.'},
            status=status.HTTP_404_NOT_FOUND
        )
    serializer = CatalogItemDetailSerializer(item)
    return Response(serializer.data)
