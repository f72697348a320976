from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
import logging

from gama.core.utils import create_audit_log
from .models import Customer, Supplier
from .serializers import CustomerSerializer, SupplierSerializer

logger = logging.getLogger(__name__)


def search_parties(queryset, search):
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(phone__icontains=search) |
            Q(email__icontains=search)
        )
    return queryset


def customer_history(customer):
    """Devices, service orders, device sales and POS sales of a customer"""
    from gama.devices.serializers import DeviceSerializer
    from gama.service_orders.serializers import ServiceOrderListSerializer
    from gama.sales.serializers import SaleSerializer
    from gama.pos.serializers import POSSaleSerializer

    return {
        'devices': DeviceSerializer(customer.devices.order_by('-created_at'), many=True).data,
        'service_orders': ServiceOrderListSerializer(
            customer.service_orders.select_related('customer', 'device').order_by('-created_at'), many=True
        ).data,
        'sales': SaleSerializer(customer.sales.order_by('-created_at'), many=True).data,
        'pos_sales': POSSaleSerializer(
            customer.pos_sales.prefetch_related('items__inventory_item').order_by('-created_at'), many=True
        ).data,
    }


# Customer views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List all customers or create a new customer"""
    if request.method == 'GET':
        queryset = Customer.objects.filter(user=request.user).order_by('name')
        queryset = search_parties(queryset, request.query_params.get('search', None))
        serializer = CustomerSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = CustomerSerializer(data=request.data)
        if serializer.is_valid():
            customer = serializer.save(user=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Customer',
                object_id=customer.id,
                object_name=customer.name,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve (with history), update or delete a customer"""
    customer = get_object_or_404(Customer, pk=pk, user=request.user)

    if request.method == 'GET':
        data = CustomerSerializer(customer).data
        data.update(customer_history(customer))
        return Response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CustomerSerializer(customer, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Customer',
                object_id=customer.id,
                object_name=customer.name,
                changes={'fields': sorted(serializer.validated_data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        blockers = customer.delete_blockers()
        if blockers:
            return Response(
                {'error': f"Cannot delete customer '{customer.name}': it is referenced by {', '.join(blockers)}."},
                status=status.HTTP_400_BAD_REQUEST
            )
        customer_id, customer_name = customer.id, customer.name
        customer.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Customer',
            object_id=customer_id,
            object_name=customer_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


# Supplier views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = Supplier.objects.filter(user=request.user).order_by('name')
        queryset = search_parties(queryset, request.query_params.get('search', None))
        serializer = SupplierSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            supplier = serializer.save(user=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Supplier',
                object_id=supplier.id,
                object_name=supplier.name,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk, user=request.user)

    if request.method == 'GET':
        serializer = SupplierSerializer(supplier)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Supplier',
                object_id=supplier.id,
                object_name=supplier.name,
                changes={'fields': sorted(serializer.validated_data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        blockers = supplier.delete_blockers()
        if blockers:
            return Response(
                {'error': f"Cannot delete supplier '{supplier.name}': it is referenced by {', '.join(blockers)}."},
                status=status.HTTP_400_BAD_REQUEST
            )
        supplier_id, supplier_name = supplier.id, supplier.name
        supplier.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Supplier',
            object_id=supplier_id,
            object_name=supplier_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
