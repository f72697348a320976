from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
import logging

from gama.core.serializers import settings_payload
from gama.core.utils import create_audit_log, filter_date_range
from gama.parties.serializers import CustomerSerializer, SupplierSerializer
from .models import Sale, WARRANTY_TEMPLATES
from .serializers import SaleSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_list_create(request):
    """List device sales or register a new one"""
    if request.method == 'GET':
        queryset = Sale.objects.filter(user=request.user).select_related('customer', 'supplier')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(device_brand__icontains=search) |
                Q(device_model__icontains=search) |
                Q(imei_serial__icontains=search) |
                Q(customer__name__icontains=search)
            )
        try:
            queryset = filter_date_range(queryset, request.query_params)
        except ValueError:
            return Response({'error': 'Invalid date. Use YYYY-MM-DD.'}, status=status.HTTP_400_BAD_REQUEST)
        serializer = SaleSerializer(queryset.order_by('-created_at'), many=True)
        return Response(serializer.data)
    else:
        serializer = SaleSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            sale = serializer.save(user=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Sale',
                object_id=sale.id,
                object_name=str(sale),
                changes={'sale_price': str(sale.sale_price), 'has_trade_in': bool(sale.trade_in_details)},
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def sale_detail(request, pk):
    """Retrieve, update or delete a sale"""
    sale = get_object_or_404(Sale.objects.select_related('customer', 'supplier'), pk=pk, user=request.user)

    if request.method == 'GET':
        serializer = SaleSerializer(sale)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SaleSerializer(
            sale, data=request.data, partial=request.method == 'PATCH', context={'request': request}
        )
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Sale',
                object_id=sale.id,
                object_name=str(sale),
                changes={'fields': sorted(serializer.validated_data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        sale_id, sale_name = sale.id, str(sale)
        sale.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Sale',
            object_id=sale_id,
            object_name=sale_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_receipt(request, pk):
    """Printable receipt: sale, customer, supplier and company settings"""
    sale = get_object_or_404(Sale.objects.select_related('customer', 'supplier'), pk=pk, user=request.user)
    return Response({
        'sale': SaleSerializer(sale).data,
        'customer': CustomerSerializer(sale.customer).data if sale.customer else None,
        'supplier': SupplierSerializer(sale.supplier).data if sale.supplier else None,
        'settings': settings_payload(request.user),
        'warranty_expires_on': sale.warranty_expires_on,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def warranty_templates(request):
    """Warranty policy texts keyed by number of days"""
    return Response({str(days): text for days, text in sorted(WARRANTY_TEMPLATES.items())})
