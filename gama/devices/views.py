from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
import logging

from gama.core.utils import create_audit_log
from .models import Device
from .serializers import DeviceSerializer
from .imei_service import consult_imei, is_valid_imei, ImeiProviderError

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def device_list_create(request):
    """List all devices or create a new device"""
    if request.method == 'GET':
        queryset = Device.objects.filter(user=request.user).select_related('customer')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(brand__icontains=search) |
                Q(model__icontains=search) |
                Q(serial_number__icontains=search) |
                Q(customer__name__icontains=search)
            )
        customer_id = request.query_params.get('customer', None)
        if customer_id:
            queryset = queryset.filter(customer_id=customer_id)
        serializer = DeviceSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = DeviceSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            device = serializer.save(user=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Device',
                object_id=device.id,
                object_name=str(device),
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def device_detail(request, pk):
    """Retrieve (with its service orders), update or delete a device"""
    device = get_object_or_404(Device.objects.select_related('customer'), pk=pk, user=request.user)

    if request.method == 'GET':
        from gama.service_orders.serializers import ServiceOrderListSerializer
        data = DeviceSerializer(device).data
        data['service_orders'] = ServiceOrderListSerializer(
            device.service_orders.select_related('customer', 'device').order_by('-created_at'), many=True
        ).data
        return Response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = DeviceSerializer(
            device, data=request.data, partial=request.method == 'PATCH', context={'request': request}
        )
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Device',
                object_id=device.id,
                object_name=str(device),
                changes={'fields': sorted(serializer.validated_data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if device.service_orders.exists():
            return Response(
                {'error': f"Cannot delete device '{device}': it is referenced by service orders."},
                status=status.HTTP_400_BAD_REQUEST
            )
        device_id, device_name = device.id, str(device)
        device.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Device',
            object_id=device_id,
            object_name=device_name,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def imei_consult(request):
    """Consult the registration status of an IMEI"""
    imei = request.data.get('imei')
    if not is_valid_imei(imei):
        return Response(
            {'error': 'IMEI inválido. Deve conter 14 a 16 dígitos numéricos.'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        result = consult_imei(imei)
    except ImeiProviderError as e:
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)

    logger.info(f"IMEI consulted by user {request.user.id}: status={result['status']}")
    return Response(result)
