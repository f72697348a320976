from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
import logging

from gama.core.utils import create_audit_log, month_range
from .models import CashRegister, FinancialTransaction
from .serializers import FinancialTransactionSerializer, CashRegisterSerializer, CloseRegisterSerializer
from .utils import get_open_register

logger = logging.getLogger(__name__)

KIND_FILTERS = {
    'service_order': {'related_service_order__isnull': False},
    'device_sale': {'related_sale__isnull': False},
    'pos_sale': {'related_pos_sale__isnull': False},
    'manual': {
        'related_service_order__isnull': True,
        'related_sale__isnull': True,
        'related_pos_sale__isnull': True,
    },
}


# Cash register views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cash_register_list(request):
    """Register reports: every register of the user with its totals"""
    registers = CashRegister.objects.filter(user=request.user).order_by('-opening_time')
    status_filter = request.query_params.get('status', None)
    if status_filter:
        registers = registers.filter(status=status_filter)
    serializer = CashRegisterSerializer(registers, many=True)
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cash_register_open(request):
    """Open a register; refused while another one is open"""
    if get_open_register(request.user) is not None:
        return Response({'error': 'There is already an open cash register.'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = CashRegisterSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        with transaction.atomic():
            register = serializer.save(user=request.user, opening_time=timezone.now(), status='open')
    except IntegrityError:
        return Response({'error': 'There is already an open cash register.'}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request,
        action='register_open',
        model_name='CashRegister',
        object_id=register.id,
        object_name=str(register),
        changes={'initial_balance': str(register.initial_balance)},
    )
    logger.info(f"Cash register {register.id} opened by user {request.user.id}")
    return Response(CashRegisterSerializer(register).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cash_register_current(request):
    """The open register with its running balance, or null"""
    register = get_open_register(request.user)
    if register is None:
        return Response({'register': None})
    return Response({'register': CashRegisterSerializer(register).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cash_register_detail(request, pk):
    """A register with its totals and transactions"""
    register = get_object_or_404(CashRegister, pk=pk, user=request.user)
    data = CashRegisterSerializer(register).data
    data['transactions'] = FinancialTransactionSerializer(register.transactions.all(), many=True).data
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cash_register_close(request, pk):
    """Close a register; the final balance defaults to the running balance"""
    serializer = CloseRegisterSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        register = get_object_or_404(CashRegister.objects.select_for_update(), pk=pk, user=request.user)
        if register.status != 'open':
            return Response({'error': 'This cash register is already closed.'}, status=status.HTTP_400_BAD_REQUEST)
        final_balance = serializer.validated_data.get('final_balance')
        if final_balance is None:
            final_balance = register.get_running_balance()
        register.final_balance = final_balance
        register.closing_time = timezone.now()
        register.status = 'closed'
        if serializer.validated_data.get('notes'):
            register.notes = serializer.validated_data['notes']
        register.save()

    create_audit_log(
        request=request,
        action='register_close',
        model_name='CashRegister',
        object_id=register.id,
        object_name=str(register),
        changes={'final_balance': str(register.final_balance)},
    )
    logger.info(f"Cash register {register.id} closed with {register.final_balance}")
    return Response(CashRegisterSerializer(register).data)


# Ledger views
def create_transaction(request, forced_type=None):
    data = request.data.copy()
    if forced_type:
        data['type'] = forced_type
    serializer = FinancialTransactionSerializer(data=data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    entry = serializer.save(
        user=request.user,
        transaction_date=serializer.validated_data.get('transaction_date') or timezone.now(),
        cash_register=get_open_register(request.user),
    )
    create_audit_log(
        request=request,
        action='create',
        model_name='FinancialTransaction',
        object_id=entry.id,
        object_name=entry.description,
        changes={'type': entry.type, 'amount': str(entry.amount)},
    )
    return Response(FinancialTransactionSerializer(entry).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def transaction_list_create(request):
    """
    Ledger listing or manual entry.

    Lists the open register's transactions, or the current month's when no
    register is open. Filters: kind, type, month (YYYY-MM, overrides the
    register scope).
    """
    if request.method == 'POST':
        return create_transaction(request)

    queryset = FinancialTransaction.objects.filter(user=request.user)
    month = request.query_params.get('month', None)
    register = None if month else get_open_register(request.user)
    if register is not None:
        queryset = queryset.filter(cash_register=register)
    else:
        try:
            first_day, last_day = month_range(month)
        except ValueError:
            return Response({'error': 'Invalid month. Use YYYY-MM.'}, status=status.HTTP_400_BAD_REQUEST)
        queryset = queryset.filter(transaction_date__date__gte=first_day, transaction_date__date__lte=last_day)

    kind = request.query_params.get('kind', None)
    if kind:
        if kind not in KIND_FILTERS:
            return Response(
                {'error': f"Invalid kind. Must be one of: {', '.join(KIND_FILTERS)}"},
                status=status.HTTP_400_BAD_REQUEST
            )
        queryset = queryset.filter(**KIND_FILTERS[kind])
    type_filter = request.query_params.get('type', None)
    if type_filter:
        queryset = queryset.filter(type=type_filter)

    serializer = FinancialTransactionSerializer(queryset.order_by('-transaction_date', '-id'), many=True)
    return Response({
        'cash_register': register.id if register else None,
        'transactions': serializer.data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def expense_create(request):
    """Expense form: same as a manual entry with type forced to expense"""
    return create_transaction(request, forced_type='expense')


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def transaction_detail(request, pk):
    """Retrieve, update or delete a ledger entry"""
    entry = get_object_or_404(FinancialTransaction, pk=pk, user=request.user)

    if request.method == 'GET':
        return Response(FinancialTransactionSerializer(entry).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = FinancialTransactionSerializer(entry, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='FinancialTransaction',
                object_id=entry.id,
                object_name=entry.description,
                changes={'fields': sorted(serializer.validated_data.keys())},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        entry_id, description = entry.id, entry.description
        entry.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='FinancialTransaction',
            object_id=entry_id,
            object_name=description,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
