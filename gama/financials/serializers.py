from decimal import Decimal
from rest_framework import serializers
from gama.core.fields import LocalizedDecimalField, validate_min_length
from .models import CashRegister, FinancialTransaction


class FinancialTransactionSerializer(serializers.ModelSerializer):
    amount = LocalizedDecimalField(max_digits=10, decimal_places=2)
    transaction_date = serializers.DateTimeField(required=False)
    kind = serializers.CharField(read_only=True)

    class Meta:
        model = FinancialTransaction
        fields = ['id', 'transaction_date', 'description', 'amount', 'type', 'category', 'payment_method',
                  'kind', 'cash_register', 'related_service_order', 'related_sale', 'related_pos_sale',
                  'created_at']
        read_only_fields = ['cash_register', 'related_service_order', 'related_sale', 'related_pos_sale',
                            'created_at']

    def validate_description(self, value):
        return validate_min_length(value, 3, 'Description')

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than zero.")
        return value


class CashRegisterSerializer(serializers.ModelSerializer):
    initial_balance = LocalizedDecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'), required=False)
    total_income = serializers.SerializerMethodField()
    total_expense = serializers.SerializerMethodField()
    running_balance = serializers.SerializerMethodField()

    class Meta:
        model = CashRegister
        fields = ['id', 'initial_balance', 'final_balance', 'opening_time', 'closing_time', 'status', 'notes',
                  'total_income', 'total_expense', 'running_balance']
        read_only_fields = ['final_balance', 'opening_time', 'closing_time', 'status']

    def get_total_income(self, obj):
        return str(obj.get_totals()[0])

    def get_total_expense(self, obj):
        return str(obj.get_totals()[1])

    def get_running_balance(self, obj):
        return str(obj.get_running_balance())


class CloseRegisterSerializer(serializers.Serializer):
    final_balance = LocalizedDecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)
