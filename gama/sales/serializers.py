from decimal import Decimal
from rest_framework import serializers
from gama.core.fields import LocalizedDecimalField, OwnedPrimaryKeyRelatedField, validate_min_length
from gama.parties.models import Customer, Supplier
from .models import Sale, WARRANTY_TEMPLATES

TRADE_IN_FIELDS = [
    'trade_in_device_brand', 'trade_in_device_model', 'trade_in_imei_serial',
    'trade_in_value', 'trade_in_condition',
]


class SaleSerializer(serializers.ModelSerializer):
    customer = OwnedPrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True, default=None)
    supplier = OwnedPrimaryKeyRelatedField(queryset=Supplier.objects.all(), required=False, allow_null=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, default=None)
    acquisition_cost = LocalizedDecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'), required=False)
    sale_price = LocalizedDecimalField(max_digits=10, decimal_places=2)
    warranty_days = serializers.IntegerField(min_value=0, required=False)
    warranty_expires_on = serializers.DateField(read_only=True)
    profit = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    # Flat trade-in input, stored as trade_in_details
    has_trade_in = serializers.BooleanField(write_only=True, required=False)
    trade_in_device_brand = serializers.CharField(write_only=True, required=False, allow_blank=True)
    trade_in_device_model = serializers.CharField(write_only=True, required=False, allow_blank=True)
    trade_in_imei_serial = serializers.CharField(write_only=True, required=False, allow_blank=True)
    trade_in_value = LocalizedDecimalField(max_digits=10, decimal_places=2, write_only=True, required=False, allow_null=True)
    trade_in_condition = serializers.CharField(write_only=True, required=False, allow_blank=True)

    class Meta:
        model = Sale
        fields = [
            'id', 'device_brand', 'device_model', 'imei_serial', 'condition', 'notes',
            'supplier', 'supplier_name', 'purchase_date', 'acquisition_cost',
            'customer', 'customer_name', 'sale_price', 'payment_method',
            'warranty_days', 'warranty_policy', 'warranty_expires_on', 'profit',
            'trade_in_details', 'has_trade_in', *TRADE_IN_FIELDS,
            'created_at', 'updated_at',
        ]
        read_only_fields = ['trade_in_details', 'created_at', 'updated_at']

    def validate_device_brand(self, value):
        return validate_min_length(value, 2, 'Brand')

    def validate_device_model(self, value):
        return validate_min_length(value, 2, 'Model')

    def validate_imei_serial(self, value):
        return validate_min_length(value, 10, 'IMEI/Serial')

    def validate_sale_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Sale price must be greater than zero.")
        return value

    def validate(self, attrs):
        has_trade_in = attrs.pop('has_trade_in', None)
        trade_in = {field: attrs.pop(field, None) for field in TRADE_IN_FIELDS}

        if has_trade_in:
            errors = {}
            if len((trade_in['trade_in_device_brand'] or '').strip()) < 2:
                errors['trade_in_device_brand'] = "Trade-in brand must be at least 2 characters."
            if len((trade_in['trade_in_device_model'] or '').strip()) < 2:
                errors['trade_in_device_model'] = "Trade-in model must be at least 2 characters."
            if len((trade_in['trade_in_imei_serial'] or '').strip()) < 10:
                errors['trade_in_imei_serial'] = "Trade-in IMEI/Serial must be at least 10 characters."
            if trade_in['trade_in_value'] is None or trade_in['trade_in_value'] <= 0:
                errors['trade_in_value'] = "Trade-in value must be greater than zero."
            if errors:
                raise serializers.ValidationError(errors)
            attrs['trade_in_details'] = {
                'brand': trade_in['trade_in_device_brand'].strip(),
                'model': trade_in['trade_in_device_model'].strip(),
                'imei_serial': trade_in['trade_in_imei_serial'].strip(),
                'value': str(trade_in['trade_in_value']),
                'condition': (trade_in['trade_in_condition'] or '').strip(),
            }
        elif has_trade_in is not None:
            attrs['trade_in_details'] = None

        warranty_days = attrs.get('warranty_days', getattr(self.instance, 'warranty_days', None))
        if warranty_days is None:
            warranty_days = Sale._meta.get_field('warranty_days').default
        policy = attrs.get('warranty_policy', getattr(self.instance, 'warranty_policy', ''))
        if not (policy or '').strip() and warranty_days in WARRANTY_TEMPLATES:
            attrs['warranty_policy'] = WARRANTY_TEMPLATES[warranty_days]
        return attrs
