from decimal import Decimal
from rest_framework import serializers
from django.db import transaction
from django.utils import timezone
from gama.core.fields import LocalizedDecimalField, OwnedPrimaryKeyRelatedField, validate_min_length
from gama.core.models import UserSettings
from gama.devices.models import Device
from gama.devices.serializers import DeviceSerializer
from gama.inventory.models import InventoryItem
from gama.parties.models import Customer, Supplier
from gama.parties.serializers import CustomerSerializer
from .models import ServiceOrder, ServiceOrderItem, ServiceOrderCustomField, ServiceOrderFieldValue


def money_field(**kwargs):
    return LocalizedDecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.00'), **kwargs)


def apply_status(order, new_status):
    """Set status, stamping finalized_at the first time an order is completed"""
    order.status = new_status
    if new_status == 'completed' and order.finalized_at is None:
        order.finalized_at = timezone.now()


class DeviceInfoSerializer(DeviceSerializer):
    """Device fields edited together with a service order"""
    customer = None
    customer_name = None

    class Meta(DeviceSerializer.Meta):
        fields = ['id', 'brand', 'model', 'serial_number', 'defect_description', 'password_info', 'checklist']


class ServiceOrderItemSerializer(serializers.ModelSerializer):
    inventory_item = OwnedPrimaryKeyRelatedField(queryset=InventoryItem.objects.all())
    inventory_item_name = serializers.CharField(source='inventory_item.name', read_only=True)
    quantity_used = serializers.IntegerField(min_value=1)
    price_at_time = money_field(required=False)
    line_total = serializers.DecimalField(source='get_line_total', max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = ServiceOrderItem
        fields = ['id', 'inventory_item', 'inventory_item_name', 'quantity_used', 'price_at_time',
                  'line_total', 'created_at']
        read_only_fields = ['created_at']


class ServiceOrderCustomFieldSerializer(serializers.ModelSerializer):
    options = serializers.ListField(child=serializers.CharField(min_length=1), required=False, allow_null=True)

    class Meta:
        model = ServiceOrderCustomField
        fields = ['id', 'field_name', 'field_type', 'is_required', 'options', 'order_index', 'created_at']
        read_only_fields = ['created_at']

    def validate_field_name(self, value):
        return validate_min_length(value, 2, 'Field name')

    def validate(self, attrs):
        field_type = attrs.get('field_type', getattr(self.instance, 'field_type', None))
        options = attrs.get('options', getattr(self.instance, 'options', None))
        if field_type == 'select' and not options:
            raise serializers.ValidationError({'options': "Select fields need at least one option."})
        if field_type != 'select' and 'options' in attrs:
            attrs['options'] = None
        return attrs


class ServiceOrderFieldValueSerializer(serializers.ModelSerializer):
    custom_field = OwnedPrimaryKeyRelatedField(queryset=ServiceOrderCustomField.objects.all())
    field_name = serializers.CharField(source='custom_field.field_name', read_only=True)
    field_type = serializers.CharField(source='custom_field.field_type', read_only=True)
    value = serializers.CharField(allow_blank=True, required=False, default='')

    class Meta:
        model = ServiceOrderFieldValue
        fields = ['id', 'custom_field', 'field_name', 'field_type', 'value']


class ServiceOrderListSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    device_name = serializers.CharField(source='device.__str__', read_only=True)

    class Meta:
        model = ServiceOrder
        fields = ['id', 'os_number', 'status', 'approval_status', 'customer', 'customer_name',
                  'device', 'device_name', 'issue_description', 'total_amount', 'created_at', 'updated_at']


class ServiceOrderSerializer(serializers.ModelSerializer):
    """Full service order with customer, device, parts and custom field values"""
    customer = CustomerSerializer(read_only=True)
    device = DeviceInfoSerializer(read_only=True)
    part_supplier = OwnedPrimaryKeyRelatedField(queryset=Supplier.objects.all(), required=False, allow_null=True)
    part_supplier_name = serializers.CharField(source='part_supplier.name', read_only=True, default=None)
    parts_cost = money_field(required=False)
    service_cost = money_field(required=False)
    total_amount = money_field(required=False)
    freight_cost = money_field(required=False)
    warranty_days = serializers.IntegerField(min_value=0, required=False)
    client_checklist = serializers.JSONField(required=False)
    items = ServiceOrderItemSerializer(many=True, read_only=True)
    field_values = ServiceOrderFieldValueSerializer(many=True, required=False)
    is_paid = serializers.BooleanField(read_only=True)
    warranty_expires_on = serializers.DateField(read_only=True)

    class Meta:
        model = ServiceOrder
        fields = [
            'id', 'os_number', 'customer', 'device', 'status', 'approval_status',
            'issue_description', 'service_details', 'parts_cost', 'service_cost', 'total_amount',
            'freight_cost', 'part_supplier', 'part_supplier_name', 'guarantee_terms', 'warranty_days',
            'customer_signature', 'approved_at', 'finalized_at', 'client_checklist', 'photos',
            'is_untestable', 'casing_status', 'quote_token', 'items', 'field_values', 'is_paid',
            'warranty_expires_on', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'approval_status', 'customer_signature', 'approved_at', 'finalized_at', 'photos',
            'quote_token', 'created_at', 'updated_at',
        ]

    def validate_os_number(self, value):
        if not value:
            return value
        queryset = ServiceOrder.objects.filter(os_number=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A service order with this number already exists.")
        return value

    def save_field_values(self, order, field_values):
        for entry in field_values:
            ServiceOrderFieldValue.objects.update_or_create(
                service_order=order,
                custom_field=entry['custom_field'],
                defaults={'value': entry.get('value', '')},
            )

    def update(self, instance, validated_data):
        field_values = validated_data.pop('field_values', None)
        new_status = validated_data.pop('status', None)
        with transaction.atomic():
            if new_status is not None:
                apply_status(instance, new_status)
            instance = super().update(instance, validated_data)
            if field_values is not None:
                self.save_field_values(instance, field_values)
        return instance


class ServiceOrderCompositeSerializer(ServiceOrderSerializer):
    """Create or edit customer, device and order in one atomic write"""
    customer = CustomerSerializer()
    device = DeviceInfoSerializer()

    def validate(self, attrs):
        if self.instance is None:
            user = self.context['request'].user
            provided = {
                entry['custom_field'].id: (entry.get('value') or '').strip()
                for entry in attrs.get('field_values', [])
            }
            missing = [
                field.field_name
                for field in ServiceOrderCustomField.objects.filter(user=user, is_required=True)
                if not provided.get(field.id)
            ]
            if missing:
                raise serializers.ValidationError({'field_values': [f"'{name}' is required." for name in missing]})
        return attrs

    def create(self, validated_data):
        customer_data = validated_data.pop('customer')
        device_data = validated_data.pop('device')
        field_values = validated_data.pop('field_values', [])
        new_status = validated_data.pop('status', 'pending')
        user = validated_data['user']

        with transaction.atomic():
            customer = Customer.objects.create(user=user, **customer_data)
            device = Device.objects.create(user=user, customer=customer, **device_data)
            if not (validated_data.get('issue_description') or '').strip():
                validated_data['issue_description'] = device.defect_description
            if not (validated_data.get('guarantee_terms') or '').strip():
                user_settings = UserSettings.objects.filter(user=user).first()
                validated_data['guarantee_terms'] = user_settings.default_guarantee_terms if user_settings else ''
            order = ServiceOrder(customer=customer, device=device, **validated_data)
            apply_status(order, new_status)
            order.save()
            self.save_field_values(order, field_values)
        return order

    def update(self, instance, validated_data):
        customer_data = validated_data.pop('customer', None)
        device_data = validated_data.pop('device', None)

        with transaction.atomic():
            if customer_data:
                for attr, value in customer_data.items():
                    setattr(instance.customer, attr, value)
                instance.customer.save()
            if device_data:
                for attr, value in device_data.items():
                    setattr(instance.device, attr, value)
                instance.device.save()
            if 'issue_description' in validated_data and not (validated_data['issue_description'] or '').strip():
                validated_data['issue_description'] = instance.device.defect_description
            instance = super().update(instance, validated_data)
        return instance


class QuoteSerializer(serializers.ModelSerializer):
    """Public view of an order shared for approval"""
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    device_brand = serializers.CharField(source='device.brand', read_only=True)
    device_model = serializers.CharField(source='device.model', read_only=True)

    class Meta:
        model = ServiceOrder
        fields = ['os_number', 'created_at', 'status', 'approval_status', 'issue_description',
                  'service_details', 'total_amount', 'photos', 'customer_name', 'device_brand',
                  'device_model', 'approved_at']
