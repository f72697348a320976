from django.contrib import admin
from .models import ServiceOrder, ServiceOrderItem, ServiceOrderCustomField, ServiceOrderFieldValue


class ServiceOrderItemInline(admin.TabularInline):
    model = ServiceOrderItem
    extra = 0


class ServiceOrderFieldValueInline(admin.TabularInline):
    model = ServiceOrderFieldValue
    extra = 0


@admin.register(ServiceOrder)
class ServiceOrderAdmin(admin.ModelAdmin):
    list_display = ['os_number', 'customer', 'device', 'status', 'approval_status', 'total_amount',
                    'user', 'created_at']
    list_filter = ['status', 'approval_status', 'created_at']
    search_fields = ['os_number', 'customer__name', 'device__brand', 'device__model']
    readonly_fields = ['quote_token', 'approved_at', 'finalized_at']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    inlines = [ServiceOrderItemInline, ServiceOrderFieldValueInline]


@admin.register(ServiceOrderCustomField)
class ServiceOrderCustomFieldAdmin(admin.ModelAdmin):
    list_display = ['field_name', 'field_type', 'is_required', 'order_index', 'user']
    list_filter = ['field_type', 'is_required']
    search_fields = ['field_name']
    ordering = ['order_index']
