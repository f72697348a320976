from django.contrib import admin
from .models import PurchaseRequest


@admin.register(PurchaseRequest)
class PurchaseRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'inventory_item', 'requested_quantity', 'status', 'received_at', 'user', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['inventory_item__name', 'inventory_item__sku', 'notes']
    readonly_fields = ['received_at', 'created_at', 'updated_at']
    ordering = ['-created_at']
