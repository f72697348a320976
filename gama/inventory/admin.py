from django.contrib import admin
from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'sku', 'category', 'quantity', 'cost_price', 'selling_price', 'supplier', 'user']
    list_filter = ['category', 'created_at']
    search_fields = ['name', 'sku', 'description']
    ordering = ['name']
