from django.contrib import admin
from .models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['id', 'device_brand', 'device_model', 'imei_serial', 'customer', 'sale_price',
                    'acquisition_cost', 'warranty_days', 'user', 'created_at']
    list_filter = ['device_brand', 'payment_method', 'warranty_days', 'created_at']
    search_fields = ['device_brand', 'device_model', 'imei_serial', 'customer__name']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
