from django.contrib import admin
from .models import Device


@admin.register(Device)
class DeviceAdmin(admin.ModelAdmin):
    list_display = ['brand', 'model', 'serial_number', 'customer', 'user', 'created_at']
    list_filter = ['brand', 'created_at']
    search_fields = ['brand', 'model', 'serial_number', 'customer__name']
    ordering = ['-created_at']
