from django.contrib import admin
from .models import Customer, Supplier


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'email', 'user', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'phone', 'email']
    ordering = ['name']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'phone', 'email', 'user', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'contact_person', 'email']
    ordering = ['name']
