from django.contrib import admin
from .models import POSSale, POSSaleItem


class POSSaleItemInline(admin.TabularInline):
    model = POSSaleItem
    extra = 0


@admin.register(POSSale)
class POSSaleAdmin(admin.ModelAdmin):
    list_display = ['id', 'customer', 'total_amount', 'payment_method', 'finalized_at', 'user']
    list_filter = ['payment_method', 'finalized_at']
    search_fields = ['customer__name', 'items__inventory_item__name']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    inlines = [POSSaleItemInline]
