import django_filters
from django.db.models import Q
from .models import InventoryItem

TRUTHY = ('true', '1', 'yes')


class InventoryItemFilter(django_filters.FilterSet):
    """Filter for InventoryItem model using django-filter"""

    search = django_filters.CharFilter(method='filter_search', label='Search')
    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    supplier = django_filters.NumberFilter(field_name='supplier_id', lookup_expr='exact')
    in_stock = django_filters.CharFilter(method='filter_in_stock', label='In Stock')

    class Meta:
        model = InventoryItem
        fields = ['search', 'category', 'supplier', 'in_stock']

    def filter_search(self, queryset, name, value):
        """Search across name, SKU, description and category"""
        search = (value or '').strip()
        if not search:
            return queryset
        return queryset.filter(
            Q(name__icontains=search) |
            Q(sku__icontains=search) |
            Q(description__icontains=search) |
            Q(category__icontains=search)
        )

    def filter_in_stock(self, queryset, name, value):
        if value is None or value == '':
            return queryset
        if value.lower() in TRUTHY:
            return queryset.filter(quantity__gt=0)
        return queryset.filter(quantity=0)


class CatalogFilter(django_filters.FilterSet):
    """Public catalog: explicit id selection wins over category"""

    ids = django_filters.CharFilter(method='filter_ids', label='Item IDs')
    category = django_filters.CharFilter(method='filter_category', label='Category')

    class Meta:
        model = InventoryItem
        fields = ['ids', 'category']

    def filter_ids(self, queryset, name, value):
        if not value:
            return queryset
        ids = [part.strip() for part in value.split(',') if part.strip().isdigit()]
        return queryset.filter(id__in=ids)

    def filter_category(self, queryset, name, value):
        if not value or self.data.get('ids'):
            return queryset
        return queryset.filter(category=value)
