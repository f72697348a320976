from django.urls import path
from .views import (
    inventory_item_list_create, inventory_item_detail, inventory_categories,
    catalog_list, catalog_item_detail,
)

urlpatterns = [
    # Inventory endpoints
    path('inventory/', inventory_item_list_create, name='inventory-item-list-create'),
    path('inventory/categories/', inventory_categories, name='inventory-categories'),
    path('inventory/<int:pk>/', inventory_item_detail, name='inventory-item-detail'),

    # Public catalog (no authentication)
    path('catalog/', catalog_list, name='catalog-list'),
    path('catalog/<int:pk>/', catalog_item_detail, name='catalog-item-detail'),
]
