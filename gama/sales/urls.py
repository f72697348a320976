from django.urls import path
from .views import sale_list_create, sale_detail, sale_receipt, warranty_templates

urlpatterns = [
    # Sale endpoints
    path('sales/', sale_list_create, name='sale-list-create'),
    path('sales/warranty-templates/', warranty_templates, name='sale-warranty-templates'),
    path('sales/<int:pk>/', sale_detail, name='sale-detail'),
    path('sales/<int:pk>/receipt/', sale_receipt, name='sale-receipt'),
]
