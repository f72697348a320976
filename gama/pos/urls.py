from django.urls import path
from .views import pos_checkout, pos_sale_list, pos_sale_detail, pos_sale_receipt

urlpatterns = [
    # POS endpoints
    path('pos/checkout/', pos_checkout, name='pos-checkout'),
    path('pos/sales/', pos_sale_list, name='pos-sale-list'),
    path('pos/sales/<int:pk>/', pos_sale_detail, name='pos-sale-detail'),
    path('pos/sales/<int:pk>/receipt/', pos_sale_receipt, name='pos-sale-receipt'),
]
