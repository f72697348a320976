from django.urls import path
from .views import purchase_request_list_create, purchase_request_detail

urlpatterns = [
    # PurchaseRequest endpoints
    path('purchase-requests/', purchase_request_list_create, name='purchase-request-list-create'),
    path('purchase-requests/<int:pk>/', purchase_request_detail, name='purchase-request-detail'),
]
