from django.urls import path
from .views import (
    service_order_list_create, service_order_detail, service_order_kanban,
    service_order_change_status, service_order_request_approval,
    service_order_upload_photos, service_order_payment,
    service_order_items, service_order_item_delete,
    service_order_print, service_order_warranty_print, service_order_label,
    quote_detail, quote_approve, quote_reject,
    custom_field_list_create, custom_field_detail,
)

urlpatterns = [
    # ServiceOrder endpoints
    path('service-orders/', service_order_list_create, name='service-order-list-create'),
    path('service-orders/kanban/', service_order_kanban, name='service-order-kanban'),
    path('service-orders/<int:pk>/', service_order_detail, name='service-order-detail'),
    path('service-orders/<int:pk>/status/', service_order_change_status, name='service-order-status'),
    path('service-orders/<int:pk>/request-approval/', service_order_request_approval, name='service-order-request-approval'),
    path('service-orders/<int:pk>/photos/', service_order_upload_photos, name='service-order-photos'),
    path('service-orders/<int:pk>/payment/', service_order_payment, name='service-order-payment'),
    path('service-orders/<int:pk>/items/', service_order_items, name='service-order-items'),
    path('service-orders/<int:pk>/items/<int:item_id>/', service_order_item_delete, name='service-order-item-delete'),
    path('service-orders/<int:pk>/print/', service_order_print, name='service-order-print'),
    path('service-orders/<int:pk>/warranty/', service_order_warranty_print, name='service-order-warranty'),
    path('service-orders/<int:pk>/label/', service_order_label, name='service-order-label'),

    # Public quote links
    path('quotes/<uuid:token>/', quote_detail, name='quote-detail'),
    path('quotes/<uuid:token>/approve/', quote_approve, name='quote-approve'),
    path('quotes/<uuid:token>/reject/', quote_reject, name='quote-reject'),

    # Custom field endpoints
    path('service-order-fields/', custom_field_list_create, name='service-order-field-list-create'),
    path('service-order-fields/<int:pk>/', custom_field_detail, name='service-order-field-detail'),
]
