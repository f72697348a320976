from django.urls import path
from .views import device_list_create, device_detail, imei_consult

urlpatterns = [
    # Device endpoints
    path('devices/', device_list_create, name='device-list-create'),
    path('devices/<int:pk>/', device_detail, name='device-detail'),

    # IMEI consultation
    path('imei/consult/', imei_consult, name='imei-consult'),
]
