"""
URL configuration for the Gama backend.

Every app mounts its routes under `api/v1/`.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Gama Management Admin Panel"
admin.site.site_title = "Gama Management Admin Portal"
admin.site.index_title = "Welcome to Gama Admin Panel"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('gama.core.urls')),
    path('api/v1/', include('gama.parties.urls')),
    path('api/v1/', include('gama.devices.urls')),
    path('api/v1/', include('gama.inventory.urls')),
    path('api/v1/', include('gama.purchasing.urls')),
    path('api/v1/', include('gama.sales.urls')),
    path('api/v1/', include('gama.service_orders.urls')),
    path('api/v1/', include('gama.pos.urls')),
    path('api/v1/', include('gama.financials.urls')),
    path('api/v1/', include('gama.gamification.urls')),
    path('api/v1/', include('gama.reports.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
]
