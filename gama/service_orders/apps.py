from django.apps import AppConfig


class ServiceOrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'gama.service_orders'
