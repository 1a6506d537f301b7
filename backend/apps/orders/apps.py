from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.AutoField"
    name = "apps.orders"
    label = "orders"
