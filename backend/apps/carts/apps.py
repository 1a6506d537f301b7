from django.apps import AppConfig


class CartsConfig(AppConfig):
    default_auto_field = "django.db.models.AutoField"
    name = "apps.carts"
    label = "carts"
