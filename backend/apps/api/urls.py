from django.urls import include, path

urlpatterns = [
    path("carts/", include("apps.carts.urls")),
    path("orders/", include("apps.orders.urls")),
    path("payments/", include("apps.payments.urls")),
]
