from django.urls import path

from .views import (
    CalculateTotalView,
    CheckoutView,
    CustomerOrdersView,
    OrderCancelView,
    OrderDetailView,
    OrderItemDetailView,
    OrderItemsView,
    OrderListView,
    OrderStatusView,
)

urlpatterns = [
    path("", OrderListView.as_view(), name="api-orders-list"),
    path(
        "checkout/<int:customer_id>/",
        CheckoutView.as_view(),
        name="api-orders-checkout",
    ),
    path(
        "calculate-total/",
        CalculateTotalView.as_view(),
        name="api-orders-calculate-total",
    ),
    path(
        "customer/<int:customer_id>/",
        CustomerOrdersView.as_view(),
        name="api-orders-by-customer",
    ),
    path("<int:order_id>/", OrderDetailView.as_view(), name="api-orders-detail"),
    path("<int:order_id>/status/", OrderStatusView.as_view(), name="api-orders-status"),
    path("<int:order_id>/cancel/", OrderCancelView.as_view(), name="api-orders-cancel"),
    path("<int:order_id>/items/", OrderItemsView.as_view(), name="api-orders-items"),
    path(
        "<int:order_id>/items/<int:item_id>/",
        OrderItemDetailView.as_view(),
        name="api-orders-item-detail",
    ),
]
