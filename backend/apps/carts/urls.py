from django.urls import path

from .views import (
    CartByCustomerView,
    CartDetailView,
    CartItemDetailView,
    CartItemsView,
    CartListView,
    CartMergeView,
)

urlpatterns = [
    path("", CartListView.as_view(), name="api-carts-list"),
    path("merge/", CartMergeView.as_view(), name="api-carts-merge"),
    path(
        "customer/<int:customer_id>/",
        CartByCustomerView.as_view(),
        name="api-carts-by-customer",
    ),
    path("<int:cart_key>/items/", CartItemsView.as_view(), name="api-carts-items"),
    path(
        "<int:customer_id>/items/<int:product_id>/",
        CartItemDetailView.as_view(),
        name="api-carts-item-detail",
    ),
    path("<int:customer_id>/", CartDetailView.as_view(), name="api-carts-detail"),
]
