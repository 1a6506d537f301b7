from django.urls import path

from .views import (
    CheckoutSessionCreateView,
    CheckoutSessionDetailView,
    OrderPaymentsView,
    PaymentConfirmView,
    PaymentCreateView,
    PaymentDetailView,
    PaymentMethodsView,
    PaymentRefundView,
    StripeWebhookView,
)

urlpatterns = [
    path("", PaymentCreateView.as_view(), name="api-payments-create"),
    path("methods/", PaymentMethodsView.as_view(), name="api-payments-methods"),
    path(
        "stripe/checkout-sessions/",
        CheckoutSessionCreateView.as_view(),
        name="api-payments-stripe-session-create",
    ),
    path(
        "stripe/checkout-sessions/<str:session_id>/",
        CheckoutSessionDetailView.as_view(),
        name="api-payments-stripe-session-detail",
    ),
    path("stripe/webhook/", StripeWebhookView.as_view(), name="api-payments-stripe-webhook"),
    path(
        "order/<int:order_id>/",
        OrderPaymentsView.as_view(),
        name="api-payments-by-order",
    ),
    path("<int:payment_id>/", PaymentDetailView.as_view(), name="api-payments-detail"),
    path(
        "<int:payment_id>/confirm/",
        PaymentConfirmView.as_view(),
        name="api-payments-confirm",
    ),
    path(
        "<int:payment_id>/refund/",
        PaymentRefundView.as_view(),
        name="api-payments-refund",
    ),
]
