from typing import Optional

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.exceptions import NotFoundError, UnsupportedError
from apps.api.permissions import ensure_owner, resolve_actor
from apps.api.schemas import ErrorResponseSerializer
from apps.common import get_logger
from apps.orders.container import build_order_service

from .container import build_checkout_session_service, build_payment_service
from .serializers import (
    CheckoutSessionCreateSerializer,
    CheckoutSessionSerializer,
    CheckoutSessionStatusSerializer,
    PaymentCreateSerializer,
    PaymentReadSerializer,
)

logger = get_logger(__name__).bind(component="payments", layer="view")

ERRORS = {
    400: OpenApiResponse(response=ErrorResponseSerializer),
    401: OpenApiResponse(response=ErrorResponseSerializer),
    403: OpenApiResponse(response=ErrorResponseSerializer),
    404: OpenApiResponse(response=ErrorResponseSerializer),
}
UPSTREAM_ERRORS = {
    409: OpenApiResponse(response=ErrorResponseSerializer),
    502: OpenApiResponse(response=ErrorResponseSerializer),
}


class PaymentViewMixin:
    service = build_payment_service()
    orders = build_order_service()

    def _order_owner(self, order_id: int) -> Optional[int]:
        try:
            return self.orders.get_order_owner(order_id)
        except NotFoundError:
            return None

    def authorize_payment(self, request, payment_id: int):
        actor = resolve_actor(request)
        payment = self.service.get_payment(payment_id)
        ensure_owner(actor, self._order_owner(payment.order_id), resource="payment")
        return actor, payment


class PaymentCreateView(PaymentViewMixin, APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="PaymentCreateView")

    @extend_schema(
        summary="Create payment",
        description=(
            "Creates the payment for an order. `amount` defaults to the order total. Cash on "
            "delivery starts PENDING; other methods start REQUIRES_CONFIRMATION."
        ),
        request=PaymentCreateSerializer,
        responses={201: PaymentReadSerializer, **ERRORS, **UPSTREAM_ERRORS},
    )
    def post(self, request):
        actor = resolve_actor(request)
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = self.orders.get_order(data["order_id"])
        ensure_owner(actor, order.customer_id, resource="order")
        amount = data.get("amount")
        if amount is None:
            amount = order.total_amount
        dto = self.service.create_payment(order.id, amount, data["method"])
        self.log.info(
            "Payment created via API",
            payment_id=dto.id,
            order_id=order.id,
            actor_id=actor.user_id,
        )
        return Response(PaymentReadSerializer(dto).data, status=status.HTTP_201_CREATED)


class PaymentMethodsView(PaymentViewMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List payment methods",
        responses={200: serializers.ListField(child=serializers.CharField())},
    )
    def get(self, request):
        resolve_actor(request)
        return Response(self.service.list_methods())


class PaymentDetailView(PaymentViewMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get payment",
        parameters=[OpenApiParameter("payment_id", int, OpenApiParameter.PATH)],
        responses={200: PaymentReadSerializer, **ERRORS},
    )
    def get(self, request, payment_id: int):
        _actor, payment = self.authorize_payment(request, payment_id)
        return Response(PaymentReadSerializer(payment).data)


class PaymentConfirmView(PaymentViewMixin, APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="PaymentConfirmView")

    @extend_schema(
        summary="Confirm payment",
        description="Confirming an already completed payment returns it unchanged.",
        request=None,
        responses={200: PaymentReadSerializer, **ERRORS, **UPSTREAM_ERRORS},
    )
    def post(self, request, payment_id: int):
        actor, _payment = self.authorize_payment(request, payment_id)
        dto = self.service.confirm_payment(payment_id)
        self.log.info("Payment confirmed via API", payment_id=payment_id, actor_id=actor.user_id)
        return Response(PaymentReadSerializer(dto).data)


class PaymentRefundView(PaymentViewMixin, APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="PaymentRefundView")

    @extend_schema(
        summary="Refund payment",
        description="Only COMPLETED payments can be refunded.",
        request=None,
        responses={200: PaymentReadSerializer, **ERRORS, **UPSTREAM_ERRORS},
    )
    def post(self, request, payment_id: int):
        actor, _payment = self.authorize_payment(request, payment_id)
        dto = self.service.refund_payment(payment_id)
        self.log.info("Payment refunded via API", payment_id=payment_id, actor_id=actor.user_id)
        return Response(PaymentReadSerializer(dto).data)


class OrderPaymentsView(PaymentViewMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List payments for an order",
        parameters=[OpenApiParameter("order_id", int, OpenApiParameter.PATH)],
        responses={200: PaymentReadSerializer(many=True), **ERRORS},
    )
    def get(self, request, order_id: int):
        actor = resolve_actor(request)
        ensure_owner(actor, self.orders.get_order_owner(order_id), resource="order")
        payments = self.service.list_payments_for_order(order_id)
        return Response(PaymentReadSerializer(payments, many=True).data)


class CheckoutSessionViewMixin:
    checkout = build_checkout_session_service()
    orders = build_order_service()

    def checkout_service(self):
        if self.checkout is None:
            raise UnsupportedError("Stripe checkout is not configured")
        return self.checkout


class CheckoutSessionCreateView(CheckoutSessionViewMixin, APIView):
    permission_classes = [IsAuthenticated]
    log = logger.bind(view="CheckoutSessionCreateView")

    @extend_schema(
        summary="Create Stripe checkout session",
        description=(
            "Creates a Stripe-hosted checkout session for an order and records its STRIPE payment. "
            "`amount` defaults to the order total. The session expires after 24 hours."
        ),
        request=CheckoutSessionCreateSerializer,
        responses={201: CheckoutSessionSerializer, **ERRORS, **UPSTREAM_ERRORS},
    )
    def post(self, request):
        actor = resolve_actor(request)
        checkout = self.checkout_service()
        serializer = CheckoutSessionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = self.orders.get_order(data["order_id"])
        ensure_owner(actor, order.customer_id, resource="order")
        amount = data.get("amount")
        if amount is None:
            amount = order.total_amount
        dto = checkout.create_checkout_session(
            order.id, amount, data["success_url"], data["cancel_url"]
        )
        self.log.info(
            "Checkout session created via API",
            order_id=order.id,
            session_id=dto.session_id,
            actor_id=actor.user_id,
        )
        return Response(CheckoutSessionSerializer(dto).data, status=status.HTTP_201_CREATED)


class CheckoutSessionDetailView(CheckoutSessionViewMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get Stripe checkout session",
        parameters=[OpenApiParameter("session_id", str, OpenApiParameter.PATH)],
        responses={200: CheckoutSessionStatusSerializer, **ERRORS, **UPSTREAM_ERRORS},
    )
    def get(self, request, session_id: str):
        actor = resolve_actor(request)
        session = self.checkout_service().get_session(session_id)
        owner_id = None
        if session.order_id is not None:
            try:
                owner_id = self.orders.get_order_owner(session.order_id)
            except NotFoundError:
                owner_id = None
        ensure_owner(actor, owner_id, resource="checkout session")
        return Response(CheckoutSessionStatusSerializer(session).data)


class StripeWebhookView(CheckoutSessionViewMixin, APIView):
    """Called by Stripe; authenticity comes from the `Stripe-Signature` header, not a bearer token."""

    authentication_classes = []
    permission_classes = [AllowAny]
    log = logger.bind(view="StripeWebhookView")

    @extend_schema(
        summary="Stripe webhook",
        description="Handles `checkout.session.completed` and `checkout.session.expired`.",
        request=None,
        responses={
            200: OpenApiResponse(description="Event accepted"),
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        signature = request.META.get("HTTP_STRIPE_SIGNATURE", "")
        event_type = self.checkout_service().handle_webhook(request.body, signature)
        return Response({"received": True, "type": event_type})
