from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.permissions import authorize_owner, authorize_privileged, ensure_owner, resolve_actor
from apps.api.schemas import ErrorResponseSerializer
from apps.common import get_logger

from .commands import OrderCreateCommand, OrderItemCommand
from .container import build_checkout_service, build_order_service
from .serializers import (
    CalculateTotalResponseSerializer,
    CalculateTotalSerializer,
    CheckoutRequestSerializer,
    CheckoutResponseSerializer,
    CustomerOrdersQuerySerializer,
    OrderCreateSerializer,
    OrderItemWriteSerializer,
    OrderPageSerializer,
    OrderReadSerializer,
    OrderStatusSerializer,
)

logger = get_logger(__name__).bind(component="orders", layer="view")

ERRORS = {
    400: OpenApiResponse(response=ErrorResponseSerializer),
    401: OpenApiResponse(response=ErrorResponseSerializer),
    403: OpenApiResponse(response=ErrorResponseSerializer),
    404: OpenApiResponse(response=ErrorResponseSerializer),
}


def _authorize_order(request, service, order_id: int):
    actor = resolve_actor(request)
    ensure_owner(actor, service.get_order_owner(order_id), resource="order")
    return actor


class OrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="OrderListView")

    @extend_schema(
        summary="List all orders",
        description="Privileged callers only.",
        responses={200: OrderReadSerializer(many=True), **ERRORS},
    )
    def get(self, request):
        authorize_privileged(request, action="list all orders")
        return Response(OrderReadSerializer(self.service.list_orders(), many=True).data)

    @extend_schema(
        summary="Create order",
        description="Creates a PENDING order from an explicit item list.",
        request=OrderCreateSerializer,
        responses={201: OrderReadSerializer, **ERRORS},
    )
    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = OrderCreateCommand.from_validated(serializer.validated_data)
        actor = authorize_owner(request, command.customer_id, resource="order")
        dto = self.service.create_order(command)
        self.log.info("Order created via API", order_id=dto.id, actor_id=actor.user_id)
        return Response(OrderReadSerializer(dto).data, status=status.HTTP_201_CREATED)


class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()
    log = logger.bind(view="CheckoutView")

    @extend_schema(
        summary="Checkout cart",
        description=(
            "Re-prices every cart line against the product catalog, creates a PENDING order and "
            "clears the cart. Returns the order and the payment methods currently available."
        ),
        parameters=[OpenApiParameter("customer_id", int, OpenApiParameter.PATH)],
        request=CheckoutRequestSerializer,
        responses={
            201: CheckoutResponseSerializer,
            502: OpenApiResponse(response=ErrorResponseSerializer),
            **ERRORS,
        },
    )
    def post(self, request, customer_id: int):
        actor = authorize_owner(request, customer_id, resource="cart")
        serializer = CheckoutRequestSerializer(data=request.data or {})
        serializer.is_valid(raise_exception=True)
        result = self.service.checkout_from_cart(
            customer_id,
            shipping_address_id=serializer.validated_data.get("shipping_address_id"),
            shipping_address=serializer.validated_data.get("shipping_address"),
        )
        self.log.info(
            "Checkout via API",
            customer_id=customer_id,
            order_id=result.order.id,
            actor_id=actor.user_id,
        )
        return Response(CheckoutResponseSerializer(result).data, status=status.HTTP_201_CREATED)


class CalculateTotalView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Calculate order total",
        description="Sums quantity x price over the given items without creating anything.",
        request=CalculateTotalSerializer,
        responses={200: CalculateTotalResponseSerializer, **ERRORS},
    )
    def post(self, request):
        resolve_actor(request)
        serializer = CalculateTotalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        items = [OrderItemCommand.from_validated(i) for i in serializer.validated_data["items"]]
        total = self.service.calculate_order_total(items)
        return Response(CalculateTotalResponseSerializer({"total": total}).data)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Get order",
        parameters=[OpenApiParameter("order_id", int, OpenApiParameter.PATH)],
        responses={200: OrderReadSerializer, **ERRORS},
    )
    def get(self, request, order_id: int):
        _authorize_order(request, self.service, order_id)
        return Response(OrderReadSerializer(self.service.get_order(order_id)).data)


class CustomerOrdersView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="List a customer's orders",
        parameters=[
            OpenApiParameter("customer_id", int, OpenApiParameter.PATH),
            OpenApiParameter("page", int, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("pageSize", int, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: OrderPageSerializer, **ERRORS},
    )
    def get(self, request, customer_id: int):
        authorize_owner(request, customer_id, resource="order")
        query = CustomerOrdersQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page = self.service.list_orders_for_customer(
            customer_id,
            page=query.validated_data["page"],
            page_size=query.validated_data["page_size"],
        )
        return Response(OrderPageSerializer(page).data)


class OrderStatusView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="OrderStatusView")

    @extend_schema(
        summary="Set order status",
        description="Privileged callers only. Any status may follow any other.",
        request=OrderStatusSerializer,
        responses={200: OrderReadSerializer, **ERRORS},
    )
    def put(self, request, order_id: int):
        actor = authorize_privileged(request, action="change order status")
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.update_status(order_id, serializer.validated_data["status"])
        self.log.info(
            "Order status set via API",
            order_id=order_id,
            status=dto.status,
            actor_id=actor.user_id,
        )
        return Response(OrderReadSerializer(dto).data)


class OrderCancelView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Cancel order",
        request=None,
        responses={200: OrderReadSerializer, **ERRORS},
    )
    def put(self, request, order_id: int):
        _authorize_order(request, self.service, order_id)
        return Response(OrderReadSerializer(self.service.cancel_order(order_id)).data)


class OrderItemsView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Add order item",
        description="Adds a line to the order and recomputes its total.",
        request=OrderItemWriteSerializer,
        responses={200: OrderReadSerializer, **ERRORS},
    )
    def post(self, request, order_id: int):
        _authorize_order(request, self.service, order_id)
        serializer = OrderItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = OrderItemCommand.from_validated(serializer.validated_data)
        return Response(OrderReadSerializer(self.service.add_order_item(order_id, item)).data)


class OrderItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        summary="Remove order item",
        description="Removes a line from the order and recomputes its total.",
        responses={200: OrderReadSerializer, **ERRORS},
    )
    def delete(self, request, order_id: int, item_id: int):
        _authorize_order(request, self.service, order_id)
        return Response(OrderReadSerializer(self.service.remove_order_item(order_id, item_id)).data)
