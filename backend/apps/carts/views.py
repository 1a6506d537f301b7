from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.exceptions import NotFoundError
from apps.api.permissions import (
    authorize_owner,
    authorize_privileged,
    ensure_owner,
    ensure_owner_of_all,
    resolve_actor,
)
from apps.api.schemas import ErrorResponseSerializer
from apps.common import get_logger

from .container import build_cart_service
from .serializers import (
    CartItemReadSerializer,
    CartItemWriteSerializer,
    CartMergeSerializer,
    CartReadSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

AUTH_ERRORS = {
    401: OpenApiResponse(response=ErrorResponseSerializer),
    403: OpenApiResponse(response=ErrorResponseSerializer),
}


class CartListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartListView")

    @extend_schema(
        summary="List all carts",
        description="Privileged callers only.",
        responses={200: CartReadSerializer(many=True), **AUTH_ERRORS},
    )
    def get(self, request):
        actor = authorize_privileged(request, action="list all carts")
        data = self.service.list_carts()
        self.log.debug("Listed carts", actor_id=actor.user_id, count=len(data))
        return Response(CartReadSerializer(data, many=True).data)


class CartByCustomerView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartByCustomerView")

    @extend_schema(
        summary="Get a customer's cart",
        description="Returns the customer's cart, creating an empty one on first access.",
        parameters=[OpenApiParameter("customer_id", int, OpenApiParameter.PATH)],
        responses={200: CartReadSerializer, **AUTH_ERRORS},
    )
    def get(self, request, customer_id: int):
        authorize_owner(request, customer_id, resource="cart")
        dto, created = self.service.get_or_create_cart(customer_id)
        if created:
            self.log.info("Cart created on first access", customer_id=customer_id, cart_id=dto.id)
        return Response(CartReadSerializer(dto).data)


class CartItemsView(APIView):
    """`GET` addresses the cart by its id; `POST`/`PUT` address it by customer id."""

    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemsView")

    @extend_schema(
        summary="List cart items",
        parameters=[OpenApiParameter("cart_key", int, OpenApiParameter.PATH, description="Cart id")],
        responses={
            200: CartItemReadSerializer(many=True),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **AUTH_ERRORS,
        },
    )
    def get(self, request, cart_key: int):
        actor = resolve_actor(request)
        cart = self.service.get_cart_by_id(cart_key)
        if cart is None:
            raise NotFoundError("Cart not found", details={"id": str(cart_key)})
        ensure_owner(actor, cart.customer_id, resource="cart")
        return Response(CartItemReadSerializer(cart.items, many=True).data)

    @extend_schema(
        summary="Add item to cart",
        description=(
            "Adds a product to the customer's cart. An existing line for the same product has its "
            "quantity increased. Quantities of zero or below are treated as 1."
        ),
        parameters=[OpenApiParameter("cart_key", int, OpenApiParameter.PATH, description="Customer id")],
        request=CartItemWriteSerializer,
        responses={
            200: CartReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            **AUTH_ERRORS,
        },
    )
    def post(self, request, cart_key: int):
        actor = authorize_owner(request, cart_key, resource="cart")
        serializer = CartItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        dto = self.service.add_item(cart_key, data["product_id"], data["quantity"])
        self.log.info(
            "Item added via API",
            customer_id=cart_key,
            product_id=data["product_id"],
            actor_id=actor.user_id,
        )
        return Response(CartReadSerializer(dto).data)

    @extend_schema(
        summary="Update cart item quantity",
        description="Sets the quantity of an existing line. Zero or below removes it (204).",
        parameters=[OpenApiParameter("cart_key", int, OpenApiParameter.PATH, description="Customer id")],
        request=CartItemWriteSerializer,
        responses={
            200: CartItemReadSerializer,
            204: None,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **AUTH_ERRORS,
        },
    )
    def put(self, request, cart_key: int):
        authorize_owner(request, cart_key, resource="cart")
        serializer = CartItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        item = self.service.update_item(cart_key, data["product_id"], data["quantity"])
        if item is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(CartItemReadSerializer(item).data)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Remove item from cart",
        responses={
            204: None,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **AUTH_ERRORS,
        },
    )
    def delete(self, request, customer_id: int, product_id: int):
        authorize_owner(request, customer_id, resource="cart")
        if not self.service.remove_item(customer_id, product_id):
            raise NotFoundError(
                "Cart item not found",
                details={"customerId": str(customer_id), "productId": str(product_id)},
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartDetailView")

    @extend_schema(
        summary="Clear cart",
        description="Removes every item from the customer's cart.",
        responses={
            204: None,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **AUTH_ERRORS,
        },
    )
    def delete(self, request, customer_id: int):
        authorize_owner(request, customer_id, resource="cart")
        if not self.service.clear_cart(customer_id):
            raise NotFoundError("Cart not found", details={"customerId": str(customer_id)})
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartMergeView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartMergeView")

    @extend_schema(
        summary="Merge carts",
        description=(
            "Moves every line of the source customer's cart into the target customer's cart and "
            "deletes the source cart. The caller must own both carts unless privileged."
        ),
        request=CartMergeSerializer,
        responses={
            200: CartReadSerializer,
            204: None,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            **AUTH_ERRORS,
        },
    )
    def post(self, request):
        actor = resolve_actor(request)
        serializer = CartMergeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        source = serializer.validated_data["from_customer_id"]
        target = serializer.validated_data["to_customer_id"]
        ensure_owner_of_all(actor, [source, target], resource="cart")
        dto = self.service.merge_carts(source, target)
        if dto is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        self.log.info("Carts merged via API", from_customer_id=source, to_customer_id=target)
        return Response(CartReadSerializer(dto).data)
