from __future__ import annotations

from apps.carts.container import build_cart_service
from apps.catalog.container import build_product_catalog
from apps.payments.container import build_payment_service
from apps.users.container import build_user_directory

from .checkout import CheckoutService
from .mappers import OrderItemMapper, OrderMapper
from .outbox import CartClearOutbox
from .repositories import CartClearTaskRepository, OrderItemRepository, OrderRepository
from .services import OrderService


def build_order_service() -> OrderService:
    return OrderService(
        orders=OrderRepository(),
        order_items=OrderItemRepository(),
        order_mapper=OrderMapper(OrderItemMapper()),
    )


def build_cart_clear_outbox() -> CartClearOutbox:
    return CartClearOutbox(carts=build_cart_service(), tasks=CartClearTaskRepository())


def build_checkout_service() -> CheckoutService:
    carts = build_cart_service()
    return CheckoutService(
        carts=carts,
        catalog=build_product_catalog(),
        users=build_user_directory(),
        orders=build_order_service(),
        outbox=CartClearOutbox(carts=carts, tasks=CartClearTaskRepository()),
        payment_methods=build_payment_service(),
    )
