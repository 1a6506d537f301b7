from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from apps.api.exceptions import InvalidOperationError, NotFoundError, UpstreamError
from apps.catalog.protocols import ProductCatalogProtocol
from apps.common import get_logger
from apps.users.dtos import UserSnapshot
from apps.users.protocols import UserDirectoryProtocol

from .commands import OrderCreateCommand, OrderItemCommand
from .dtos import OrderDTO
from .outbox import CartClearOutbox
from .protocols import CartStoreProtocol, PaymentMethodsProtocol
from .services import OrderService

logger = get_logger(__name__).bind(component="orders", layer="checkout")


@dataclass
class CheckoutResult:
    order: OrderDTO
    payment_methods: List[str] = field(default_factory=list)


class CheckoutService:
    """Turns a customer's cart into an order.

    Steps run strictly in sequence. Only the order write is durable; the user
    lookup, the cart clear and the payment method listing are best effort,
    while a missing cart, an empty cart or an unpriceable product abort the
    checkout before anything is written.
    """

    def __init__(
        self,
        carts: CartStoreProtocol,
        catalog: ProductCatalogProtocol,
        users: UserDirectoryProtocol,
        orders: OrderService,
        outbox: CartClearOutbox,
        payment_methods: Optional[PaymentMethodsProtocol] = None,
    ):
        self.carts = carts
        self.catalog = catalog
        self.users = users
        self.orders = orders
        self.outbox = outbox
        self.payment_methods = payment_methods
        self.logger = logger.bind(service="CheckoutService")

    def _customer(self, customer_id: int) -> Optional[UserSnapshot]:
        try:
            result = self.users.get_user(customer_id)
        except Exception as exc:
            self.logger.warning("Customer lookup raised", customer_id=customer_id, error=str(exc))
            return None
        if result.is_found:
            return result.value
        self.logger.warning(
            "Customer lookup unavailable; ordering without customer details",
            customer_id=customer_id,
            lookup=result.status.value,
            error=result.error,
        )
        return None

    def _price_items(self, customer_id: int, cart_items) -> List[OrderItemCommand]:
        priced: List[OrderItemCommand] = []
        for item in cart_items:
            try:
                result = self.catalog.get_product(item.product_id)
            except Exception as exc:
                raise UpstreamError(
                    "Product catalog unavailable",
                    details={"productId": str(item.product_id)},
                ) from exc
            if result.is_not_found:
                self.logger.warning(
                    "Checkout aborted: product missing from catalog",
                    customer_id=customer_id,
                    product_id=item.product_id,
                )
                raise NotFoundError(
                    f"Product {item.product_id} not found",
                    details={"productId": str(item.product_id)},
                )
            if result.is_error:
                self.logger.warning(
                    "Checkout aborted: catalog lookup failed",
                    customer_id=customer_id,
                    product_id=item.product_id,
                    error=result.error,
                )
                raise UpstreamError(
                    "Product catalog unavailable",
                    details={"productId": str(item.product_id)},
                )
            priced.append(OrderItemCommand.from_snapshot(result.value, item.quantity))
        return priced

    def _available_methods(self) -> List[str]:
        if self.payment_methods is None:
            return []
        try:
            return list(self.payment_methods.list_methods())
        except Exception as exc:
            self.logger.warning("Payment methods unavailable", error=str(exc))
            return []

    def checkout_from_cart(
        self,
        customer_id: int,
        shipping_address_id: Optional[int] = None,
        shipping_address: Optional[Dict[str, Any]] = None,
    ) -> CheckoutResult:
        self.logger.info("Checkout started", customer_id=customer_id)
        customer = self._customer(customer_id)

        # Cart snapshots are display data; skip the repair pass and price from the catalog below.
        cart = self.carts.find_cart(customer_id, enrich=False)
        if cart is None:
            raise NotFoundError("Cart not found", details={"customerId": str(customer_id)})
        cart_items = self.carts.list_items(cart.id, enrich=False)
        if not cart_items:
            raise InvalidOperationError("Cart is empty", details={"customerId": str(customer_id)})

        items = self._price_items(customer_id, cart_items)
        order = self.orders.create_order(
            OrderCreateCommand(
                customer_id=customer_id,
                items=items,
                customer_name=customer.name if customer else None,
                customer_email=customer.email if customer else None,
                shipping_address_id=shipping_address_id,
                shipping_address=shipping_address,
            )
        )

        self.outbox.clear_after_checkout(customer_id, order.id)
        methods = self._available_methods()
        self.logger.info(
            "Checkout completed",
            customer_id=customer_id,
            order_id=order.id,
            total=str(order.total_amount),
        )
        return CheckoutResult(order=order, payment_methods=methods)
