from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List

from django.db import transaction
from django.utils import timezone

from apps.api.exceptions import InvalidOperationError, NotFoundError
from apps.common import get_logger

from .commands import OrderCreateCommand, OrderItemCommand
from .dtos import OrderDTO, OrderPageDTO
from .models import Order, OrderStatus
from .protocols import (
    OrderItemRepositoryProtocol,
    OrderMapperProtocol,
    OrderRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="orders", layer="service")

MAX_PAGE_SIZE = 100
CENTS = Decimal("0.01")


class OrderService:
    def __init__(
        self,
        orders: OrderRepositoryProtocol,
        order_items: OrderItemRepositoryProtocol,
        order_mapper: OrderMapperProtocol,
    ):
        self.orders = orders
        self.order_items = order_items
        self.order_mapper = order_mapper
        self.logger = logger.bind(service="OrderService")

    @staticmethod
    def calculate_order_total(items: Iterable[OrderItemCommand]) -> Decimal:
        """Sum of quantity x price over a candidate item list; touches no storage."""
        total = sum((Decimal(i.price) * i.quantity for i in items), Decimal("0"))
        return total.quantize(CENTS)

    def _require(self, order_id: int) -> Order:
        order = self.orders.get(id=order_id)
        if not order:
            self.logger.info("Order not found", order_id=order_id)
            raise NotFoundError("Order not found", details={"id": str(order_id)})
        return order

    def _require_locked(self, order_id: int) -> Order:
        order = self.orders.get_for_update(id=order_id)
        if not order:
            self.logger.info("Order not found", order_id=order_id)
            raise NotFoundError("Order not found", details={"id": str(order_id)})
        return order

    def create_order(self, command: OrderCreateCommand) -> OrderDTO:
        if not command.items:
            raise InvalidOperationError("Order must contain at least one item")
        total = self.calculate_order_total(command.items)
        with transaction.atomic():
            order = self.orders.create(
                customer_id=command.customer_id,
                status=OrderStatus.PENDING,
                total_amount=total,
                customer_name=command.customer_name,
                customer_email=command.customer_email,
                shipping_address_id=command.shipping_address_id,
                shipping_address=command.shipping_address,
            )
            for item in command.items:
                self.order_items.create(order=order, **item.as_model_fields())
        self.logger.info(
            "Order created",
            order_id=order.id,
            customer_id=command.customer_id,
            items=len(command.items),
            total=str(total),
        )
        return self.order_mapper.to_dto(self._require(order.id))

    def get_order(self, order_id: int) -> OrderDTO:
        return self.order_mapper.to_dto(self._require(order_id))

    def get_order_owner(self, order_id: int) -> int:
        return self._require(order_id).customer_id

    def list_orders(self) -> List[OrderDTO]:
        return self.order_mapper.many_to_dto(self.orders.list())

    def list_orders_for_customer(
        self, customer_id: int, page: int = 1, page_size: int = 20
    ) -> OrderPageDTO:
        page = max(int(page or 1), 1)
        page_size = min(max(int(page_size or 20), 1), MAX_PAGE_SIZE)
        offset = (page - 1) * page_size
        rows = self.orders.page_for_customer(customer_id, offset, page_size)
        count = self.orders.count(customer_id=customer_id)
        self.logger.debug(
            "Listing customer orders",
            customer_id=customer_id,
            page=page,
            page_size=page_size,
            count=count,
        )
        return OrderPageDTO(
            count=count,
            page=page,
            page_size=page_size,
            results=self.order_mapper.many_to_dto(rows),
        )

    def update_status(self, order_id: int, status: str) -> OrderDTO:
        """Set the status unconditionally; any status may follow any other."""
        if status not in OrderStatus.values:
            raise InvalidOperationError(
                "Unknown order status",
                details={"status": status, "allowed": list(OrderStatus.values)},
            )
        with transaction.atomic():
            order = self._require_locked(order_id)
            previous = order.status
            self.orders.update(order, status=status, updated_date=timezone.now())
        self.logger.info(
            "Order status changed",
            order_id=order_id,
            previous=previous,
            status=status,
        )
        return self.get_order(order_id)

    def cancel_order(self, order_id: int) -> OrderDTO:
        return self.update_status(order_id, OrderStatus.CANCELED)

    def _recalculate_total(self, order: Order) -> Decimal:
        items = [
            OrderItemCommand(product_id=i.product_id, quantity=i.quantity, price=i.price)
            for i in self.order_items.list_for_order(order.id)
        ]
        total = self.calculate_order_total(items)
        self.orders.update(order, total_amount=total, updated_date=timezone.now())
        return total

    def add_order_item(self, order_id: int, item: OrderItemCommand) -> OrderDTO:
        with transaction.atomic():
            order = self._require_locked(order_id)
            self.order_items.create(order=order, **item.as_model_fields())
            total = self._recalculate_total(order)
        self.logger.info(
            "Order item added",
            order_id=order_id,
            product_id=item.product_id,
            total=str(total),
        )
        return self.get_order(order_id)

    def remove_order_item(self, order_id: int, item_id: int) -> OrderDTO:
        with transaction.atomic():
            order = self._require_locked(order_id)
            item = self.order_items.get(id=item_id, order_id=order_id)
            if not item:
                raise NotFoundError(
                    "Order item not found",
                    details={"orderId": str(order_id), "itemId": str(item_id)},
                )
            self.order_items.delete(item)
            total = self._recalculate_total(order)
        self.logger.info(
            "Order item removed",
            order_id=order_id,
            item_id=item_id,
            total=str(total),
        )
        return self.get_order(order_id)
