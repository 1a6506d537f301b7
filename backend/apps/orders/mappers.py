from typing import Iterable, List, Optional

from .dtos import OrderDTO, OrderItemDTO
from .models import Order, OrderItem


def _iso(value) -> str:
    try:
        return value.isoformat()
    except AttributeError:
        return str(value)


class OrderItemMapper:
    def to_dto(self, item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            id=item.id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=item.price,
            product_name=item.product_name or "",
            image_url=item.image_url or "",
            category_id=item.category_id,
            category_name=item.category_name or "",
            product_type=item.product_type or "",
        )

    def many_to_dto(self, items: Iterable[OrderItem]) -> List[OrderItemDTO]:
        return [self.to_dto(i) for i in items]


class OrderMapper:
    def __init__(self, item_mapper: Optional[OrderItemMapper] = None) -> None:
        self.item_mapper = item_mapper or OrderItemMapper()

    def to_dto(self, order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,
            customer_id=order.customer_id,
            order_date=_iso(order.order_date),
            updated_date=_iso(order.updated_date),
            status=str(order.status),
            total_amount=order.total_amount,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            shipping_address_id=order.shipping_address_id,
            shipping_address=order.shipping_address,
            items=self.item_mapper.many_to_dto(order.items.all()),
        )

    def many_to_dto(self, orders: Iterable[Order]) -> List[OrderDTO]:
        return [self.to_dto(o) for o in orders]
