from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, TYPE_CHECKING

from .models import CartClearTask, Order, OrderItem

if TYPE_CHECKING:
    from apps.carts.dtos import CartDTO, CartItemDTO
    from apps.orders.dtos import OrderDTO


class OrderRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Order]:
        ...

    def get_for_update(self, **filters) -> Optional[Order]:
        ...

    def list(self, **filters) -> Iterable[Order]:
        ...

    def page_for_customer(self, customer_id: int, offset: int, limit: int) -> List[Order]:
        ...

    def count(self, **filters) -> int:
        ...

    def create(self, **data) -> Order:
        ...

    def update(self, obj: Order, **data) -> Order:
        ...


class OrderItemRepositoryProtocol(Protocol):
    def create(self, **data) -> OrderItem:
        ...

    def get(self, **filters) -> Optional[OrderItem]:
        ...

    def list_for_order(self, order_id: int) -> Iterable[OrderItem]:
        ...

    def delete(self, obj: OrderItem) -> None:
        ...


class CartClearTaskRepositoryProtocol(Protocol):
    def create(self, **data) -> CartClearTask:
        ...

    def pending(self, limit: Optional[int] = None) -> List[CartClearTask]:
        ...

    def mark_done(self, task: CartClearTask) -> CartClearTask:
        ...

    def mark_failed(self, task: CartClearTask, error: str) -> CartClearTask:
        ...


class OrderMapperProtocol(Protocol):
    def to_dto(self, order: Order) -> "OrderDTO":
        ...

    def many_to_dto(self, orders: Iterable[Order]) -> List["OrderDTO"]:
        ...


class CartStoreProtocol(Protocol):
    """The slice of the cart store checkout depends on."""

    def find_cart(self, customer_id: int, enrich: bool = True) -> Optional["CartDTO"]:
        ...

    def list_items(self, cart_id: int, enrich: bool = True) -> List["CartItemDTO"]:
        ...

    def clear_cart(self, customer_id: int) -> bool:
        ...


class PaymentMethodsProtocol(Protocol):
    def list_methods(self) -> List[str]:
        ...
