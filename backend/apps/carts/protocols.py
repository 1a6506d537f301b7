from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, TYPE_CHECKING

from .models import Cart, CartItem

if TYPE_CHECKING:
    from apps.carts.dtos import CartDTO, CartItemDTO


class CartRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Cart]:
        ...

    def get(self, **filters) -> Optional[Cart]:
        ...

    def create(self, **data) -> Cart:
        ...

    def delete(self, cart: Cart) -> None:
        ...


class CartItemRepositoryProtocol(Protocol):
    def create(self, **data) -> CartItem:
        ...

    def update(self, obj: CartItem, **data) -> CartItem:
        ...

    def list_for_cart(self, cart_id: int) -> Iterable[CartItem]:
        ...

    def get_for_cart_product(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        ...

    def delete_product(self, cart: Cart, product_id: int) -> bool:
        ...

    def delete_for_cart(self, cart: Cart) -> int:
        ...

    def increment_quantity(self, item: CartItem, amount: int, **fields) -> CartItem:
        ...


class CartMapperProtocol(Protocol):
    def to_dto(self, cart: Cart, items: Optional[Iterable[CartItem]] = None) -> "CartDTO":
        ...

    def many_to_dto(self, carts: Iterable[Cart]) -> List["CartDTO"]:
        ...


class CartEnricherProtocol(Protocol):
    def enrich_items(self, items: List["CartItemDTO"]) -> List["CartItemDTO"]:
        ...

    def enrich_cart(self, cart: "CartDTO") -> "CartDTO":
        ...
