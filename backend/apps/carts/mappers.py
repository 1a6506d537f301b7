from typing import Iterable, List, Optional

from apps.catalog.dtos import ProductSnapshot

from .dtos import CartDTO, CartItemDTO
from .models import Cart, CartItem


def _iso(value) -> Optional[str]:
    if value is None:
        return None
    try:
        return value.isoformat()
    except AttributeError:
        return str(value)


class CartItemMapper:
    def to_dto(self, item: CartItem) -> CartItemDTO:
        return CartItemDTO(
            id=item.id,
            cart_id=item.cart_id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=item.price,
            product_name=item.product_name or "",
            description=item.description or "",
            image_url=item.image_url or "",
            category_id=item.category_id,
            category_name=item.category_name or "",
            product_type=item.product_type or "",
            added_at=_iso(getattr(item, "added_at", None)),
        )

    def many_to_dto(self, items: Iterable[CartItem]) -> List[CartItemDTO]:
        return [self.to_dto(i) for i in items]

    @staticmethod
    def snapshot_fields(snapshot: Optional[ProductSnapshot]) -> dict:
        """Model field values captured from a catalog snapshot; blanks when the lookup failed."""
        if snapshot is None:
            return {
                "price": 0,
                "product_name": "",
                "description": "",
                "image_url": "",
                "category_id": None,
                "category_name": "",
                "product_type": "",
            }
        return {
            "price": snapshot.price,
            "product_name": snapshot.name,
            "description": snapshot.description,
            "image_url": snapshot.image_url,
            "category_id": snapshot.category_id,
            "category_name": snapshot.category_name,
            "product_type": snapshot.product_type,
        }


class CartMapper:
    def __init__(self, item_mapper: Optional[CartItemMapper] = None) -> None:
        self.item_mapper = item_mapper or CartItemMapper()

    def to_dto(self, cart: Cart, items: Optional[Iterable[CartItem]] = None) -> CartDTO:
        rows = items if items is not None else cart.items.all()
        return CartDTO(
            id=cart.id,
            customer_id=cart.customer_id,
            created_at=_iso(cart.created_at) or "",
            items=self.item_mapper.many_to_dto(rows),
        )

    def many_to_dto(self, carts: Iterable[Cart]) -> List[CartDTO]:
        return [self.to_dto(c) for c in carts]
