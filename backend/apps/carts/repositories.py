from typing import Iterable, Optional

from django.db.models import F

from apps.common.repository import GenericRepository

from .models import Cart, CartItem


class CartRepository(GenericRepository[Cart]):
    def __init__(self):
        super().__init__(Cart)

    def _base_queryset(self):
        return self.model.objects.prefetch_related("items")

    def list(self, **filters):
        return self._base_queryset().filter(**filters).order_by("id")

    def get(self, **filters):
        return self._base_queryset().filter(**filters).first()


class CartItemRepository(GenericRepository[CartItem]):
    def __init__(self):
        super().__init__(CartItem)

    def list_for_cart(self, cart_id: int) -> Iterable[CartItem]:
        return self.model.objects.filter(cart_id=cart_id).order_by("added_at", "id")

    def get_for_cart_product(self, cart_id: int, product_id: int) -> Optional[CartItem]:
        return self.model.objects.filter(cart_id=cart_id, product_id=product_id).first()

    def delete_product(self, cart: Cart, product_id: int) -> bool:
        deleted, _ = self.model.objects.filter(cart=cart, product_id=product_id).delete()
        return deleted > 0

    def delete_for_cart(self, cart: Cart) -> int:
        deleted, _ = self.model.objects.filter(cart=cart).delete()
        return deleted

    def increment_quantity(self, item: CartItem, amount: int, **fields) -> CartItem:
        """Add `amount` in SQL so concurrent adds to the same line are not lost."""
        self.model.objects.filter(pk=item.pk).update(quantity=F("quantity") + amount, **fields)
        item.refresh_from_db()
        return item
