from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from django.db import IntegrityError, transaction

from apps.api.exceptions import InvalidOperationError, NotFoundError
from apps.catalog.dtos import ProductSnapshot
from apps.catalog.protocols import ProductCatalogProtocol
from apps.common import get_logger

from .commands import CartItemCommand, CartMergeCommand
from .dtos import CartDTO, CartItemDTO
from .enrichment import is_stale
from .mappers import CartItemMapper
from .models import Cart, CartItem
from .protocols import (
    CartEnricherProtocol,
    CartItemRepositoryProtocol,
    CartMapperProtocol,
    CartRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="carts", layer="service")

SNAPSHOT_FIELDS = (
    "price",
    "product_name",
    "description",
    "image_url",
    "category_id",
    "category_name",
    "product_type",
)


def _copy_snapshot(item: CartItem) -> Dict[str, Any]:
    return {name: getattr(item, name) for name in SNAPSHOT_FIELDS}


class CartService:
    """Customer-keyed cart store. Every read path goes through the enricher."""

    def __init__(
        self,
        carts: CartRepositoryProtocol,
        items: CartItemRepositoryProtocol,
        catalog: ProductCatalogProtocol,
        enricher: CartEnricherProtocol,
        cart_mapper: CartMapperProtocol,
    ):
        self.carts = carts
        self.items = items
        self.catalog = catalog
        self.enricher = enricher
        self.cart_mapper = cart_mapper
        self.item_mapper = getattr(cart_mapper, "item_mapper", None) or CartItemMapper()
        self.logger = logger.bind(service="CartService")

    # -- reads ---------------------------------------------------------------

    def _to_dto(self, cart: Cart, enrich: bool = True) -> CartDTO:
        dto = self.cart_mapper.to_dto(cart, self.items.list_for_cart(cart.id))
        return self.enricher.enrich_cart(dto) if enrich else dto

    def get_or_create_cart(self, customer_id: int) -> Tuple[CartDTO, bool]:
        """Return the customer's cart, creating an empty one on first access."""
        cart, created = self._get_or_create_row(customer_id)
        return self._to_dto(cart), created

    def find_cart(self, customer_id: int, enrich: bool = True) -> Optional[CartDTO]:
        cart = self.carts.get(customer_id=customer_id)
        return self._to_dto(cart, enrich=enrich) if cart else None

    def get_cart_by_id(self, cart_id: int) -> Optional[CartDTO]:
        self.logger.debug("Fetching cart", cart_id=cart_id)
        cart = self.carts.get(id=cart_id)
        if not cart:
            self.logger.info("Cart not found", cart_id=cart_id)
            return None
        return self._to_dto(cart)

    def list_carts(self) -> List[CartDTO]:
        self.logger.debug("Listing carts")
        return [self._to_dto(cart) for cart in self.carts.list()]

    def list_items(self, cart_id: int, enrich: bool = True) -> List[CartItemDTO]:
        items = self.item_mapper.many_to_dto(self.items.list_for_cart(cart_id))
        return self.enricher.enrich_items(items) if enrich else items

    # -- writes --------------------------------------------------------------

    def _get_or_create_row(self, customer_id: int) -> Tuple[Cart, bool]:
        existing = self.carts.get(customer_id=customer_id)
        if existing:
            return existing, False
        try:
            with transaction.atomic():
                cart = self.carts.create(customer_id=customer_id)
        except IntegrityError:
            # A concurrent request created the cart between our read and insert.
            winner = self.carts.get(customer_id=customer_id)
            if winner is None:
                raise
            self.logger.debug(
                "Cart created by concurrent request",
                customer_id=customer_id,
                cart_id=winner.id,
            )
            return winner, False
        self.logger.info("Cart created", customer_id=customer_id, cart_id=cart.id)
        return cart, True

    def _lookup_snapshot(self, product_id: int) -> Optional[ProductSnapshot]:
        try:
            result = self.catalog.get_product(product_id)
        except Exception as exc:
            self.logger.warning(
                "Catalog lookup raised while adding item",
                product_id=product_id,
                error=str(exc),
            )
            return None
        if result.is_found:
            return result.value
        self.logger.warning(
            "Adding item without snapshot",
            product_id=product_id,
            lookup=result.status.value,
            error=result.error,
        )
        return None

    def add_item(self, customer_id: int, product_id: int, quantity: int) -> CartDTO:
        """Add `quantity` of a product, merging into an existing line for the same product.

        The catalog is consulted optimistically; a failed lookup still stores the
        line with a blank snapshot which the enricher repairs on later reads.
        """
        command = CartItemCommand(product_id=product_id, quantity=quantity).for_add()
        snapshot = self._lookup_snapshot(command.product_id)
        fields = CartItemMapper.snapshot_fields(snapshot)
        refresh = fields if snapshot is not None else {}
        with transaction.atomic():
            cart, _created = self._get_or_create_row(customer_id)
            existing = self.items.get_for_cart_product(cart.id, command.product_id)
            if existing is None:
                try:
                    with transaction.atomic():
                        self.items.create(
                            cart=cart,
                            product_id=command.product_id,
                            quantity=command.quantity,
                            **fields,
                        )
                except IntegrityError:
                    # A concurrent add inserted the same line between our read and insert.
                    existing = self.items.get_for_cart_product(cart.id, command.product_id)
                    if existing is None:
                        raise
                    self.logger.debug(
                        "Cart line created by concurrent request",
                        cart_id=cart.id,
                        product_id=command.product_id,
                    )
                else:
                    self.logger.info(
                        "Cart item added",
                        cart_id=cart.id,
                        product_id=command.product_id,
                        quantity=command.quantity,
                        snapshot=snapshot is not None,
                    )
            if existing is not None:
                self.items.increment_quantity(existing, command.quantity, **refresh)
                self.logger.info(
                    "Cart item quantity increased",
                    cart_id=cart.id,
                    product_id=command.product_id,
                    added=command.quantity,
                )
        return self._to_dto(cart)

    def update_item(
        self, customer_id: int, product_id: int, quantity: int
    ) -> Optional[CartItemDTO]:
        """Set a line's quantity; zero or below removes the line and returns None."""
        cart = self.carts.get(customer_id=customer_id)
        if not cart:
            self.logger.warning("Cart update failed: no cart", customer_id=customer_id)
            raise NotFoundError("Cart not found", details={"customerId": str(customer_id)})
        item = self.items.get_for_cart_product(cart.id, product_id)
        if not item:
            self.logger.warning(
                "Cart update failed: item missing",
                cart_id=cart.id,
                product_id=product_id,
            )
            raise NotFoundError(
                "Cart item not found",
                details={"customerId": str(customer_id), "productId": str(product_id)},
            )
        if quantity <= 0:
            self.items.delete_product(cart, product_id)
            self.logger.info(
                "Cart item removed by quantity update",
                cart_id=cart.id,
                product_id=product_id,
            )
            return None
        item = self.items.update(item, quantity=quantity)
        self.logger.info(
            "Cart item quantity set",
            cart_id=cart.id,
            product_id=product_id,
            quantity=quantity,
        )
        return self.enricher.enrich_items([self.item_mapper.to_dto(item)])[0]

    def remove_item(self, customer_id: int, product_id: int) -> bool:
        cart = self.carts.get(customer_id=customer_id)
        if not cart:
            return False
        removed = self.items.delete_product(cart, product_id)
        if removed:
            self.logger.info("Cart item removed", cart_id=cart.id, product_id=product_id)
        return removed

    def clear_cart(self, customer_id: int) -> bool:
        """Delete every line of the customer's cart; the cart row itself is kept."""
        cart = self.carts.get(customer_id=customer_id)
        if not cart:
            self.logger.debug("Nothing to clear", customer_id=customer_id)
            return False
        removed = self.items.delete_for_cart(cart)
        self.logger.info("Cart cleared", cart_id=cart.id, customer_id=customer_id, removed=removed)
        return True

    def merge_carts(self, from_customer_id: int, to_customer_id: int) -> Optional[CartDTO]:
        """Fold one customer's cart into another's and delete the source cart.

        Shared products have their quantities summed; products only in the
        source are copied with their snapshots. Returns None when the source
        customer has no cart.
        """
        command = CartMergeCommand(from_customer_id, to_customer_id)
        if command.from_customer_id == command.to_customer_id:
            raise InvalidOperationError(
                "Cannot merge a cart into itself",
                details={"customerId": str(command.from_customer_id)},
            )
        with transaction.atomic():
            source = self.carts.get(customer_id=command.from_customer_id)
            if not source:
                self.logger.info(
                    "Merge skipped: source cart missing",
                    from_customer_id=command.from_customer_id,
                )
                return None
            target, _created = self._get_or_create_row(command.to_customer_id)
            moved = 0
            for src in list(self.items.list_for_cart(source.id)):
                existing = self.items.get_for_cart_product(target.id, src.product_id)
                if existing:
                    refresh = {} if is_stale(src) else _copy_snapshot(src)
                    self.items.increment_quantity(existing, src.quantity, **refresh)
                else:
                    self.items.create(
                        cart=target,
                        product_id=src.product_id,
                        quantity=src.quantity,
                        **_copy_snapshot(src),
                    )
                moved += 1
            self.carts.delete(source)
        self.logger.info(
            "Carts merged",
            from_customer_id=command.from_customer_id,
            to_customer_id=command.to_customer_id,
            target_cart_id=target.id,
            lines=moved,
        )
        return self._to_dto(target)
