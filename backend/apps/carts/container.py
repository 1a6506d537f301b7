from __future__ import annotations

from apps.catalog.container import build_product_catalog

from .enrichment import CartEnricher
from .mappers import CartItemMapper, CartMapper
from .repositories import CartItemRepository, CartRepository
from .services import CartService


def build_cart_service() -> CartService:
    catalog = build_product_catalog()
    cart_mapper = CartMapper(CartItemMapper())
    return CartService(
        carts=CartRepository(),
        items=CartItemRepository(),
        catalog=catalog,
        enricher=CartEnricher(catalog),
        cart_mapper=cart_mapper,
    )
