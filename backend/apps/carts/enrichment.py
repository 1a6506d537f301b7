from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import List

from apps.catalog.dtos import ProductSnapshot
from apps.catalog.protocols import ProductCatalogProtocol
from apps.common import get_logger

from .dtos import CartDTO, CartItemDTO

logger = get_logger(__name__).bind(component="carts", layer="enrichment")


def is_stale(item: CartItemDTO) -> bool:
    """True when any snapshot field a client relies on is blank."""
    return (
        not item.product_name
        or Decimal(item.price or 0) == 0
        or item.category_id is None
        or not item.category_name
    )


def apply_snapshot(item: CartItemDTO, snapshot: ProductSnapshot) -> CartItemDTO:
    return replace(
        item,
        price=snapshot.price,
        product_name=snapshot.name,
        description=snapshot.description or item.description,
        image_url=snapshot.image_url or item.image_url,
        category_id=snapshot.category_id,
        category_name=snapshot.category_name,
        product_type=snapshot.product_type or item.product_type,
    )


class CartEnricher:
    """Repairs incomplete item snapshots on read.

    Results only ever land in the returned copies; storage is untouched and
    a failed lookup leaves that item exactly as it was.
    """

    def __init__(self, catalog: ProductCatalogProtocol):
        self.catalog = catalog
        self.logger = logger.bind(service="CartEnricher")

    def enrich_items(self, items: List[CartItemDTO]) -> List[CartItemDTO]:
        if not any(is_stale(i) for i in items):
            return list(items)
        enriched: List[CartItemDTO] = []
        for item in items:
            if not is_stale(item):
                enriched.append(item)
                continue
            try:
                result = self.catalog.get_product(item.product_id)
            except Exception as exc:
                self.logger.warning(
                    "Catalog lookup raised during enrichment",
                    product_id=item.product_id,
                    error=str(exc),
                )
                enriched.append(item)
                continue
            if result.is_found:
                enriched.append(apply_snapshot(item, result.value))
                continue
            self.logger.warning(
                "Snapshot left stale",
                product_id=item.product_id,
                lookup=result.status.value,
                error=result.error,
            )
            enriched.append(item)
        return enriched

    def enrich_cart(self, cart: CartDTO) -> CartDTO:
        return replace(cart, items=self.enrich_items(cart.items))
