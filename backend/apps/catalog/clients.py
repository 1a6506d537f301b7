from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from apps.common import get_logger
from apps.common.http import ServiceClient
from apps.common.results import LookupResult

from .dtos import ProductSnapshot

logger = get_logger(__name__).bind(component="catalog", layer="client")

# Numeric enum values used by the catalog's ProductType.
PRODUCT_TYPES = {0: "PHYSICAL", 1: "DIGITAL"}


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _product_type(raw: Any) -> str:
    if isinstance(raw, bool):
        return ""
    if isinstance(raw, int):
        return PRODUCT_TYPES.get(raw, "")
    if isinstance(raw, str):
        return raw.strip().upper()
    return ""


def _first_media_url(payload: Mapping[str, Any]) -> str:
    media = payload.get("mediaFiles") or payload.get("media_files") or []
    for entry in media:
        if isinstance(entry, Mapping) and entry.get("url"):
            return str(entry["url"])
    return ""


class ProductCatalogClient(ServiceClient):
    """Read-only accessor for the product catalog service."""

    service_name = "product-catalog"

    def get_product(self, product_id: int) -> LookupResult[ProductSnapshot]:
        result = self.get_json(f"api/products/{product_id}")
        if not result.is_found:
            return result
        payload = result.value
        if not isinstance(payload, Mapping):
            self.logger.warning("Product payload is not an object", product_id=product_id)
            return LookupResult.failed("product-catalog returned malformed product")
        try:
            snapshot = self._to_snapshot(product_id, payload)
        except (InvalidOperation, TypeError, ValueError) as exc:
            self.logger.warning(
                "Product payload could not be parsed",
                product_id=product_id,
                error=str(exc),
            )
            return LookupResult.failed(f"product-catalog returned malformed product: {exc}")
        self.logger.debug("Product resolved", product_id=product_id, price=str(snapshot.price))
        return LookupResult.found(snapshot)

    def get_category_name(self, category_id: int) -> LookupResult[str]:
        result = self.get_json(f"api/categories/{category_id}")
        if not result.is_found:
            return result
        payload = result.value
        name = payload.get("name") if isinstance(payload, Mapping) else None
        if not name:
            return LookupResult.not_found(f"category {category_id} has no name")
        return LookupResult.found(str(name))

    def _to_snapshot(self, product_id: int, payload: Mapping[str, Any]) -> ProductSnapshot:
        raw_price = payload.get("price")
        if raw_price is None:
            raise ValueError("price missing")
        price = Decimal(str(raw_price))
        category: Dict[str, Any] = payload.get("category") or {}
        category_id = _as_int(payload.get("categoryId"))
        if category_id is None and isinstance(category, Mapping):
            category_id = _as_int(category.get("id"))
        category_name = ""
        if isinstance(category, Mapping) and category.get("name"):
            category_name = str(category["name"])
        elif category_id is not None:
            # Older catalog builds return only the id; the name is best effort.
            category_name = self.get_category_name(category_id).value_or("")
        return ProductSnapshot(
            id=_as_int(payload.get("id")) or product_id,
            name=str(payload.get("name") or ""),
            price=price,
            description=str(payload.get("description") or ""),
            category_id=category_id,
            category_name=category_name,
            product_type=_product_type(payload.get("type")),
            image_url=_first_media_url(payload),
        )
