from __future__ import annotations

from typing import Protocol

from apps.common.results import LookupResult

from .dtos import ProductSnapshot


class ProductCatalogProtocol(Protocol):
    def get_product(self, product_id: int) -> LookupResult[ProductSnapshot]:
        ...
