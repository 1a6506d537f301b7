from __future__ import annotations

from django.conf import settings

from .clients import ProductCatalogClient


def build_product_catalog() -> ProductCatalogClient:
    return ProductCatalogClient(getattr(settings, "PRODUCT_SERVICE_URL", ""))
