from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ProductSnapshot:
    """Authoritative product data as served by the product catalog."""

    id: int
    name: str
    price: Decimal
    description: str = ""
    category_id: Optional[int] = None
    category_name: str = ""
    product_type: str = ""
    image_url: str = ""
