from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class CartItemDTO:
    id: Optional[int]
    cart_id: int
    product_id: int
    quantity: int
    price: Decimal
    product_name: str
    description: str
    image_url: str
    category_id: Optional[int]
    category_name: str
    product_type: str
    added_at: Optional[str] = None


@dataclass
class CartDTO:
    id: int
    customer_id: int
    created_at: str
    items: List[CartItemDTO] = field(default_factory=list)
