from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass
class OrderItemDTO:
    id: Optional[int]
    product_id: int
    quantity: int
    price: Decimal
    product_name: str
    image_url: str
    category_id: Optional[int]
    category_name: str
    product_type: str


@dataclass
class OrderDTO:
    id: int
    customer_id: int
    order_date: str
    updated_date: str
    status: str
    total_amount: Decimal
    customer_name: Optional[str]
    customer_email: Optional[str]
    shipping_address_id: Optional[int]
    shipping_address: Optional[Dict[str, Any]]
    items: List[OrderItemDTO] = field(default_factory=list)


@dataclass
class OrderPageDTO:
    count: int
    page: int
    page_size: int
    results: List[OrderDTO]
