from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from apps.catalog.dtos import ProductSnapshot


@dataclass
class OrderItemCommand:
    product_id: int
    quantity: int
    price: Decimal
    product_name: str = ""
    image_url: str = ""
    category_id: Optional[int] = None
    category_name: str = ""
    product_type: str = ""

    @staticmethod
    def from_snapshot(snapshot: ProductSnapshot, quantity: int) -> "OrderItemCommand":
        return OrderItemCommand(
            product_id=snapshot.id,
            quantity=quantity,
            price=snapshot.price,
            product_name=snapshot.name,
            image_url=snapshot.image_url,
            category_id=snapshot.category_id,
            category_name=snapshot.category_name,
            product_type=snapshot.product_type,
        )

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "OrderItemCommand":
        return OrderItemCommand(
            product_id=int(data["product_id"]),
            quantity=int(data["quantity"]),
            price=Decimal(data["price"]),
            product_name=data.get("product_name") or "",
            image_url=data.get("image_url") or "",
            category_id=data.get("category_id"),
            category_name=data.get("category_name") or "",
            product_type=data.get("product_type") or "",
        )

    def as_model_fields(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
            "product_name": self.product_name,
            "image_url": self.image_url,
            "category_id": self.category_id,
            "category_name": self.category_name,
            "product_type": self.product_type,
        }


@dataclass
class OrderCreateCommand:
    customer_id: int
    items: List[OrderItemCommand] = field(default_factory=list)
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    shipping_address_id: Optional[int] = None
    shipping_address: Optional[Dict[str, Any]] = None

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "OrderCreateCommand":
        return OrderCreateCommand(
            customer_id=int(data["customer_id"]),
            items=[OrderItemCommand.from_validated(i) for i in data.get("items", [])],
            customer_name=data.get("customer_name"),
            customer_email=data.get("customer_email"),
            shipping_address_id=data.get("shipping_address_id"),
            shipping_address=data.get("shipping_address"),
        )
