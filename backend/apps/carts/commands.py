from dataclasses import dataclass


@dataclass
class CartItemCommand:
    product_id: int
    quantity: int

    def for_add(self) -> "CartItemCommand":
        return CartItemCommand(self.product_id, self.quantity if self.quantity > 0 else 1)


@dataclass
class CartMergeCommand:
    from_customer_id: int
    to_customer_id: int
