from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class PaymentDTO:
    id: int
    order_id: int
    amount: Decimal
    method: str
    status: str
    transaction_id: Optional[str]
    payment_date: str
    updated_at: str


@dataclass
class CheckoutSessionDTO:
    session_id: str
    url: Optional[str]
    publishable_key: str
    payment: PaymentDTO


@dataclass
class CheckoutSessionStatusDTO:
    id: str
    order_id: Optional[int]
    payment_status: Optional[str]
    customer_email: Optional[str]
    amount_total: Optional[Decimal]
    currency: Optional[str]
    payment_intent_id: Optional[str]
