from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, List, Optional, Protocol, TYPE_CHECKING

from .models import Payment

if TYPE_CHECKING:
    from apps.payments.dtos import PaymentDTO


class PaymentProviderProtocol(Protocol):
    """Executes payments for exactly one method."""

    supported_method: str

    def create_payment(self, amount: Decimal, order_id: int) -> str:
        ...

    def confirm_payment(self, transaction_id: str) -> bool:
        ...

    def refund_payment(self, transaction_id: str) -> bool:
        ...


class PaymentRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Payment]:
        ...

    def exists(self, **filters) -> bool:
        ...

    def create(self, **data) -> Payment:
        ...

    def list_for_order(self, order_id: int) -> Iterable[Payment]:
        ...

    def compare_and_set(self, pk: Any, field: str, expected: Any, **changes) -> bool:
        ...

    def delete_matching(self, pk: Any, **conditions) -> bool:
        ...


class PaymentMapperProtocol(Protocol):
    def to_dto(self, payment: Payment) -> "PaymentDTO":
        ...

    def many_to_dto(self, payments: Iterable[Payment]) -> List["PaymentDTO"]:
        ...
