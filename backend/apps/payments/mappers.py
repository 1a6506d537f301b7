from typing import Iterable, List

from .dtos import PaymentDTO
from .models import Payment


def _iso(value) -> str:
    try:
        return value.isoformat()
    except AttributeError:
        return str(value)


class PaymentMapper:
    def to_dto(self, payment: Payment) -> PaymentDTO:
        return PaymentDTO(
            id=payment.id,
            order_id=payment.order_id,
            amount=payment.amount,
            method=str(payment.method),
            status=str(payment.status),
            transaction_id=payment.transaction_id,
            payment_date=_iso(payment.payment_date),
            updated_at=_iso(payment.updated_at),
        )

    def many_to_dto(self, payments: Iterable[Payment]) -> List[PaymentDTO]:
        return [self.to_dto(p) for p in payments]
