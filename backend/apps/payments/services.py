from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.api.exceptions import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    UpstreamError,
)
from apps.common import get_logger

from .dtos import PaymentDTO
from .models import CLOSED_STATUSES, OFFLINE_METHODS, Payment, PaymentMethod, PaymentStatus
from .protocols import PaymentMapperProtocol, PaymentRepositoryProtocol
from .providers import ProviderRegistry

logger = get_logger(__name__).bind(component="payments", layer="service")

CHECKOUT_SESSION_PREFIX = "cs_"


def is_checkout_session(transaction_id: Optional[str]) -> bool:
    return bool(transaction_id) and transaction_id.startswith(CHECKOUT_SESSION_PREFIX)


class PaymentService:
    """Payment state machine on top of the provider registry.

    Provider failures never move a payment to FAILED; the status stays where
    it was so the call can be retried, and the failure is raised as UpstreamError.
    """

    def __init__(
        self,
        payments: PaymentRepositoryProtocol,
        registry: ProviderRegistry,
        payment_mapper: PaymentMapperProtocol,
    ):
        self.payments = payments
        self.registry = registry
        self.payment_mapper = payment_mapper
        self.logger = logger.bind(service="PaymentService")

    def list_methods(self) -> List[str]:
        return self.registry.methods()

    def _require(self, payment_id: int) -> Payment:
        payment = self.payments.get(id=payment_id)
        if not payment:
            self.logger.info("Payment not found", payment_id=payment_id)
            raise NotFoundError("Payment not found", details={"id": str(payment_id)})
        return payment

    def get_payment(self, payment_id: int) -> PaymentDTO:
        return self.payment_mapper.to_dto(self._require(payment_id))

    def list_payments_for_order(self, order_id: int) -> List[PaymentDTO]:
        return self.payment_mapper.many_to_dto(self.payments.list_for_order(order_id))

    def _coerce_amount(self, amount) -> Decimal:
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            raise InvalidOperationError("Amount must be a number", details={"amount": str(amount)}) from None
        if not amount.is_finite() or amount <= 0:
            raise InvalidOperationError("Amount must be positive", details={"amount": str(amount)})
        return amount

    def _ensure_unpaid(self, order_id: int) -> None:
        if self.payments.exists(order_id=order_id):
            self.logger.warning("Duplicate payment refused", order_id=order_id)
            raise ConflictError(
                "A payment already exists for this order",
                details={"orderId": str(order_id)},
            )

    def ensure_payable(self, order_id: int, amount) -> Decimal:
        """Validate an amount for an order that has no payment yet."""
        amount = self._coerce_amount(amount)
        self._ensure_unpaid(order_id)
        return amount

    def _store(self, order_id: int, **fields) -> Payment:
        try:
            with transaction.atomic():
                return self.payments.create(order_id=order_id, **fields)
        except IntegrityError:
            self.logger.warning(
                "Concurrent payment creation lost the race; provider handle orphaned",
                order_id=order_id,
                transaction_id=fields.get("transaction_id"),
            )
            raise ConflictError(
                "A payment already exists for this order",
                details={"orderId": str(order_id)},
            ) from None

    def create_payment(self, order_id: int, amount, method: str) -> PaymentDTO:
        provider = self.registry.resolve(method)
        amount = self.ensure_payable(order_id, amount)
        try:
            transaction_id = provider.create_payment(amount, order_id)
        except Exception as exc:
            self.logger.error(
                "Provider failed to create payment",
                order_id=order_id,
                method=method,
                error=str(exc),
            )
            raise UpstreamError(
                "Payment provider failed to create the payment",
                details={"orderId": str(order_id), "method": str(method)},
            ) from exc
        resolved_method = PaymentMethod(method)
        initial = (
            PaymentStatus.PENDING
            if resolved_method.value in OFFLINE_METHODS
            else PaymentStatus.REQUIRES_CONFIRMATION
        )
        payment = self._store(
            order_id,
            amount=amount,
            method=resolved_method,
            status=initial,
            transaction_id=transaction_id,
        )
        self.logger.info(
            "Payment created",
            payment_id=payment.id,
            order_id=order_id,
            method=resolved_method.value,
            status=initial.value,
        )
        return self.payment_mapper.to_dto(payment)

    def record_checkout_session(self, order_id: int, amount, session_id: str) -> PaymentDTO:
        """Store the STRIPE payment backing a hosted checkout session until Stripe reports it paid."""
        payment = self._store(
            order_id,
            amount=self._coerce_amount(amount),
            method=PaymentMethod.STRIPE,
            status=PaymentStatus.REQUIRES_CONFIRMATION,
            transaction_id=session_id,
        )
        self.logger.info(
            "Checkout session payment recorded",
            payment_id=payment.id,
            order_id=order_id,
            session_id=session_id,
        )
        return self.payment_mapper.to_dto(payment)

    def complete_checkout_session(
        self, order_id: int, session_id: str, payment_intent_id: Optional[str] = None
    ) -> Optional[PaymentDTO]:
        """Mark the session's payment COMPLETED; replays of the same event are no-ops.

        Returns None when the order has no open payment for this session.
        """
        payment = self.payments.get(order_id=order_id)
        handles = {session_id, payment_intent_id} - {None}
        if payment is None or payment.transaction_id not in handles:
            self.logger.warning(
                "Completed checkout session has no matching payment",
                order_id=order_id,
                session_id=session_id,
            )
            return None
        if payment.status == PaymentStatus.COMPLETED:
            self.logger.debug("Checkout session already applied", payment_id=payment.id)
            return self.payment_mapper.to_dto(payment)
        if payment.status != PaymentStatus.REQUIRES_CONFIRMATION:
            self.logger.warning(
                "Completed checkout session ignored for closed payment",
                payment_id=payment.id,
                status=str(payment.status),
            )
            return None
        # Refunds go through the PaymentIntent, so it replaces the session id as the handle.
        return self._transition(
            payment,
            PaymentStatus.COMPLETED,
            transaction_id=payment_intent_id or session_id,
        )

    def discard_checkout_session(self, order_id: int, session_id: str) -> bool:
        """Drop the unpaid payment of an expired session so the order can be paid again."""
        payment = self.payments.get(order_id=order_id)
        if payment is None or payment.transaction_id != session_id:
            return False
        removed = self.payments.delete_matching(
            payment.id,
            status=PaymentStatus.REQUIRES_CONFIRMATION,
            transaction_id=session_id,
        )
        if removed:
            self.logger.info(
                "Expired checkout session payment discarded",
                payment_id=payment.id,
                order_id=order_id,
                session_id=session_id,
            )
        return removed

    def _transition(self, payment: Payment, target: PaymentStatus, **changes) -> PaymentDTO:
        """Compare-and-swap from the status we observed to `target`."""
        expected = payment.status
        if self.payments.compare_and_set(
            payment.id, "status", expected, status=target, updated_at=timezone.now(), **changes
        ):
            self.logger.info(
                "Payment status changed",
                payment_id=payment.id,
                previous=str(expected),
                status=target.value,
            )
            return self.get_payment(payment.id)
        current = self._require(payment.id)
        if current.status == target:
            self.logger.debug("Concurrent transition already applied", payment_id=payment.id)
            return self.payment_mapper.to_dto(current)
        self.logger.warning(
            "Payment changed concurrently",
            payment_id=payment.id,
            expected=str(expected),
            actual=str(current.status),
        )
        raise ConflictError(
            "Payment was modified concurrently",
            details={"id": str(payment.id), "status": str(current.status)},
        )

    def _call_provider(self, payment: Payment, action: str) -> bool:
        provider = self.registry.resolve(payment.method)
        call = provider.confirm_payment if action == "confirm" else provider.refund_payment
        try:
            return bool(call(payment.transaction_id))
        except Exception as exc:
            self.logger.error(
                f"Provider {action} raised",
                payment_id=payment.id,
                method=str(payment.method),
                error=str(exc),
            )
            raise UpstreamError(
                f"Payment provider failed to {action} the payment",
                details={"id": str(payment.id)},
            ) from exc

    def confirm_payment(self, payment_id: int) -> PaymentDTO:
        payment = self._require(payment_id)
        if payment.status == PaymentStatus.COMPLETED:
            self.logger.debug("Confirm is a no-op for completed payment", payment_id=payment_id)
            return self.payment_mapper.to_dto(payment)
        if payment.status in CLOSED_STATUSES:
            raise InvalidOperationError(
                f"Cannot confirm a payment in status {payment.status}",
                details={"id": str(payment_id), "status": str(payment.status)},
            )
        if is_checkout_session(payment.transaction_id):
            raise InvalidOperationError(
                "Checkout session payments are completed by Stripe",
                details={"id": str(payment_id)},
            )
        if not self._call_provider(payment, "confirm"):
            self.logger.warning("Provider declined confirmation", payment_id=payment_id)
            raise UpstreamError(
                "Payment provider declined the confirmation",
                details={"id": str(payment_id)},
            )
        return self._transition(payment, PaymentStatus.COMPLETED)

    def refund_payment(self, payment_id: int) -> PaymentDTO:
        payment = self._require(payment_id)
        if payment.status != PaymentStatus.COMPLETED:
            raise InvalidOperationError(
                "Only completed payments can be refunded",
                details={"id": str(payment_id), "status": str(payment.status)},
            )
        if not self._call_provider(payment, "refund"):
            self.logger.warning("Provider declined refund", payment_id=payment_id)
            raise UpstreamError(
                "Payment provider declined the refund",
                details={"id": str(payment_id)},
            )
        return self._transition(payment, PaymentStatus.REFUNDED)
