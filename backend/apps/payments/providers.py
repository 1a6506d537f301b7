from __future__ import annotations

import uuid
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

import stripe

from apps.api.exceptions import UnsupportedError
from apps.common import get_logger

from .models import PaymentMethod
from .protocols import PaymentProviderProtocol

logger = get_logger(__name__).bind(component="payments", layer="provider")


class MockCreditCardProvider:
    """Card provider for environments without a gateway; every call succeeds."""

    supported_method = PaymentMethod.CREDIT_CARD

    def create_payment(self, amount: Decimal, order_id: int) -> str:
        transaction_id = f"card_mock_{uuid.uuid4().hex}"
        logger.debug("Mock card payment created", order_id=order_id, transaction_id=transaction_id)
        return transaction_id

    def confirm_payment(self, transaction_id: str) -> bool:
        return True

    def refund_payment(self, transaction_id: str) -> bool:
        return True


class MockCashOnDeliveryProvider:
    supported_method = PaymentMethod.CASH_ON_DELIVERY

    def create_payment(self, amount: Decimal, order_id: int) -> str:
        transaction_id = f"cash_mock_{uuid.uuid4().hex}"
        logger.debug("Cash payment registered", order_id=order_id, transaction_id=transaction_id)
        return transaction_id

    def confirm_payment(self, transaction_id: str) -> bool:
        return True

    def refund_payment(self, transaction_id: str) -> bool:
        return True


def to_minor_units(amount: Decimal) -> int:
    """Stripe amounts are integers in the currency's smallest unit."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeProvider:
    """PaymentIntent-backed provider.

    Stripe errors propagate to the caller; the payment service wraps them.
    """

    supported_method = PaymentMethod.STRIPE
    test_payment_method = "pm_card_visa"

    def __init__(self, api_key: str, currency: str = "usd", client=stripe):
        self.api_key = api_key
        self.currency = currency
        self.client = client
        self.logger = logger.bind(provider="stripe")

    def create_payment(self, amount: Decimal, order_id: int) -> str:
        intent = self.client.PaymentIntent.create(
            amount=to_minor_units(amount),
            currency=self.currency,
            payment_method=self.test_payment_method,
            payment_method_types=["card"],
            metadata={"order_id": str(order_id)},
            api_key=self.api_key,
        )
        self.logger.info("PaymentIntent created", order_id=order_id, intent_id=intent.id)
        return intent.id

    def confirm_payment(self, transaction_id: str) -> bool:
        intent = self.client.PaymentIntent.confirm(
            transaction_id,
            payment_method=self.test_payment_method,
            api_key=self.api_key,
        )
        self.logger.info("PaymentIntent confirmed", intent_id=transaction_id, status=intent.status)
        return intent.status == "succeeded"

    def refund_payment(self, transaction_id: str) -> bool:
        intent = self.client.PaymentIntent.retrieve(transaction_id, api_key=self.api_key)
        if intent.status != "succeeded":
            self.logger.warning(
                "Refund refused: intent not captured",
                intent_id=transaction_id,
                status=intent.status,
            )
            return False
        refund = self.client.Refund.create(payment_intent=transaction_id, api_key=self.api_key)
        self.logger.info("Refund created", intent_id=transaction_id, status=refund.status)
        return refund.status == "succeeded"


class ProviderRegistry:
    """Read-only map from payment method to the provider that executes it."""

    def __init__(self, providers: Iterable[PaymentProviderProtocol]):
        table = {}
        for provider in providers:
            method = PaymentMethod(provider.supported_method)
            if method in table:
                raise ValueError(f"Duplicate payment provider registered for {method.value}")
            table[method] = provider
        self._providers: Mapping[PaymentMethod, PaymentProviderProtocol] = MappingProxyType(table)

    def __contains__(self, method) -> bool:
        return self._coerce(method) in self._providers

    @staticmethod
    def _coerce(method) -> Optional[PaymentMethod]:
        try:
            return PaymentMethod(method)
        except ValueError:
            return None

    def resolve(self, method) -> PaymentProviderProtocol:
        provider = self._providers.get(self._coerce(method))
        if provider is None:
            raise UnsupportedError(
                f"Payment method {method} is not supported",
                details={"method": str(method), "supported": self.methods()},
            )
        return provider

    def methods(self) -> List[str]:
        return [m.value for m in self._providers]
