import time
import unittest
from datetime import timedelta
from decimal import Decimal
from unittest.mock import Mock, patch

import stripe

from apps.api.exceptions import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    UpstreamError,
)
from apps.payments.checkout_sessions import StripeCheckoutService
from apps.payments.mappers import PaymentMapper
from apps.payments.providers import MockCreditCardProvider, ProviderRegistry
from apps.payments.services import PaymentService

from .fakes import DummyAtomic, FakePaymentRepository

SESSION_URL = "https://checkout.stripe.com/c/pay/cs_test_1"


def make_event(event_type, session_id="cs_test_1", order_id="5", **session):
    session.setdefault("metadata", {"order_id": order_id})
    return {
        "id": "evt_1",
        "type": event_type,
        "data": {"object": {"id": session_id, **session}},
    }


class StripeCheckoutServiceTests(unittest.TestCase):
    def setUp(self):
        self.atomic_patch = patch("apps.payments.services.transaction.atomic", DummyAtomic())
        self.atomic_patch.start()
        self.addCleanup(self.atomic_patch.stop)
        self.payments = FakePaymentRepository()
        self.stripe_provider = Mock(supported_method="STRIPE")
        self.stripe_provider.refund_payment.return_value = True
        registry = ProviderRegistry([MockCreditCardProvider(), self.stripe_provider])
        self.payment_service = PaymentService(self.payments, registry, PaymentMapper())
        self.client = Mock()
        self.client.checkout.Session.create.return_value = {"id": "cs_test_1", "url": SESSION_URL}
        self.service = StripeCheckoutService(
            self.payment_service,
            "sk_test",
            webhook_secret="whsec_test",
            publishable_key="pk_test",
            client=self.client,
        )

    def _create(self, order_id=5, amount="25.00"):
        return self.service.create_checkout_session(
            order_id, amount, "https://shop.test/success", "https://shop.test/cancel"
        )

    def _deliver(self, event):
        self.client.Webhook.construct_event.return_value = event
        return self.service.handle_webhook(b"{}", "t=1,v1=abc")

    def test_create_session_records_stripe_payment(self):
        before = time.time()
        dto = self._create()
        kwargs = self.client.checkout.Session.create.call_args.kwargs
        self.assertEqual(kwargs["mode"], "payment")
        self.assertEqual(kwargs["metadata"], {"order_id": "5"})
        self.assertEqual(kwargs["line_items"][0]["price_data"]["unit_amount"], 2500)
        self.assertEqual(kwargs["line_items"][0]["price_data"]["currency"], "usd")
        self.assertEqual(kwargs["api_key"], "sk_test")
        day = timedelta(hours=24).total_seconds()
        self.assertGreaterEqual(kwargs["expires_at"], int(before + day) - 1)
        self.assertLessEqual(kwargs["expires_at"], int(time.time() + day) + 1)

        self.assertEqual(dto.session_id, "cs_test_1")
        self.assertEqual(dto.url, SESSION_URL)
        self.assertEqual(dto.publishable_key, "pk_test")
        self.assertEqual(dto.payment.method, "STRIPE")
        self.assertEqual(dto.payment.status, "REQUIRES_CONFIRMATION")
        self.assertEqual(dto.payment.transaction_id, "cs_test_1")
        self.assertEqual(dto.payment.amount, Decimal("25.00"))

    def test_stripe_failure_stores_nothing(self):
        self.client.checkout.Session.create.side_effect = stripe.APIConnectionError("network down")
        with self.assertRaises(UpstreamError):
            self._create()
        self.assertIsNone(self.payments.get(order_id=5))

    def test_paid_order_cannot_open_a_session(self):
        self._create()
        with self.assertRaises(ConflictError):
            self._create()
        self.assertEqual(self.client.checkout.Session.create.call_count, 1)

    def test_invalid_amount_is_rejected_before_calling_stripe(self):
        with self.assertRaises(InvalidOperationError):
            self._create(amount="0")
        self.client.checkout.Session.create.assert_not_called()

    def test_get_session(self):
        self.client.checkout.Session.retrieve.return_value = {
            "id": "cs_test_1",
            "metadata": {"order_id": "5"},
            "payment_status": "paid",
            "customer_email": None,
            "customer_details": {"email": "buyer@example.com"},
            "amount_total": 2550,
            "currency": "usd",
            "payment_intent": "pi_123",
        }
        session = self.service.get_session("cs_test_1")
        self.client.checkout.Session.retrieve.assert_called_once_with("cs_test_1", api_key="sk_test")
        self.assertEqual(session.order_id, 5)
        self.assertEqual(session.payment_status, "paid")
        self.assertEqual(session.customer_email, "buyer@example.com")
        self.assertEqual(session.amount_total, Decimal("25.50"))
        self.assertEqual(session.payment_intent_id, "pi_123")

    def test_get_unknown_session_is_not_found(self):
        self.client.checkout.Session.retrieve.side_effect = stripe.InvalidRequestError(
            "No such checkout.session: cs_missing", "id"
        )
        with self.assertRaises(NotFoundError):
            self.service.get_session("cs_missing")

    def test_webhook_requires_secret(self):
        service = StripeCheckoutService(self.payment_service, "sk_test", client=self.client)
        with self.assertRaises(InvalidOperationError):
            service.handle_webhook(b"{}", "t=1,v1=abc")
        self.client.Webhook.construct_event.assert_not_called()

    def test_webhook_with_bad_signature_is_rejected(self):
        self.client.Webhook.construct_event.side_effect = stripe.SignatureVerificationError(
            "No signatures found", "t=1,v1=abc"
        )
        with self.assertRaises(InvalidOperationError):
            self.service.handle_webhook(b"{}", "t=1,v1=abc")

    def test_webhook_with_malformed_payload_is_rejected(self):
        self.client.Webhook.construct_event.side_effect = ValueError("Invalid payload")
        with self.assertRaises(InvalidOperationError):
            self.service.handle_webhook(b"not json", "t=1,v1=abc")

    def test_completed_session_completes_payment(self):
        created = self._create()
        event = make_event(
            "checkout.session.completed", payment_status="paid", payment_intent="pi_123"
        )
        self.assertEqual(self._deliver(event), "checkout.session.completed")
        self.client.Webhook.construct_event.assert_called_once_with(b"{}", "t=1,v1=abc", "whsec_test")
        payment = self.payment_service.get_payment(created.payment.id)
        self.assertEqual(payment.status, "COMPLETED")
        self.assertEqual(payment.transaction_id, "pi_123")

        # Stripe retries deliveries; the second one changes nothing.
        self._deliver(event)
        self.assertEqual(self.payment_service.get_payment(created.payment.id).status, "COMPLETED")

    def test_completed_session_can_then_be_refunded(self):
        created = self._create()
        self._deliver(
            make_event("checkout.session.completed", payment_status="paid", payment_intent="pi_123")
        )
        refunded = self.payment_service.refund_payment(created.payment.id)
        self.assertEqual(refunded.status, "REFUNDED")
        self.stripe_provider.refund_payment.assert_called_once_with("pi_123")

    def test_unpaid_completed_session_leaves_payment_open(self):
        created = self._create()
        self._deliver(make_event("checkout.session.completed", payment_status="unpaid"))
        payment = self.payment_service.get_payment(created.payment.id)
        self.assertEqual(payment.status, "REQUIRES_CONFIRMATION")
        self.assertEqual(payment.transaction_id, "cs_test_1")

    def test_completed_session_for_other_session_is_ignored(self):
        created = self._create()
        self._deliver(
            make_event("checkout.session.completed", session_id="cs_other", payment_status="paid")
        )
        self.assertEqual(
            self.payment_service.get_payment(created.payment.id).status, "REQUIRES_CONFIRMATION"
        )

    def test_completed_session_without_order_metadata_is_acknowledged(self):
        event = make_event("checkout.session.completed", metadata={}, payment_status="paid")
        self.assertEqual(self._deliver(event), "checkout.session.completed")

    def test_expired_session_frees_the_order(self):
        self._create()
        self._deliver(make_event("checkout.session.expired"))
        self.assertIsNone(self.payments.get(order_id=5))
        self.client.checkout.Session.create.return_value = {"id": "cs_test_2", "url": SESSION_URL}
        retry = self._create()
        self.assertEqual(retry.payment.transaction_id, "cs_test_2")

    def test_expired_event_does_not_touch_completed_payment(self):
        created = self._create()
        self._deliver(
            make_event("checkout.session.completed", payment_status="paid", payment_intent="pi_123")
        )
        self._deliver(make_event("checkout.session.expired"))
        self.assertEqual(self.payment_service.get_payment(created.payment.id).status, "COMPLETED")

    def test_other_events_are_ignored(self):
        created = self._create()
        self.assertEqual(self._deliver(make_event("payment_intent.created")), "payment_intent.created")
        self.assertEqual(
            self.payment_service.get_payment(created.payment.id).status, "REQUIRES_CONFIRMATION"
        )

    def test_session_payment_cannot_be_confirmed_by_hand(self):
        created = self._create()
        with self.assertRaises(InvalidOperationError):
            self.payment_service.confirm_payment(created.payment.id)
