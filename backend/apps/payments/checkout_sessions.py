from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Any, Mapping, Optional

import stripe
from django.utils import timezone

from apps.api.exceptions import InvalidOperationError, NotFoundError, UpstreamError
from apps.common import get_logger

from .dtos import CheckoutSessionDTO, CheckoutSessionStatusDTO
from .providers import to_minor_units
from .services import PaymentService

logger = get_logger(__name__).bind(component="payments", layer="checkout_session")

SESSION_COMPLETED = "checkout.session.completed"
SESSION_EXPIRED = "checkout.session.expired"


def _order_id(session: Mapping[str, Any]) -> Optional[int]:
    metadata = session.get("metadata") or {}
    try:
        return int(metadata.get("order_id"))
    except (TypeError, ValueError):
        return None


class StripeCheckoutService:
    """Stripe-hosted Checkout Sessions backed by a STRIPE payment row.

    The payment is stored as REQUIRES_CONFIRMATION when the session is created
    and moved to COMPLETED only by a signature-verified webhook.
    """

    def __init__(
        self,
        payments: PaymentService,
        api_key: str,
        webhook_secret: str = "",
        publishable_key: str = "",
        currency: str = "usd",
        session_ttl: timedelta = timedelta(hours=24),
        client=stripe,
    ):
        self.payments = payments
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.publishable_key = publishable_key
        self.currency = currency
        self.session_ttl = session_ttl
        self.client = client
        self.logger = logger.bind(service="StripeCheckoutService")

    def create_checkout_session(
        self, order_id: int, amount, success_url: str, cancel_url: str
    ) -> CheckoutSessionDTO:
        amount = self.payments.ensure_payable(order_id, amount)
        expires_at = timezone.now() + self.session_ttl
        try:
            session = self.client.checkout.Session.create(
                mode="payment",
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": self.currency,
                            "unit_amount": to_minor_units(amount),
                            "product_data": {
                                "name": f"Order #{order_id}",
                                "description": f"Payment for order #{order_id}",
                            },
                        },
                        "quantity": 1,
                    }
                ],
                success_url=success_url,
                cancel_url=cancel_url,
                metadata={"order_id": str(order_id)},
                expires_at=int(expires_at.timestamp()),
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            self.logger.error("Checkout session creation failed", order_id=order_id, error=str(exc))
            raise UpstreamError(
                "Stripe failed to create the checkout session",
                details={"orderId": str(order_id)},
            ) from exc
        payment = self.payments.record_checkout_session(order_id, amount, session["id"])
        self.logger.info(
            "Checkout session created",
            order_id=order_id,
            session_id=session["id"],
            amount=str(amount),
        )
        return CheckoutSessionDTO(
            session_id=session["id"],
            url=session.get("url"),
            publishable_key=self.publishable_key,
            payment=payment,
        )

    def get_session(self, session_id: str) -> CheckoutSessionStatusDTO:
        try:
            session = self.client.checkout.Session.retrieve(session_id, api_key=self.api_key)
        except stripe.InvalidRequestError:
            self.logger.info("Checkout session not found", session_id=session_id)
            raise NotFoundError("Checkout session not found", details={"id": session_id}) from None
        except stripe.StripeError as exc:
            self.logger.error("Checkout session lookup failed", session_id=session_id, error=str(exc))
            raise UpstreamError(
                "Stripe failed to return the checkout session",
                details={"id": session_id},
            ) from exc
        amount_total = session.get("amount_total")
        details = session.get("customer_details") or {}
        return CheckoutSessionStatusDTO(
            id=session["id"],
            order_id=_order_id(session),
            payment_status=session.get("payment_status"),
            customer_email=session.get("customer_email") or details.get("email"),
            amount_total=(Decimal(amount_total) / 100) if amount_total is not None else None,
            currency=session.get("currency"),
            payment_intent_id=session.get("payment_intent"),
        )

    def handle_webhook(self, payload: bytes, signature: str) -> str:
        """Verify and apply a Stripe event; returns the event type.

        Events for unknown orders or other event types are acknowledged and ignored.
        """
        if not self.webhook_secret:
            self.logger.warning("Webhook refused: STRIPE_WEBHOOK_SECRET not set")
            raise InvalidOperationError("Stripe webhooks are not configured")
        try:
            event = self.client.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            self.logger.warning("Webhook signature verification failed", error=str(exc))
            raise InvalidOperationError("Invalid webhook payload or signature") from None

        event_type = event["type"]
        session = event["data"]["object"]
        self.logger.info("Webhook received", event_type=event_type, event_id=event.get("id"))
        if event_type == SESSION_COMPLETED:
            self._session_completed(session)
        elif event_type == SESSION_EXPIRED:
            self._session_expired(session)
        else:
            self.logger.debug("Webhook event ignored", event_type=event_type)
        return event_type

    def _session_completed(self, session: Mapping[str, Any]) -> None:
        order_id = _order_id(session)
        if order_id is None:
            self.logger.warning("Completed session has no order_id metadata", session_id=session["id"])
            return
        if session.get("payment_status") != "paid":
            # Delayed payment methods report completion before the money arrives.
            self.logger.info(
                "Completed session not paid yet",
                session_id=session["id"],
                order_id=order_id,
                payment_status=session.get("payment_status"),
            )
            return
        self.payments.complete_checkout_session(
            order_id, session["id"], session.get("payment_intent")
        )

    def _session_expired(self, session: Mapping[str, Any]) -> None:
        order_id = _order_id(session)
        if order_id is None:
            return
        self.payments.discard_checkout_session(order_id, session["id"])
