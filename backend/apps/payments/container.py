from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from django.conf import settings

from apps.common import get_logger

from .checkout_sessions import StripeCheckoutService
from .mappers import PaymentMapper
from .providers import (
    MockCashOnDeliveryProvider,
    MockCreditCardProvider,
    ProviderRegistry,
    StripeProvider,
)
from .repositories import PaymentRepository
from .services import PaymentService

logger = get_logger(__name__).bind(component="payments", layer="container")


@lru_cache(maxsize=None)
def build_provider_registry() -> ProviderRegistry:
    """Built once per process; the gateway provider is registered only when configured."""
    providers = [MockCreditCardProvider(), MockCashOnDeliveryProvider()]
    api_key = getattr(settings, "STRIPE_SECRET_KEY", "")
    if api_key:
        providers.append(
            StripeProvider(api_key, currency=getattr(settings, "STRIPE_CURRENCY", "usd"))
        )
    else:
        logger.info("Stripe provider disabled; STRIPE_SECRET_KEY not set")
    return ProviderRegistry(providers)


def build_payment_service() -> PaymentService:
    return PaymentService(
        payments=PaymentRepository(),
        registry=build_provider_registry(),
        payment_mapper=PaymentMapper(),
    )


def build_checkout_session_service() -> Optional[StripeCheckoutService]:
    """None when Stripe is not configured; the checkout session endpoints then answer UNSUPPORTED."""
    api_key = getattr(settings, "STRIPE_SECRET_KEY", "")
    if not api_key:
        return None
    return StripeCheckoutService(
        payments=build_payment_service(),
        api_key=api_key,
        webhook_secret=getattr(settings, "STRIPE_WEBHOOK_SECRET", ""),
        publishable_key=getattr(settings, "STRIPE_PUBLISHABLE_KEY", ""),
        currency=getattr(settings, "STRIPE_CURRENCY", "usd"),
        session_ttl=timedelta(hours=getattr(settings, "STRIPE_CHECKOUT_TTL_HOURS", 24)),
    )
