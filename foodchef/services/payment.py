"""
Payment Gateway
Stripe PaymentIntent creation for client-side checkout
"""
import logging
from functools import lru_cache
from typing import List

import stripe
from fastapi.concurrency import run_in_threadpool

from foodchef.config import get_settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the gateway rejects or fails a request"""


def to_minor_units(price: float) -> int:
    """Dollar amount to cents, truncating fractions of a cent"""
    return int(price * 100)


class StripePaymentGateway:
    """Creates PaymentIntents and hands back their client secret"""

    payment_method_types: List[str] = ["card"]

    def __init__(self, secret_key: str, currency: str = "usd"):
        self.secret_key = secret_key
        self.currency = currency

    async def create_payment_intent(self, amount: int) -> str:
        """
        Create a PaymentIntent for ``amount`` minor units.

        Returns:
            str: client secret used by the frontend to confirm the charge
        """
        if not self.secret_key:
            raise PaymentGatewayError("STRIPE_SECRET_KEY is not configured")

        try:
            intent = await run_in_threadpool(
                stripe.PaymentIntent.create,
                api_key=self.secret_key,
                amount=amount,
                currency=self.currency,
                payment_method_types=self.payment_method_types,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe: PaymentIntent creation failed - {e}")
            raise PaymentGatewayError(str(e)) from e

        logger.info(f"Stripe: PaymentIntent created - {intent.id} - amount={amount}")
        return intent.client_secret


@lru_cache()
def get_payment_gateway() -> StripePaymentGateway:
    settings = get_settings()
    return StripePaymentGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_CURRENCY)
