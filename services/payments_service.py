"""
Payments service -- thin adapters over the Razorpay (UPI / India) and
Stripe (global cards) SDKs.

Amounts come in as major units and are sent to the gateways in minor units
(paise / cents). The SDKs are blocking, so calls are pushed to a worker
thread. No retries: a failed call surfaces as PaymentError.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from config_env import RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, STRIPE_SECRET_KEY

logger = logging.getLogger(__name__)


class PaymentError(Exception):
    """A payment gateway rejected the request or is unreachable."""


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


class RazorpayGateway:
    def __init__(self, key_id: str = RAZORPAY_KEY_ID, key_secret: str = RAZORPAY_KEY_SECRET):
        self.key_id = key_id
        self._key_secret = key_secret
        self._client = None

    def _get_client(self):
        if self._client is None:
            if not self.key_id or not self._key_secret:
                raise PaymentError("Razorpay is not configured")
            import razorpay

            self._client = razorpay.Client(auth=(self.key_id, self._key_secret))
        return self._client

    def _create_order(self, amount: float, currency: str) -> dict:
        client = self._get_client()
        try:
            order = client.order.create(data={
                "amount": to_minor_units(amount),
                "currency": currency,
                "receipt": f"receipt_{int(time.time() * 1000)}",
            })
        except Exception as e:
            raise PaymentError(f"Razorpay order creation failed: {e}") from e
        return {
            "order_id": order["id"],
            "amount": order["amount"],
            "currency": order["currency"],
            "key": self.key_id,
        }

    async def create_order(self, amount: float, currency: str = "INR") -> dict:
        return await asyncio.to_thread(self._create_order, amount, currency)

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        client = self._get_client()
        try:
            client.utility.verify_payment_signature({
                "razorpay_order_id": order_id,
                "razorpay_payment_id": payment_id,
                "razorpay_signature": signature,
            })
        except Exception as e:
            logger.warning("Razorpay signature mismatch for payment %s: %s", payment_id, e)
            return False
        return True


class StripeGateway:
    def __init__(self, secret_key: str = STRIPE_SECRET_KEY):
        self._secret_key = secret_key

    def _create_intent(self, amount: float, currency: str, user_id: str) -> dict:
        if not self._secret_key:
            raise PaymentError("Stripe is not configured")
        import stripe

        try:
            intent = stripe.PaymentIntent.create(
                api_key=self._secret_key,
                amount=to_minor_units(amount),
                currency=currency.lower(),
                metadata={"user_id": user_id},
            )
        except Exception as e:
            raise PaymentError(f"Stripe payment intent failed: {e}") from e
        return {"client_secret": intent["client_secret"], "payment_intent_id": intent["id"]}

    async def create_intent(self, amount: float, currency: str = "USD", user_id: str = "") -> dict:
        return await asyncio.to_thread(self._create_intent, amount, currency, user_id)


class PaymentsService:
    """Routes the payment endpoints to the right gateway."""

    def __init__(self, razorpay: RazorpayGateway, stripe: StripeGateway):
        self.razorpay = razorpay
        self.stripe = stripe

    async def create_razorpay_order(self, amount: float, currency: str = "INR") -> dict:
        order = await self.razorpay.create_order(amount, currency)
        logger.info("Razorpay order %s created (%s %s)", order["order_id"], amount, currency)
        return order

    async def create_stripe_intent(self, amount: float, currency: str, user_id: str) -> dict:
        intent = await self.stripe.create_intent(amount, currency, user_id)
        logger.info("Stripe intent %s created for user %s", intent["payment_intent_id"], user_id)
        return intent

    def verify(
        self,
        gateway: str,
        payment_id: str,
        order_id: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> bool:
        if gateway == "razorpay":
            if not order_id or not signature:
                return False
            return self.razorpay.verify_signature(order_id, payment_id, signature)
        if gateway == "stripe":
            # confirmed client-side with the intent's client secret
            return True
        return False


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_payments_service: Optional[PaymentsService] = None


def get_payments_service() -> PaymentsService:
    """Get or create the global payments service (FastAPI dependency)."""
    global _payments_service
    if _payments_service is None:
        _payments_service = PaymentsService(RazorpayGateway(), StripeGateway())
    return _payments_service
