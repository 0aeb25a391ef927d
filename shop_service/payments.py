# shop_service/payments.py
import logging

import httpx

from shop_service.config import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The card gateway could not create the payment intent."""


class StripeGateway:
    """
    Thin client for the Stripe payment intents endpoint.

    Amounts are taken in major currency units and sent to Stripe in minor
    units (cents).
    """

    def __init__(self, secret_key: str, currency: str = "mad",
                 api_base: str = "https://api.stripe.com", transport: httpx.AsyncBaseTransport = None):
        self.secret_key = secret_key
        self.currency = currency
        self.api_base = api_base.rstrip("/")
        self.transport = transport

    async def create_payment_intent(self, amount: int) -> dict:
        data = {"amount": amount * 100, "currency": self.currency}
        try:
            async with httpx.AsyncClient(
                base_url=self.api_base,
                auth=(self.secret_key, ""),
                transport=self.transport,
                timeout=10.0,
            ) as client:
                response = await client.post("/v1/payment_intents", data=data)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise PaymentGatewayError(f"Stripe request failed: {e}") from e

        intent = response.json()
        logger.info("Created payment intent %s for %s %s", intent.get("id"), data["amount"], self.currency)
        return intent


def get_payment_gateway() -> StripeGateway:
    return StripeGateway(
        secret_key=settings.STRIPE_SECRET_KEY,
        currency=settings.STRIPE_CURRENCY,
        api_base=settings.STRIPE_API_BASE,
    )
