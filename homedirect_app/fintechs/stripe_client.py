import logging
from typing import Any, Dict, Optional

import stripe
from fastapi import HTTPException

from core.breaker import stripe_breaker
from core.settings import settings
from core.threads import run_in_thread

logger = logging.getLogger(__name__)


class StripeClient:
    """PaymentIntent calls for the premium listing upgrade.

    The stripe SDK is blocking, so every call runs on the delegate thread pool
    and goes through the stripe circuit breaker.
    """

    def __init__(
        self,
        secret_key: str,
        api_version: Optional[str] = None,
        max_retries: int = 0,
    ):
        self.secret_key = secret_key
        self.api_version = api_version
        stripe.max_network_retries = max_retries

    def _request_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"api_key": self.secret_key}
        if self.api_version:
            options["stripe_version"] = self.api_version
        return options

    @staticmethod
    def _to_result(intent) -> Dict[str, Any]:
        return {
            "id": intent.id,
            "client_secret": intent.client_secret,
            "status": intent.status,
            "amount": intent.amount,
            "currency": intent.currency,
            "metadata": dict(intent.metadata or {}),
        }

    async def create_payment_intent(
        self,
        *,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        async def handler():
            try:
                intent = await run_in_thread(
                    stripe.PaymentIntent.create,
                    amount=amount,
                    currency=currency.lower(),
                    description=description,
                    metadata=metadata,
                    automatic_payment_methods={"enabled": True},
                    **self._request_options(),
                )
            except stripe.StripeError as e:
                logger.error(f"Stripe error creating payment intent: {e}")
                raise
            logger.info(f"Created payment intent {intent.id} for {metadata}")
            return self._to_result(intent)

        return await stripe_breaker.call(handler)

    async def retrieve_payment_intent(self, payment_intent_id: str) -> Dict[str, Any]:
        async def handler():
            try:
                intent = await run_in_thread(
                    stripe.PaymentIntent.retrieve,
                    payment_intent_id,
                    **self._request_options(),
                )
            except stripe.InvalidRequestError as e:
                logger.warning(f"Unknown payment intent {payment_intent_id}: {e}")
                return None
            except stripe.StripeError as e:
                logger.error(f"Stripe error retrieving payment intent: {e}")
                raise
            return self._to_result(intent)

        result = await stripe_breaker.call(handler)
        if result is None:
            raise HTTPException(400, "Unknown payment intent")
        return result


_payment_client: Optional[StripeClient] = None


def init_payment_client() -> Optional[StripeClient]:
    global _payment_client
    if not settings.payments_enabled:
        logger.warning("STRIPE_SECRET_KEY is not configured; premium payments are disabled.")
        _payment_client = None
        return None
    _payment_client = StripeClient(
        secret_key=settings.STRIPE_SECRET_KEY,
        api_version=settings.STRIPE_API_VERSION,
        max_retries=settings.STRIPE_MAX_RETRIES,
    )
    logger.info("Stripe payment client initialized.")
    return _payment_client


def get_payment_client() -> StripeClient:
    if _payment_client is None:
        raise HTTPException(
            status_code=503,
            detail="Payments are not configured on this server",
        )
    return _payment_client
