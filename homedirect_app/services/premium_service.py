import logging

from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from core.cache import Cache, disabled_cache
from core.mapper import ORMMapper
from core.settings import settings
from fintechs.stripe_client import StripeClient
from models.utils import calculate_premium_expiry
from repos.premium_transaction_repo import PremiumTransactionRepo
from schemas.schema import (
    PaymentIntentCreateSchema,
    PaymentIntentOut,
    PremiumVerifyOut,
    PremiumVerifySchema,
    PropertyOut,
)

from .property_service import PropertyService

logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"


def _failure(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "message": message})


class PremiumService:
    """Premium listing upgrade: intent creation and server-side verification."""

    def __init__(self, db, payments: StripeClient, cache: Cache = disabled_cache):
        self.repo: PremiumTransactionRepo = PremiumTransactionRepo(db)
        self.properties: PropertyService = PropertyService(db, cache)
        self.payments: StripeClient = payments
        self.mapper: ORMMapper = ORMMapper()

    def _success(self, prop, message: str) -> PremiumVerifyOut:
        return PremiumVerifyOut(
            success=True,
            message=message,
            property=self.mapper.one(prop, PropertyOut),
        )

    async def create_payment_intent(
        self, data: PaymentIntentCreateSchema, current_user
    ) -> PaymentIntentOut:
        prop = await self.properties.check_owner(
            property_id=data.property_id, current_user=current_user
        )
        intent = await self.payments.create_payment_intent(
            amount=settings.PREMIUM_LISTING_PRICE,
            currency=settings.PREMIUM_LISTING_CURRENCY,
            metadata={"propertyId": str(prop.id), "userId": current_user.id},
            description=f"Premium listing for property {prop.id}",
        )
        return PaymentIntentOut(
            client_secret=intent["client_secret"],
            payment_intent_id=intent["id"],
            amount=intent["amount"],
            currency=intent["currency"],
        )

    async def verify_premium(self, data: PremiumVerifySchema, current_user):
        prop = await self.properties.check_owner(
            property_id=data.property_id, current_user=current_user
        )

        existing = await self.repo.get_by_payment_id(data.payment_intent_id)
        if existing:
            if existing.property_id != prop.id:
                return _failure("This payment was made for a different property")
            logger.info(f"Payment intent {data.payment_intent_id} already processed")
            return self._success(prop, "Payment already processed")

        intent = await self.payments.retrieve_payment_intent(data.payment_intent_id)
        if intent["status"] != SUCCEEDED:
            logger.info(
                f"Payment intent {intent['id']} not complete (status={intent['status']})"
            )
            return _failure(f"Payment not completed (status: {intent['status']})")

        paid_for = intent["metadata"].get("propertyId")
        if paid_for != str(prop.id):
            logger.warning(
                f"Payment intent {intent['id']} names property {paid_for}, not {prop.id}"
            )
            return _failure("This payment was made for a different property")

        if (
            intent["amount"] != settings.PREMIUM_LISTING_PRICE
            or str(intent["currency"]).lower() != settings.PREMIUM_LISTING_CURRENCY.lower()
        ):
            logger.warning(
                f"Payment intent {intent['id']} charged {intent['amount']} {intent['currency']}, "
                f"expected {settings.PREMIUM_LISTING_PRICE} {settings.PREMIUM_LISTING_CURRENCY}"
            )
            return _failure("Payment does not match the premium listing price")

        try:
            await self.repo.record_premium_upgrade(
                prop=prop,
                user_id=current_user.id,
                amount=intent["amount"],
                stripe_payment_id=intent["id"],
                premium_until=calculate_premium_expiry(settings.PREMIUM_LISTING_DAYS),
            )
        except IntegrityError:
            # Another request recorded the same intent first.
            logger.info(f"Payment intent {intent['id']} recorded concurrently")
            prop = await self.properties.get_or_404(prop.id)
            return self._success(prop, "Payment already processed")

        await self.properties.invalidate_listings()
        logger.info(f"Property {prop.id} upgraded to premium via {intent['id']}")
        return self._success(prop, "Property upgraded to premium")
