from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import Cache, get_cache
from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from fintechs.stripe_client import StripeClient, get_payment_client
from models.models import User
from schemas.schema import PaymentIntentCreateSchema, PremiumVerifySchema
from services.premium_service import PremiumService

router = APIRouter(tags=["Premium Payments"])


@cbv(router=router)
class PaymentRoutes:
    @router.post("/create-payment-intent")
    @safe_handler
    async def create_payment_intent(
        self,
        request: Request,
        data: PaymentIntentCreateSchema,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
        payments: StripeClient = Depends(get_payment_client),
    ):
        return await PremiumService(db, payments).create_payment_intent(
            data=data, current_user=current_user
        )

    @router.post("/premium-listing/verify")
    @safe_handler
    async def verify(
        self,
        request: Request,
        data: PremiumVerifySchema,
        db: AsyncSession = Depends(get_db_async),
        cache: Cache = Depends(get_cache),
        current_user: User = Depends(get_current_user),
        payments: StripeClient = Depends(get_payment_client),
    ):
        return await PremiumService(db, payments, cache).verify_premium(
            data=data, current_user=current_user
        )
