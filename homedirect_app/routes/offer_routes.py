from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import OfferCreateSchema, OfferStatusUpdateSchema
from services.offer_service import OfferService

router = APIRouter(tags=["Offers"])


@cbv(router=router)
class OfferRoutes:
    @router.post("/offers", status_code=201)
    @safe_handler
    async def submit(
        self,
        request: Request,
        data: OfferCreateSchema,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await OfferService(db).submit_offer(data=data, current_user=current_user)

    @router.get("/properties/{property_id}/offers")
    @safe_handler
    async def property_offers(
        self,
        request: Request,
        property_id: int,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await OfferService(db).get_property_offers(
            property_id=property_id, current_user=current_user
        )

    @router.put("/offers/{offer_id}/status")
    @safe_handler
    async def update_status(
        self,
        request: Request,
        offer_id: int,
        data: OfferStatusUpdateSchema,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await OfferService(db).update_status(
            offer_id=offer_id, data=data, current_user=current_user
        )
