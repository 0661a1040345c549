import logging

from fastapi import HTTPException

from core.check_permission import CheckRolePermission
from core.mapper import ORMMapper
from models.enums import RESOLVED_OFFER_STATUSES, OfferStatus
from repos.offer_repo import OfferRepo
from schemas.schema import OfferCreateSchema, OfferOut, OfferStatusUpdateSchema

from .property_service import PropertyService

logger = logging.getLogger(__name__)


class OfferService:
    def __init__(self, db):
        self.repo: OfferRepo = OfferRepo(db)
        self.properties: PropertyService = PropertyService(db)
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    async def submit_offer(self, data: OfferCreateSchema, current_user) -> OfferOut:
        prop = await self.properties.get_or_404(data.property_id)
        if prop.user_id == current_user.id:
            raise HTTPException(400, "You cannot make an offer on your own listing")

        offer = await self.repo.create(
            property_id=prop.id,
            buyer_id=current_user.id,
            amount=data.amount,
            message=data.message,
        )
        logger.info(f"Offer {offer.id} of {offer.amount} submitted on property {prop.id}")
        return self.mapper.one(offer, OfferOut)

    async def get_property_offers(self, property_id: int, current_user) -> list[OfferOut]:
        await self.properties.check_owner(property_id=property_id, current_user=current_user)
        offers = await self.repo.get_for_property(property_id)
        return self.mapper.many(items=offers, schema=OfferOut)

    async def get_user_offers(self, user_id: str, current_user) -> list[OfferOut]:
        await self.permission.check_self_or_admin(current_user=current_user, user_id=user_id)
        offers = await self.repo.get_for_buyer(user_id)
        return self.mapper.many(items=offers, schema=OfferOut)

    async def update_status(
        self, offer_id: int, data: OfferStatusUpdateSchema, current_user
    ) -> OfferOut:
        offer = await self.repo.get_by_id(offer_id)
        if not offer:
            raise HTTPException(404, "Offer not found")
        await self.properties.check_owner(
            property_id=offer.property_id, current_user=current_user
        )

        if data.status not in RESOLVED_OFFER_STATUSES:
            raise HTTPException(400, "Offers can only be accepted or rejected")
        if offer.status != OfferStatus.PENDING:
            raise HTTPException(400, f"Offer has already been {offer.status.value}")

        offer = await self.repo.update_status(offer, data.status)
        logger.info(f"Offer {offer.id} marked {offer.status.value} by {current_user.id}")
        return self.mapper.one(offer, OfferOut)
