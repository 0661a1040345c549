from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from models.enums import OfferStatus
from models.models import Offer


class OfferRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, offer_id: int) -> Optional[Offer]:
        result = await self.db.execute(select(Offer).where(Offer.id == offer_id))
        return result.scalar_one_or_none()

    async def create(
        self, property_id: int, buyer_id: str, amount: int, message: Optional[str]
    ) -> Offer:
        offer = Offer(
            property_id=property_id,
            buyer_id=buyer_id,
            amount=amount,
            message=message,
        )
        self.db.add(offer)
        try:
            await self.db.commit()
            await self.db.refresh(offer)
            return offer
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_for_property(self, property_id: int) -> list[Offer]:
        result = await self.db.execute(
            select(Offer)
            .where(Offer.property_id == property_id)
            .order_by(Offer.created_at.desc(), Offer.id.desc())
        )
        return result.scalars().all()

    async def get_for_buyer(self, buyer_id: str) -> list[Offer]:
        result = await self.db.execute(
            select(Offer)
            .where(Offer.buyer_id == buyer_id)
            .order_by(Offer.created_at.desc(), Offer.id.desc())
        )
        return result.scalars().all()

    async def update_status(self, offer: Offer, status: OfferStatus) -> Offer:
        offer.status = status
        try:
            await self.db.commit()
            await self.db.refresh(offer)
            return offer
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def count_all(self) -> int:
        result = await self.db.execute(select(func.count(Offer.id)))
        return result.scalar_one()
