from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.models import PropertyFeature


class PropertyFeatureRepo:
    def __init__(self, db):
        self.db = db

    async def get_for_property(self, property_id: int) -> list[PropertyFeature]:
        result = await self.db.execute(
            select(PropertyFeature)
            .where(PropertyFeature.property_id == property_id)
            .order_by(PropertyFeature.id.asc())
        )
        return result.scalars().all()

    async def get_one(self, property_id: int, feature_id: int) -> Optional[PropertyFeature]:
        result = await self.db.execute(
            select(PropertyFeature).where(
                PropertyFeature.id == feature_id,
                PropertyFeature.property_id == property_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, property_id: int, feature: str) -> PropertyFeature:
        new_feature = PropertyFeature(property_id=property_id, feature=feature)
        self.db.add(new_feature)
        try:
            await self.db.commit()
            await self.db.refresh(new_feature)
            return new_feature
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete(self, feature: PropertyFeature) -> None:
        try:
            await self.db.delete(feature)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
