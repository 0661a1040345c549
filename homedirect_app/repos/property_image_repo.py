from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.models import PropertyImage


class PropertyImageRepo:
    def __init__(self, db):
        self.db = db

    async def get_for_property(self, property_id: int) -> list[PropertyImage]:
        result = await self.db.execute(
            select(PropertyImage)
            .where(PropertyImage.property_id == property_id)
            .order_by(PropertyImage.sort_order.asc(), PropertyImage.id.asc())
        )
        return result.scalars().all()

    async def get_one(self, property_id: int, image_id: int) -> Optional[PropertyImage]:
        result = await self.db.execute(
            select(PropertyImage).where(
                PropertyImage.id == image_id,
                PropertyImage.property_id == property_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        property_id: int,
        image_url: str,
        caption: Optional[str] = None,
        sort_order: int = 0,
    ) -> PropertyImage:
        image = PropertyImage(
            property_id=property_id,
            image_url=image_url,
            caption=caption,
            sort_order=sort_order,
        )
        self.db.add(image)
        try:
            await self.db.commit()
            await self.db.refresh(image)
            return image
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete(self, image: PropertyImage) -> None:
        try:
            await self.db.delete(image)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
