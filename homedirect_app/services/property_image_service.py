from fastapi import HTTPException

from core.mapper import ORMMapper
from repos.property_image_repo import PropertyImageRepo
from schemas.schema import PropertyImageCreateSchema, PropertyImageOut

from .property_service import PropertyService


class PropertyImageService:
    def __init__(self, db):
        self.repo: PropertyImageRepo = PropertyImageRepo(db)
        self.properties: PropertyService = PropertyService(db)
        self.mapper: ORMMapper = ORMMapper()

    async def list_images(self, property_id: int) -> list[PropertyImageOut]:
        await self.properties.get_or_404(property_id)
        images = await self.repo.get_for_property(property_id)
        return self.mapper.many(items=images, schema=PropertyImageOut)

    async def add_image(
        self, property_id: int, data: PropertyImageCreateSchema, current_user
    ) -> PropertyImageOut:
        await self.properties.check_owner(property_id=property_id, current_user=current_user)
        image = await self.repo.create(
            property_id=property_id,
            image_url=data.image_url,
            caption=data.caption,
            sort_order=data.sort_order,
        )
        return self.mapper.one(image, PropertyImageOut)

    async def delete_image(self, property_id: int, image_id: int, current_user):
        await self.properties.check_owner(property_id=property_id, current_user=current_user)
        image = await self.repo.get_one(property_id=property_id, image_id=image_id)
        if not image:
            raise HTTPException(404, "Image not found")
        await self.repo.delete(image)
        return {"success": True}
