from fastapi import HTTPException

from core.mapper import ORMMapper
from repos.property_feature_repo import PropertyFeatureRepo
from schemas.schema import PropertyFeatureCreateSchema, PropertyFeatureOut

from .property_service import PropertyService


class PropertyFeatureService:
    def __init__(self, db):
        self.repo: PropertyFeatureRepo = PropertyFeatureRepo(db)
        self.properties: PropertyService = PropertyService(db)
        self.mapper: ORMMapper = ORMMapper()

    async def list_features(self, property_id: int) -> list[PropertyFeatureOut]:
        await self.properties.get_or_404(property_id)
        features = await self.repo.get_for_property(property_id)
        return self.mapper.many(items=features, schema=PropertyFeatureOut)

    async def add_feature(
        self, property_id: int, data: PropertyFeatureCreateSchema, current_user
    ) -> PropertyFeatureOut:
        await self.properties.check_owner(property_id=property_id, current_user=current_user)
        feature = await self.repo.create(property_id=property_id, feature=data.feature)
        return self.mapper.one(feature, PropertyFeatureOut)

    async def delete_feature(self, property_id: int, feature_id: int, current_user):
        await self.properties.check_owner(property_id=property_id, current_user=current_user)
        feature = await self.repo.get_one(property_id=property_id, feature_id=feature_id)
        if not feature:
            raise HTTPException(404, "Feature not found")
        await self.repo.delete(feature)
        return {"success": True}
