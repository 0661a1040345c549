import logging

from fastapi import HTTPException

from core.cache import Cache, disabled_cache
from core.check_permission import CheckRolePermission
from core.mapper import ORMMapper
from core.settings import settings
from models.models import Property
from repos.property_repo import PropertyRepo
from schemas.schema import (
    PropertyCreateSchema,
    PropertyOut,
    PropertySearchFilters,
    PropertyUpdateSchema,
)

logger = logging.getLogger(__name__)

SEARCH_CACHE_ENDPOINT = "properties:search"
FEATURED_CACHE_ENDPOINT = "properties:featured"
LISTING_CACHE_ENDPOINTS = (SEARCH_CACHE_ENDPOINT, FEATURED_CACHE_ENDPOINT)


class PropertyService:
    def __init__(self, db, cache: Cache = disabled_cache):
        self.repo: PropertyRepo = PropertyRepo(db)
        self.cache: Cache = cache
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    async def get_or_404(self, property_id: int) -> Property:
        prop = await self.repo.get_by_id(property_id)
        if not prop:
            raise HTTPException(404, "Property not found")
        return prop

    async def check_owner(self, property_id: int, current_user) -> Property:
        prop = await self.get_or_404(property_id)
        await self.permission.check_owner_or_admin(
            current_user=current_user, owner_id=prop.user_id
        )
        return prop

    async def invalidate_listings(self):
        removed = await self.cache.invalidate(LISTING_CACHE_ENDPOINTS)
        if removed:
            logger.debug(f"Invalidated {removed} cached listing responses")

    async def search(self, filters: PropertySearchFilters) -> list[PropertyOut]:
        params = filters.cache_params()
        cached = await self.cache.get_json(SEARCH_CACHE_ENDPOINT, params)
        if cached is not None:
            return self.mapper.many(items=cached, schema=PropertyOut)

        props = self.mapper.many(items=await self.repo.search(filters), schema=PropertyOut)
        await self.cache.set_json(SEARCH_CACHE_ENDPOINT, params, self.mapper.dump_many(props))
        return props

    async def get_featured(self, limit: int = settings.FEATURED_DEFAULT_LIMIT) -> list[PropertyOut]:
        params = {"limit": limit}
        cached = await self.cache.get_json(FEATURED_CACHE_ENDPOINT, params)
        if cached is not None:
            return self.mapper.many(items=cached, schema=PropertyOut)

        props = self.mapper.many(items=await self.repo.get_featured(limit), schema=PropertyOut)
        await self.cache.set_json(FEATURED_CACHE_ENDPOINT, params, self.mapper.dump_many(props))
        return props

    async def get_property(self, property_id: int) -> PropertyOut:
        prop = await self.get_or_404(property_id)
        result = self.mapper.one(prop, PropertyOut)
        await self.repo.increment_views(property_id)
        return result

    async def create_property(self, data: PropertyCreateSchema, current_user) -> PropertyOut:
        prop = await self.repo.create(user_id=current_user.id, **data.model_dump())
        logger.info(f"User {current_user.id} listed property {prop.id}")
        await self.invalidate_listings()
        return self.mapper.one(prop, PropertyOut)

    async def update_property(
        self, property_id: int, data: PropertyUpdateSchema, current_user
    ) -> PropertyOut:
        prop = await self.check_owner(property_id=property_id, current_user=current_user)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(
                status_code=400,
                detail="No fields provided for update.",
            )

        prop = await self.repo.update(prop, **update_data)
        await self.invalidate_listings()
        return self.mapper.one(prop, PropertyOut)

    async def delete_property(self, property_id: int, current_user):
        await self.check_owner(property_id=property_id, current_user=current_user)
        await self.repo.delete(property_id)
        logger.info(f"Property {property_id} deleted by {current_user.id}")
        await self.invalidate_listings()
        return {"success": True, "message": "Delete successful"}

    async def get_user_properties(self, user_id: str, current_user) -> list[PropertyOut]:
        await self.permission.check_self_or_admin(current_user=current_user, user_id=user_id)
        props = await self.repo.get_all_by_user(user_id)
        return self.mapper.many(items=props, schema=PropertyOut)
