from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi_utils.cbv import cbv
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import Cache, get_cache
from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from core.settings import settings
from models.models import User
from schemas.schema import PropertyCreateSchema, PropertySearchFilters, PropertyUpdateSchema
from services.property_service import PropertyService

router = APIRouter(tags=["Properties"])


def search_filters(request: Request) -> PropertySearchFilters:
    try:
        return PropertySearchFilters.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


@cbv(router=router)
class PropertyRoutes:
    @router.get("/properties")
    @safe_handler
    async def search(
        self,
        request: Request,
        filters: PropertySearchFilters = Depends(search_filters),
        db: AsyncSession = Depends(get_db_async),
        cache: Cache = Depends(get_cache),
    ):
        return await PropertyService(db, cache).search(filters)

    @router.get("/properties/featured")
    @safe_handler
    async def featured(
        self,
        request: Request,
        limit: int = Query(settings.FEATURED_DEFAULT_LIMIT, ge=1, le=settings.SEARCH_MAX_LIMIT),
        db: AsyncSession = Depends(get_db_async),
        cache: Cache = Depends(get_cache),
    ):
        return await PropertyService(db, cache).get_featured(limit=limit)

    @router.get("/properties/{property_id}")
    @safe_handler
    async def get_one(
        self,
        request: Request,
        property_id: int,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyService(db).get_property(property_id)

    @router.post("/properties", status_code=201)
    @safe_handler
    async def create(
        self,
        request: Request,
        data: PropertyCreateSchema,
        db: AsyncSession = Depends(get_db_async),
        cache: Cache = Depends(get_cache),
        current_user: User = Depends(get_current_user),
    ):
        return await PropertyService(db, cache).create_property(
            data=data, current_user=current_user
        )

    @router.put("/properties/{property_id}")
    @safe_handler
    async def update(
        self,
        request: Request,
        property_id: int,
        data: PropertyUpdateSchema,
        db: AsyncSession = Depends(get_db_async),
        cache: Cache = Depends(get_cache),
        current_user: User = Depends(get_current_user),
    ):
        return await PropertyService(db, cache).update_property(
            property_id=property_id, data=data, current_user=current_user
        )

    @router.delete("/properties/{property_id}")
    @safe_handler
    async def delete_property(
        self,
        request: Request,
        property_id: int,
        db: AsyncSession = Depends(get_db_async),
        cache: Cache = Depends(get_cache),
        current_user: User = Depends(get_current_user),
    ):
        return await PropertyService(db, cache).delete_property(
            property_id=property_id, current_user=current_user
        )
