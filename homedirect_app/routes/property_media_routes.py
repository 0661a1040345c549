from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import PropertyFeatureCreateSchema, PropertyImageCreateSchema
from services.property_feature_service import PropertyFeatureService
from services.property_image_service import PropertyImageService

router = APIRouter(tags=["Property Media"])


@cbv(router=router)
class PropertyMediaRoutes:
    @router.get("/properties/{property_id}/images")
    @safe_handler
    async def list_images(
        self,
        request: Request,
        property_id: int,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyImageService(db).list_images(property_id)

    @router.post("/properties/{property_id}/images", status_code=201)
    @safe_handler
    async def add_image(
        self,
        request: Request,
        property_id: int,
        data: PropertyImageCreateSchema,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await PropertyImageService(db).add_image(
            property_id=property_id, data=data, current_user=current_user
        )

    @router.delete("/properties/{property_id}/images/{image_id}")
    @safe_handler
    async def delete_image(
        self,
        request: Request,
        property_id: int,
        image_id: int,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await PropertyImageService(db).delete_image(
            property_id=property_id, image_id=image_id, current_user=current_user
        )

    @router.get("/properties/{property_id}/features")
    @safe_handler
    async def list_features(
        self,
        request: Request,
        property_id: int,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PropertyFeatureService(db).list_features(property_id)

    @router.post("/properties/{property_id}/features", status_code=201)
    @safe_handler
    async def add_feature(
        self,
        request: Request,
        property_id: int,
        data: PropertyFeatureCreateSchema,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await PropertyFeatureService(db).add_feature(
            property_id=property_id, data=data, current_user=current_user
        )

    @router.delete("/properties/{property_id}/features/{feature_id}")
    @safe_handler
    async def delete_feature(
        self,
        request: Request,
        property_id: int,
        feature_id: int,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await PropertyFeatureService(db).delete_feature(
            property_id=property_id, feature_id=feature_id, current_user=current_user
        )
