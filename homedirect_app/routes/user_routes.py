from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import UserTypeUpdateSchema
from services.offer_service import OfferService
from services.property_service import PropertyService
from services.user_service import UserService

router = APIRouter(tags=["Users"])


@cbv(router=router)
class UserRoutes:
    @router.get("/auth/user")
    @safe_handler
    async def me(
        self,
        request: Request,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await UserService(db).get_me(current_user=current_user)

    @router.post("/users/type")
    @safe_handler
    async def set_user_type(
        self,
        request: Request,
        data: UserTypeUpdateSchema,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await UserService(db).update_user_type(data=data, current_user=current_user)

    @router.get("/users/{user_id}/properties")
    @safe_handler
    async def user_properties(
        self,
        request: Request,
        user_id: str,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await PropertyService(db).get_user_properties(
            user_id=user_id, current_user=current_user
        )

    @router.get("/users/{user_id}/offers")
    @safe_handler
    async def user_offers(
        self,
        request: Request,
        user_id: str,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await OfferService(db).get_user_offers(user_id=user_id, current_user=current_user)

    @router.get("/users/{user_id}/transactions")
    @safe_handler
    async def user_transactions(
        self,
        request: Request,
        user_id: str,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await UserService(db).get_user_transactions(
            user_id=user_id, current_user=current_user
        )
