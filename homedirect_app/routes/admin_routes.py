from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.cache import Cache, get_cache
from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import AdminPremiumSchema, AdminPropertyStatusSchema, AdminUserRoleSchema
from services.admin_service import AdminService

router = APIRouter(tags=["Admin"])


@cbv(router=router)
class AdminRoutes:
    db: AsyncSession = Depends(get_db_async)
    current_user: User = Depends(get_current_user)

    @router.get("/properties")
    @safe_handler
    async def properties(self, request: Request):
        return await AdminService(self.db).get_properties(current_user=self.current_user)

    @router.get("/users")
    @safe_handler
    async def users(self, request: Request):
        return await AdminService(self.db).get_users(current_user=self.current_user)

    @router.get("/transactions")
    @safe_handler
    async def transactions(self, request: Request):
        return await AdminService(self.db).get_transactions(current_user=self.current_user)

    @router.get("/stats")
    @safe_handler
    async def stats(self, request: Request):
        return await AdminService(self.db).get_stats(current_user=self.current_user)

    @router.put("/properties/{property_id}/status")
    @safe_handler
    async def property_status(
        self,
        request: Request,
        property_id: int,
        data: AdminPropertyStatusSchema,
        cache: Cache = Depends(get_cache),
    ):
        return await AdminService(self.db, cache).update_property_status(
            property_id=property_id, data=data, current_user=self.current_user
        )

    @router.put("/properties/{property_id}/premium")
    @safe_handler
    async def property_premium(
        self,
        request: Request,
        property_id: int,
        data: AdminPremiumSchema,
        cache: Cache = Depends(get_cache),
    ):
        return await AdminService(self.db, cache).update_property_premium(
            property_id=property_id, data=data, current_user=self.current_user
        )

    @router.put("/users/{user_id}/role")
    @safe_handler
    async def user_role(self, request: Request, user_id: str, data: AdminUserRoleSchema):
        return await AdminService(self.db).update_user_role(
            user_id=user_id, data=data, current_user=self.current_user
        )
