import logging
from datetime import datetime, timezone

from fastapi import HTTPException

from core.cache import Cache, disabled_cache
from core.check_permission import CheckRolePermission
from core.mapper import ORMMapper
from core.settings import settings
from models.enums import PropertyStatus, UserType
from models.utils import calculate_premium_expiry
from repos.offer_repo import OfferRepo
from repos.premium_transaction_repo import PremiumTransactionRepo
from repos.user_repo import UserRepo
from schemas.schema import (
    AdminPremiumSchema,
    AdminPropertyStatusSchema,
    AdminStatsOut,
    AdminUserRoleSchema,
    PremiumTransactionOut,
    PropertyOut,
    UserOut,
)

from .property_service import PropertyService

logger = logging.getLogger(__name__)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class AdminService:
    def __init__(self, db, cache: Cache = disabled_cache):
        self.properties: PropertyService = PropertyService(db, cache)
        self.users: UserRepo = UserRepo(db)
        self.offers: OfferRepo = OfferRepo(db)
        self.transactions: PremiumTransactionRepo = PremiumTransactionRepo(db)
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    async def get_properties(self, current_user) -> list[PropertyOut]:
        await self.permission.check_admin(current_user=current_user)
        props = await self.properties.repo.get_all()
        return self.mapper.many(items=props, schema=PropertyOut)

    async def get_users(self, current_user) -> list[UserOut]:
        await self.permission.check_admin(current_user=current_user)
        users = await self.users.get_all()
        return self.mapper.many(items=users, schema=UserOut)

    async def get_transactions(self, current_user) -> list[PremiumTransactionOut]:
        await self.permission.check_admin(current_user=current_user)
        transactions = await self.transactions.get_all()
        return self.mapper.many(items=transactions, schema=PremiumTransactionOut)

    async def get_stats(self, current_user) -> AdminStatsOut:
        await self.permission.check_admin(current_user=current_user)
        repo = self.properties.repo

        total_properties = await repo.count_all()
        premium_properties = await repo.count_premium()
        user_counts = await self.users.count_by_type()
        premium_percentage = (
            round(premium_properties * 100 / total_properties) if total_properties else 0
        )

        return AdminStatsOut(
            total_properties=total_properties,
            active_properties=await repo.count_by_status(PropertyStatus.ACTIVE),
            premium_properties=premium_properties,
            premium_percentage=premium_percentage,
            total_users=sum(user_counts.values()),
            buyer_users=user_counts[UserType.BUYER],
            seller_users=user_counts[UserType.SELLER],
            admin_users=user_counts[UserType.ADMIN],
            total_offers=await self.offers.count_all(),
            total_revenue=await self.transactions.total_revenue(),
        )

    async def update_property_status(
        self, property_id: int, data: AdminPropertyStatusSchema, current_user
    ) -> PropertyOut:
        await self.permission.check_admin(current_user=current_user)
        prop = await self.properties.get_or_404(property_id)
        prop = await self.properties.repo.update(prop, status=data.status)
        logger.info(f"Admin {current_user.id} set property {property_id} to {data.status.value}")
        await self.properties.invalidate_listings()
        return self.mapper.one(prop, PropertyOut)

    async def update_property_premium(
        self, property_id: int, data: AdminPremiumSchema, current_user
    ) -> PropertyOut:
        await self.permission.check_admin(current_user=current_user)
        prop = await self.properties.get_or_404(property_id)

        premium_until = None
        if data.is_premium:
            premium_until = (
                _as_naive_utc(data.premium_until)
                if data.premium_until
                else calculate_premium_expiry(settings.PREMIUM_LISTING_DAYS)
            )

        prop = await self.properties.repo.set_premium(
            prop, is_premium=data.is_premium, premium_until=premium_until
        )
        logger.info(
            f"Admin {current_user.id} set premium={data.is_premium} on property {property_id}"
        )
        await self.properties.invalidate_listings()
        return self.mapper.one(prop, PropertyOut)

    async def update_user_role(
        self, user_id: str, data: AdminUserRoleSchema, current_user
    ) -> UserOut:
        await self.permission.check_admin(current_user=current_user)
        user = await self.users.get_by_id(user_id)
        if not user:
            raise HTTPException(404, "User not found")
        user = await self.users.update_user_type(user, data.user_type)
        logger.info(f"Admin {current_user.id} set role of {user_id} to {data.user_type.value}")
        return self.mapper.one(user, UserOut)
