from datetime import datetime
from typing import Any, Optional

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from models.enums import PropertyStatus
from models.models import Property
from schemas.schema import PropertySearchFilters

SEARCH_ORDERING = (
    Property.is_premium.desc(),
    Property.created_at.desc(),
    Property.id.desc(),
)


def build_search_conditions(filters: PropertySearchFilters) -> list:
    """Turns parsed search filters into ANDed SQL predicates.

    Status falls back to active listings when the caller does not name one.
    """
    conditions = []

    if filters.location:
        term = filters.location
        conditions.append(
            or_(
                Property.address.contains(term, autoescape=True),
                Property.city.contains(term, autoescape=True),
                Property.state.contains(term, autoescape=True),
                Property.zip_code.contains(term, autoescape=True),
            )
        )
    if filters.min_price is not None:
        conditions.append(Property.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Property.price <= filters.max_price)
    if filters.property_type:
        conditions.append(Property.property_type == filters.property_type)
    if filters.min_beds is not None:
        conditions.append(Property.bedrooms >= filters.min_beds)
    if filters.min_baths is not None:
        conditions.append(Property.bathrooms >= filters.min_baths)

    conditions.append(Property.status == (filters.status or PropertyStatus.ACTIVE))

    if filters.premium_only:
        conditions.append(Property.is_premium.is_(True))

    return conditions


def build_search_statement(filters: PropertySearchFilters):
    return (
        select(Property)
        .where(and_(*build_search_conditions(filters)))
        .order_by(*SEARCH_ORDERING)
        .limit(filters.limit)
    )


def build_view_increment(property_id: int):
    return (
        update(Property)
        .where(Property.id == property_id)
        .values(view_count=Property.view_count + 1)
        .execution_options(synchronize_session=False)
    )


class PropertyRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, property_id: int) -> Optional[Property]:
        result = await self.db.execute(
            select(Property)
            .where(Property.id == property_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def search(self, filters: PropertySearchFilters) -> list[Property]:
        result = await self.db.execute(build_search_statement(filters))
        return result.scalars().all()

    async def get_featured(self, limit: int) -> list[Property]:
        result = await self.db.execute(
            select(Property)
            .where(Property.is_premium.is_(True))
            .order_by(Property.created_at.desc(), Property.id.desc())
            .limit(limit)
        )
        return result.scalars().all()

    async def get_all_by_user(self, user_id: str) -> list[Property]:
        result = await self.db.execute(
            select(Property)
            .where(Property.user_id == user_id)
            .order_by(Property.created_at.desc(), Property.id.desc())
        )
        return result.scalars().all()

    async def get_all(self) -> list[Property]:
        result = await self.db.execute(
            select(Property).order_by(Property.created_at.desc(), Property.id.desc())
        )
        return result.scalars().all()

    async def create(self, user_id: str, **data: Any) -> Property:
        new_property = Property(user_id=user_id, **data)
        self.db.add(new_property)
        try:
            await self.db.commit()
            await self.db.refresh(new_property)
            return new_property
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def update(self, prop: Property, **changes: Any) -> Property:
        for key, value in changes.items():
            setattr(prop, key, value)
        try:
            await self.db.commit()
            await self.db.refresh(prop)
            return prop
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete(self, property_id: int) -> None:
        try:
            await self.db.execute(delete(Property).where(Property.id == property_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def increment_views(self, property_id: int) -> None:
        try:
            await self.db.execute(build_view_increment(property_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def set_premium(
        self, prop: Property, is_premium: bool, premium_until: Optional[datetime]
    ) -> Property:
        prop.is_premium = is_premium
        prop.premium_until = premium_until if is_premium else None
        try:
            await self.db.commit()
            await self.db.refresh(prop)
            return prop
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def count_all(self) -> int:
        result = await self.db.execute(select(func.count(Property.id)))
        return result.scalar_one()

    async def count_by_status(self, status: PropertyStatus) -> int:
        result = await self.db.execute(
            select(func.count(Property.id)).where(Property.status == status)
        )
        return result.scalar_one()

    async def count_premium(self) -> int:
        result = await self.db.execute(
            select(func.count(Property.id)).where(Property.is_premium.is_(True))
        )
        return result.scalar_one()
