"""
Seeding helpers. Properties get explicit creation times so ordering
assertions do not depend on clock resolution.
"""
from datetime import datetime, timedelta
from itertools import count

import pytest_asyncio

from models.enums import PropertyStatus, UserType
from models.models import Property, User

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0)
_minutes = count(1)


async def seed_user(db, user_id: str, user_type: UserType = UserType.BUYER) -> User:
    user = User(id=user_id, email=f"{user_id}@example.com", user_type=user_type)
    db.add(user)
    await db.commit()
    return user


async def seed_property(db, owner: User, **overrides) -> Property:
    data = {
        "title": "Sunny family home",
        "description": "Three bedrooms close to the park.",
        "price": 350000,
        "address": "12 Oak Street",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62704",
        "bedrooms": 3,
        "bathrooms": 2.0,
        "square_feet": 1800,
        "property_type": "House",
        "status": PropertyStatus.ACTIVE,
        "is_premium": False,
        "created_at": BASE_TIME + timedelta(minutes=next(_minutes)),
    }
    data.update(overrides)
    prop = Property(user_id=owner.id, **data)
    db.add(prop)
    await db.commit()
    await db.refresh(prop)
    return prop


@pytest_asyncio.fixture
async def seller(db_session) -> User:
    return await seed_user(db_session, "seller-1", UserType.SELLER)


@pytest_asyncio.fixture
async def buyer(db_session) -> User:
    return await seed_user(db_session, "buyer-1", UserType.BUYER)


@pytest_asyncio.fixture
async def other_buyer(db_session) -> User:
    return await seed_user(db_session, "buyer-2", UserType.BUYER)


@pytest_asyncio.fixture
async def admin(db_session) -> User:
    return await seed_user(db_session, "admin-1", UserType.ADMIN)
