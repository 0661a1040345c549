import pytest

from models.enums import UserType
from repos.user_repo import UserRepo, _role_from_metadata


@pytest.mark.parametrize(
    "metadata, expected",
    [
        ({}, UserType.BUYER),
        ({"userType": "seller"}, UserType.SELLER),
        ({"user_type": "Buyer"}, UserType.BUYER),
        ({"userType": "admin"}, UserType.BUYER),
        ({"userType": "landlord"}, UserType.BUYER),
    ],
)
def test_role_from_signup_metadata(metadata, expected):
    assert _role_from_metadata(metadata) == expected


async def test_upsert_creates_then_refreshes_profile(db_session):
    repo = UserRepo(db_session)

    created = await repo.upsert_from_identity(
        user_id="u-1",
        email="New@Example.com",
        user_metadata={"firstName": "Ada", "userType": "seller"},
    )
    assert created.email == "new@example.com"
    assert created.user_type == UserType.SELLER

    updated = await repo.upsert_from_identity(
        user_id="u-1",
        email="new@example.com",
        user_metadata={"firstName": "Ada", "lastName": "Lovelace", "userType": "buyer"},
    )
    assert updated.last_name == "Lovelace"
    # role is only taken from metadata on first sight
    assert updated.user_type == UserType.SELLER
