import logging
from typing import Any, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.enums import SELF_ASSIGNABLE_USER_TYPES, UserType
from models.models import User

logger = logging.getLogger(__name__)


def _role_from_metadata(user_metadata: Mapping[str, Any]) -> UserType:
    raw = str(user_metadata.get("userType") or user_metadata.get("user_type") or "")
    try:
        requested = UserType(raw.strip().lower())
    except ValueError:
        return UserType.BUYER
    # Admin is only ever granted by another admin.
    return requested if requested in SELF_ASSIGNABLE_USER_TYPES else UserType.BUYER


class UserRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def _release_email(self, email: str, keep_user_id: str) -> None:
        # The identity provider owns emails; a stale local row gives its copy up.
        holder = await self.get_by_email(email)
        if holder is None or holder.id == keep_user_id:
            return
        logger.warning(f"Email {email} moved from stale user {holder.id} to {keep_user_id}")
        holder.email = None
        await self.db.flush()

    async def upsert_from_identity(
        self,
        user_id: str,
        email: Optional[str],
        user_metadata: Mapping[str, Any],
    ) -> User:
        """Mirrors a verified identity into the local users table.

        Profile fields follow the identity provider on every call; the role is
        only read from metadata when the row is first created.
        """
        email = email.strip().lower() if email else None
        first_name = user_metadata.get("firstName") or user_metadata.get("first_name")
        last_name = user_metadata.get("lastName") or user_metadata.get("last_name")
        avatar = user_metadata.get("profileImageUrl") or user_metadata.get("avatar_url")

        if email:
            await self._release_email(email, keep_user_id=user_id)

        user = await self.get_by_id(user_id)
        if user is None:
            user = User(
                id=user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                profile_image_url=avatar,
                user_type=_role_from_metadata(user_metadata),
            )
            self.db.add(user)
        else:
            changes = {
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
                "profile_image_url": avatar,
            }
            changes = {k: v for k, v in changes.items() if v and getattr(user, k) != v}
            if not changes:
                return user
            for key, value in changes.items():
                setattr(user, key, value)

        try:
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except IntegrityError:
            # A concurrent request created the row first.
            await self.db.rollback()
            existing = await self.get_by_id(user_id)
            if existing is None:
                raise
            logger.info(f"User {user_id} was created concurrently; using stored row")
            return existing
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def update_user_type(self, user: User, user_type: UserType) -> User:
        user.user_type = user_type
        try:
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_all(self) -> list[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc())
        )
        return result.scalars().all()

    async def count_by_type(self) -> dict[UserType, int]:
        result = await self.db.execute(
            select(User.user_type, func.count(User.id)).group_by(User.user_type)
        )
        counts = {user_type: 0 for user_type in UserType}
        for user_type, count in result.all():
            counts[UserType(user_type)] = count
        return counts
