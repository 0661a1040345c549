from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError

from models.models import Message


class MessageRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_id(self, message_id: int) -> Optional[Message]:
        result = await self.db.execute(select(Message).where(Message.id == message_id))
        return result.scalar_one_or_none()

    async def create(
        self, from_user_id: str, to_user_id: str, property_id: int, message: str
    ) -> Message:
        new_message = Message(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            property_id=property_id,
            message=message,
        )
        self.db.add(new_message)
        try:
            await self.db.commit()
            await self.db.refresh(new_message)
            return new_message
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_for_user(self, user_id: str) -> list[Message]:
        result = await self.db.execute(
            select(Message)
            .where(or_(Message.from_user_id == user_id, Message.to_user_id == user_id))
            .order_by(Message.created_at.desc(), Message.id.desc())
        )
        return result.scalars().all()

    async def get_for_property(self, property_id: int) -> list[Message]:
        result = await self.db.execute(
            select(Message)
            .where(Message.property_id == property_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
        )
        return result.scalars().all()

    async def get_conversation(
        self, user_id: str, other_user_id: str, property_id: int
    ) -> list[Message]:
        result = await self.db.execute(
            select(Message)
            .where(
                Message.property_id == property_id,
                or_(
                    and_(
                        Message.from_user_id == user_id,
                        Message.to_user_id == other_user_id,
                    ),
                    and_(
                        Message.from_user_id == other_user_id,
                        Message.to_user_id == user_id,
                    ),
                ),
            )
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        return result.scalars().all()

    async def mark_read(self, message: Message) -> Message:
        if message.is_read:
            return message
        message.is_read = True
        try:
            await self.db.commit()
            await self.db.refresh(message)
            return message
        except SQLAlchemyError:
            await self.db.rollback()
            raise
