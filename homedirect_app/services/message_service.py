import logging

from fastapi import HTTPException

from core.check_permission import CheckRolePermission
from core.mapper import ORMMapper
from repos.message_repo import MessageRepo
from repos.user_repo import UserRepo
from schemas.schema import MessageCreateSchema, MessageOut, ReadReceiptOut

from .property_service import PropertyService

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, db):
        self.repo: MessageRepo = MessageRepo(db)
        self.users: UserRepo = UserRepo(db)
        self.properties: PropertyService = PropertyService(db)
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    async def send_message(self, data: MessageCreateSchema, current_user) -> MessageOut:
        await self.properties.get_or_404(data.property_id)
        if data.to_user_id == current_user.id:
            raise HTTPException(400, "You cannot send a message to yourself")
        if not await self.users.get_by_id(data.to_user_id):
            raise HTTPException(404, "Recipient not found")

        message = await self.repo.create(
            from_user_id=current_user.id,
            to_user_id=data.to_user_id,
            property_id=data.property_id,
            message=data.message,
        )
        logger.info(
            f"Message {message.id} sent from {current_user.id} to {data.to_user_id} "
            f"about property {data.property_id}"
        )
        return self.mapper.one(message, MessageOut)

    async def get_user_messages(self, current_user) -> list[MessageOut]:
        messages = await self.repo.get_for_user(current_user.id)
        return self.mapper.many(items=messages, schema=MessageOut)

    async def get_property_messages(self, property_id: int, current_user) -> list[MessageOut]:
        await self.properties.check_owner(property_id=property_id, current_user=current_user)
        messages = await self.repo.get_for_property(property_id)
        return self.mapper.many(items=messages, schema=MessageOut)

    async def get_conversation(
        self, other_user_id: str, property_id: int, current_user
    ) -> list[MessageOut]:
        await self.properties.get_or_404(property_id)
        messages = await self.repo.get_conversation(
            user_id=current_user.id,
            other_user_id=other_user_id,
            property_id=property_id,
        )
        return self.mapper.many(items=messages, schema=MessageOut)

    async def mark_as_read(self, message_id: int, current_user) -> ReadReceiptOut:
        message = await self.repo.get_by_id(message_id)
        if not message:
            raise HTTPException(404, "Message not found")
        if message.to_user_id != current_user.id and not current_user.is_admin:
            raise HTTPException(403, "Only the recipient can mark this message as read")

        message = await self.repo.mark_read(message)
        return ReadReceiptOut(success=True, id=message.id, is_read=message.is_read)
