from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import MessageCreateSchema
from services.message_service import MessageService

router = APIRouter(tags=["Messages"])


@cbv(router=router)
class MessageRoutes:
    @router.post("/messages", status_code=201)
    @safe_handler
    async def send(
        self,
        request: Request,
        data: MessageCreateSchema,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await MessageService(db).send_message(data=data, current_user=current_user)

    @router.get("/messages")
    @safe_handler
    async def inbox(
        self,
        request: Request,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await MessageService(db).get_user_messages(current_user=current_user)

    @router.post("/messages/{message_id}/read")
    @safe_handler
    async def mark_read(
        self,
        request: Request,
        message_id: int,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await MessageService(db).mark_as_read(
            message_id=message_id, current_user=current_user
        )

    @router.get("/properties/{property_id}/messages")
    @safe_handler
    async def property_messages(
        self,
        request: Request,
        property_id: int,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await MessageService(db).get_property_messages(
            property_id=property_id, current_user=current_user
        )

    @router.get("/conversations/{user_id}/{property_id}")
    @safe_handler
    async def conversation(
        self,
        request: Request,
        user_id: str,
        property_id: int,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await MessageService(db).get_conversation(
            other_user_id=user_id, property_id=property_id, current_user=current_user
        )
