from fastapi import HTTPException

from models.enums import SELF_ASSIGNABLE_USER_TYPES, UserType


class CheckRolePermission:
    async def check_admin(self, current_user):
        if current_user.user_type != UserType.ADMIN:
            raise HTTPException(status_code=403, detail="Admin access required")

    async def check_owner_or_admin(self, current_user, owner_id: str):
        if current_user.user_type == UserType.ADMIN:
            return
        if current_user.id != owner_id:
            raise HTTPException(
                status_code=403, detail="You are not allowed to modify this property"
            )

    async def check_self_or_admin(self, current_user, user_id: str):
        if current_user.user_type == UserType.ADMIN:
            return
        if current_user.id != user_id:
            raise HTTPException(status_code=403, detail="Access Denied")

    async def check_self_assignable(self, user_type: UserType):
        if user_type not in SELF_ASSIGNABLE_USER_TYPES:
            raise HTTPException(status_code=403, detail="This role cannot be self-assigned")
