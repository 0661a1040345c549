from core.check_permission import CheckRolePermission
from core.mapper import ORMMapper
from repos.premium_transaction_repo import PremiumTransactionRepo
from repos.user_repo import UserRepo
from schemas.schema import PremiumTransactionOut, UserOut, UserTypeUpdateSchema


class UserService:
    def __init__(self, db):
        self.repo: UserRepo = UserRepo(db)
        self.transactions: PremiumTransactionRepo = PremiumTransactionRepo(db)
        self.permission: CheckRolePermission = CheckRolePermission()
        self.mapper: ORMMapper = ORMMapper()

    async def get_me(self, current_user) -> UserOut:
        return self.mapper.one(current_user, UserOut)

    async def update_user_type(self, data: UserTypeUpdateSchema, current_user) -> UserOut:
        await self.permission.check_self_assignable(data.user_type)
        user = await self.repo.update_user_type(current_user, data.user_type)
        return self.mapper.one(user, UserOut)

    async def get_user_transactions(
        self, user_id: str, current_user
    ) -> list[PremiumTransactionOut]:
        await self.permission.check_self_or_admin(current_user=current_user, user_id=user_id)
        transactions = await self.transactions.get_for_user(user_id)
        return self.mapper.many(items=transactions, schema=PremiumTransactionOut)
