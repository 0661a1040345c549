from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from models.enums import PaymentStatus
from models.models import PremiumTransaction, Property


class PremiumTransactionRepo:
    def __init__(self, db):
        self.db = db

    async def get_by_payment_id(self, stripe_payment_id: str) -> Optional[PremiumTransaction]:
        result = await self.db.execute(
            select(PremiumTransaction).where(
                PremiumTransaction.stripe_payment_id == stripe_payment_id
            )
        )
        return result.scalar_one_or_none()

    async def record_premium_upgrade(
        self,
        prop: Property,
        user_id: str,
        amount: int,
        stripe_payment_id: str,
        premium_until: datetime,
    ) -> PremiumTransaction:
        """Flips the listing to premium and appends the ledger row in one commit."""
        prop.is_premium = True
        prop.premium_until = premium_until
        transaction = PremiumTransaction(
            user_id=user_id,
            property_id=prop.id,
            amount=amount,
            stripe_payment_id=stripe_payment_id,
            status=PaymentStatus.COMPLETED,
        )
        self.db.add(transaction)
        try:
            await self.db.commit()
            await self.db.refresh(transaction)
            await self.db.refresh(prop)
            return transaction
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def get_for_user(self, user_id: str) -> list[PremiumTransaction]:
        result = await self.db.execute(
            select(PremiumTransaction)
            .where(PremiumTransaction.user_id == user_id)
            .order_by(PremiumTransaction.created_at.desc(), PremiumTransaction.id.desc())
        )
        return result.scalars().all()

    async def get_all(self) -> list[PremiumTransaction]:
        result = await self.db.execute(
            select(PremiumTransaction).order_by(
                PremiumTransaction.created_at.desc(), PremiumTransaction.id.desc()
            )
        )
        return result.scalars().all()

    async def total_revenue(self) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(PremiumTransaction.amount), 0)).where(
                PremiumTransaction.status == PaymentStatus.COMPLETED
            )
        )
        return int(result.scalar_one())
