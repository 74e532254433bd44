"""SQLAlchemy Installment Repository Implementation"""

from typing import List
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.installment_repository import InstallmentRepository
from src.domain.subscription import Installment


class SqlAlchemyInstallmentRepository(InstallmentRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, installment: Installment) -> Installment:
        self.session.add(installment)
        await self.session.flush()
        await self.session.refresh(installment)
        return installment

    async def count_by_subscription(self, subscription_id: int) -> int:
        statement = select(func.count(Installment.id)).where(
            Installment.subscription_id == subscription_id
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def list_by_subscription(self, subscription_id: int) -> List[Installment]:
        statement = (
            select(Installment)
            .where(Installment.subscription_id == subscription_id)
            .order_by(Installment.created_at, Installment.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
