"""SQLAlchemy Subscription Repository Implementation

Implements subscription aggregate persistence using SQLAlchemy async session.
"""

from datetime import date, datetime
from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.subscription import Subscription, LineItem
from src.domain.subscription_state import SubscriptionState


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """
    SQLAlchemy implementation of SubscriptionRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE for transitions
    - Actionable query served by the (state, actionable_date) index
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, subscription_id: int, for_update: bool = False) -> Optional[Subscription]:
        """
        Retrieve subscription by ID with optional row-level locking

        Args:
            subscription_id: Subscription ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Subscription if found, None otherwise
        """
        statement = select(Subscription).where(Subscription.id == subscription_id)

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_line_item(self, subscription_id: int) -> Optional[LineItem]:
        statement = select(LineItem).where(LineItem.subscription_id == subscription_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_actionable(self, as_of: date) -> List[Subscription]:
        """
        Retrieve subscriptions due for processing on or before as_of

        Args:
            as_of: The date considered "today"

        Returns:
            List of actionable subscriptions
        """
        statement = (
            select(Subscription)
            .where(Subscription.state == SubscriptionState.ACTIVE.value)
            .where(Subscription.actionable_date.is_not(None))
            .where(Subscription.actionable_date <= as_of)
            .order_by(Subscription.actionable_date, Subscription.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_pending_cancellations(self) -> List[Subscription]:
        statement = (
            select(Subscription)
            .where(Subscription.state == SubscriptionState.PENDING_CANCELLATION.value)
            .order_by(Subscription.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create(self, subscription: Subscription, line_item: Optional[LineItem] = None) -> Subscription:
        """
        Create a new subscription and its line item

        Args:
            subscription: Subscription entity to persist
            line_item: Optional line item owned by the subscription

        Returns:
            Created Subscription with generated ID
        """
        self.session.add(subscription)
        await self.session.flush()

        if line_item is not None:
            line_item.subscription_id = subscription.id
            self.session.add(line_item)
            await self.session.flush()

        await self.session.refresh(subscription)
        return subscription

    async def update(self, subscription: Subscription) -> Subscription:
        """
        Update an existing subscription

        Args:
            subscription: Subscription entity with updated values

        Returns:
            Updated Subscription
        """
        subscription.updated_at = datetime.utcnow()
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription
