"""CreateSubscription Use Case

Creates an active subscription, its line item, and its first actionable date.
"""

import logging
from datetime import date
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.interval import Interval, next_actionable_date
from src.domain.subscription import Subscription, LineItem
from src.domain.subscription_state import SubscriptionState
from .dtos import CreateSubscriptionCommandDTO, SubscriptionResponseDTO
from .mappers import to_subscription_dto

logger = logging.getLogger(__name__)


class CreateSubscription:
    """
    Use Case: Create a subscription

    Business Rules:
    1. New subscriptions start active
    2. actionable_date defaults to today + interval
    3. The line item is persisted with the subscription in one transaction
    """

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def execute(
        self, command: CreateSubscriptionCommandDTO, today: date
    ) -> Result[SubscriptionResponseDTO]:
        """
        Execute subscription creation

        Args:
            command: CreateSubscriptionCommandDTO
            today: Creation date, used for the default actionable date

        Returns:
            Result[SubscriptionResponseDTO]: The created subscription
        """
        interval = Interval(length=command.interval_length, units=command.interval_units)
        actionable_date = command.actionable_date or next_actionable_date(today, interval)

        subscription = Subscription(
            user_id=command.user_id,
            state=SubscriptionState.ACTIVE.value,
            actionable_date=actionable_date,
            interval_length=interval.length,
            interval_units=interval.units.value,
            end_date=command.end_date,
        )

        line_item = None
        if command.line_item is not None:
            line_item = LineItem(
                subscribable_id=command.line_item.subscribable_id,
                quantity=command.line_item.quantity,
                max_installments=command.line_item.max_installments,
            )

        try:
            created = await self.subscription_repo.create(subscription, line_item)
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

        logger.info(
            f"Created subscription {created.id} for user {created.user_id}, "
            f"every {interval}, first actionable on {actionable_date.isoformat()}"
        )
        return Return.ok(to_subscription_dto(created, line_item))
