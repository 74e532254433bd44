"""AdvanceActionableDate Use Case

Moves a subscription's actionable date forward by one billing interval and
persists it.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription_state import advance_actionable_date
from .dtos import ActionableDateResponseDTO
from .mappers import apply_transition

logger = logging.getLogger(__name__)


class AdvanceActionableDate:
    """
    Use Case: Advance the actionable date

    Business Rules:
    1. new date = actionable_date + interval (calendar arithmetic)
    2. No actionable_date, no interval, or a non-advanceable state ->
       INVALID_TRANSITION, nothing persisted
    3. If the new date falls after end_date the actionable date is cleared
       and None is returned
    """

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int) -> Result[ActionableDateResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            previous_date = subscription.actionable_date
            transition = advance_actionable_date(subscription.snapshot())

            if apply_transition(subscription, transition):
                await self.subscription_repo.update(subscription)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message))
        except Exception:
            await self.uow.rollback()
            raise

        if transition.actionable_date is None:
            logger.info(
                f"Subscription {subscription_id} reached its end date; actionable date cleared"
            )
        else:
            logger.info(
                f"Subscription {subscription_id} advanced from {previous_date} "
                f"to {transition.actionable_date}"
            )

        return Return.ok(
            ActionableDateResponseDTO(
                subscription_id=subscription_id,
                actionable_date=transition.actionable_date,
            )
        )
