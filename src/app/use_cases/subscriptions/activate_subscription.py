"""ActivateSubscription Use Case

Returns a pending-cancellation or past-due subscription to active.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription_state import activate
from .dtos import SubscriptionStateResponseDTO
from .mappers import apply_transition

logger = logging.getLogger(__name__)


class ActivateSubscription:
    """
    Use Case: Reactivate a subscription

    Business Rules:
    1. Allowed from pending_cancellation and past_due only; canceled and
       inactive are terminal (INVALID_TRANSITION)
    2. A missing or past actionable date is rescheduled to today + interval
    """

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int, today: date) -> Result[SubscriptionStateResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            transition = activate(subscription.snapshot(), today)

            apply_transition(subscription, transition)
            await self.subscription_repo.update(subscription)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message))
        except Exception:
            await self.uow.rollback()
            raise

        logger.info(
            f"Subscription {subscription_id} reactivated, next cycle {transition.actionable_date}"
        )

        return Return.ok(
            SubscriptionStateResponseDTO(
                subscription_id=subscription_id,
                state=transition.state,
                actionable_date=transition.actionable_date,
                applied=True,
            )
        )
