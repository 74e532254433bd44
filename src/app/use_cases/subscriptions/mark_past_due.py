"""MarkPastDue Use Case

Flags an active subscription whose last cycle could not be settled. Past-due
subscriptions leave the actionable set until reactivated.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription_state import mark_past_due
from .dtos import SubscriptionStateResponseDTO
from .mappers import apply_transition

logger = logging.getLogger(__name__)


class MarkPastDue:

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int) -> Result[SubscriptionStateResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            transition = mark_past_due(subscription.snapshot())

            apply_transition(subscription, transition)
            await self.subscription_repo.update(subscription)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message))
        except Exception:
            await self.uow.rollback()
            raise

        logger.warning(f"Subscription {subscription_id} marked past due")

        return Return.ok(
            SubscriptionStateResponseDTO(
                subscription_id=subscription_id,
                state=transition.state,
                actionable_date=transition.actionable_date,
                applied=True,
            )
        )
