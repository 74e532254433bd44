"""CancelSubscription Use Case

Cancels a subscription immediately, or defers the cancellation when the next
cycle is too close to stop.
"""

import logging
from datetime import date, timedelta
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription_state import DEFAULT_CANCELLATION_NOTICE, cancel
from .dtos import SubscriptionStateResponseDTO
from .mappers import apply_transition

logger = logging.getLogger(__name__)


class CancelSubscription:
    """
    Use Case: Cancel a subscription

    Business Rules:
    1. Guard passes (next cycle beyond the cancellation notice) -> canceled
    2. Guard fails -> pending_cancellation (not an error, applied=False)
    3. Already canceled -> no-op success
    4. Inactive -> INVALID_TRANSITION
    5. Row locked (SELECT FOR UPDATE) for the read-modify-write
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        minimum_notice: timedelta = DEFAULT_CANCELLATION_NOTICE,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.minimum_notice = minimum_notice

    async def execute(self, subscription_id: int, today: date) -> Result[SubscriptionStateResponseDTO]:
        """
        Execute cancellation

        Args:
            subscription_id: Subscription to cancel
            today: Date the cancellation guard is evaluated against

        Returns:
            Result[SubscriptionStateResponseDTO]: Resulting state or error
        """
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            transition = cancel(subscription.snapshot(), today, self.minimum_notice)

            if apply_transition(subscription, transition):
                await self.subscription_repo.update(subscription)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message))
        except Exception:
            await self.uow.rollback()
            raise

        if transition.applied:
            logger.info(f"Subscription {subscription_id} canceled")
        else:
            logger.info(
                f"Subscription {subscription_id} pending cancellation "
                f"(next cycle {transition.actionable_date})"
            )

        return Return.ok(
            SubscriptionStateResponseDTO(
                subscription_id=subscription_id,
                state=transition.state,
                actionable_date=transition.actionable_date,
                applied=transition.applied,
            )
        )
