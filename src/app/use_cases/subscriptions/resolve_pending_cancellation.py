"""ResolvePendingCancellation Use Case

Completes a deferred cancellation once the cancellation guard holds, or once
the cycle that deferred it comes due. A due cycle is billed one last time
(when the installment allowance permits) before the subscription is canceled.
"""

import logging
from datetime import date, timedelta
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription import Installment
from src.domain.subscription_state import (
    DEFAULT_CANCELLATION_NOTICE,
    installments_exhausted,
    pending_cycle_due,
    resolve_pending_cancellation,
)
from .dtos import SubscriptionStateResponseDTO
from .mappers import apply_transition

logger = logging.getLogger(__name__)


class ResolvePendingCancellation:

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        installment_repo: InstallmentRepository,
        minimum_notice: timedelta = DEFAULT_CANCELLATION_NOTICE,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.installment_repo = installment_repo
        self.minimum_notice = minimum_notice

    async def execute(self, subscription_id: int, today: date) -> Result[SubscriptionStateResponseDTO]:
        """
        Returns applied=True once the subscription is canceled, applied=False
        while the cancellation must keep waiting.
        """
        final_installment = None
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            snapshot = subscription.snapshot()
            if pending_cycle_due(snapshot, today):
                line_item = await self.subscription_repo.get_line_item(subscription_id)
                installment_count = await self.installment_repo.count_by_subscription(subscription_id)
                if not installments_exhausted(subscription.snapshot(line_item, installment_count)):
                    final_installment = await self.installment_repo.create(
                        Installment(
                            subscription_id=subscription_id,
                            actionable_date=subscription.actionable_date,
                        )
                    )

            transition = resolve_pending_cancellation(snapshot, today, self.minimum_notice)

            if apply_transition(subscription, transition):
                await self.subscription_repo.update(subscription)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message))
        except Exception:
            await self.uow.rollback()
            raise

        if final_installment is not None:
            logger.info(
                f"Final cycle {final_installment.actionable_date} of subscription "
                f"{subscription_id} recorded before cancellation"
            )
        if transition.applied:
            logger.info(f"Pending cancellation of subscription {subscription_id} completed")

        return Return.ok(
            SubscriptionStateResponseDTO(
                subscription_id=subscription_id,
                state=transition.state,
                actionable_date=transition.actionable_date,
                applied=transition.applied,
            )
        )
