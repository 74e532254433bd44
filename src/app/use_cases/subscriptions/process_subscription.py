"""ProcessSubscription Use Case

Runs one billing cycle bookkeeping step for an actionable subscription:
records the installment when the allowance permits, then either retires
the subscription or schedules its next cycle. Payment and order
construction happen elsewhere.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription import Installment
from src.domain.subscription_state import (
    advance_actionable_date,
    can_be_deactivated,
    deactivate,
    is_actionable,
)
from .dtos import ProcessSubscriptionResponseDTO
from .mappers import apply_transition

logger = logging.getLogger(__name__)


class ProcessSubscription:
    """
    Use Case: Process one actionable subscription

    Flow:
    1. Lock the subscription and re-check it is still actionable
    2. If the allowance is already exhausted, deactivate without billing
    3. Otherwise append an installment for the current actionable date,
       then deactivate if that used up the allowance,
       otherwise advance the actionable date
    4. Commit everything in one transaction

    Errors:
        SUBSCRIPTION_NOT_FOUND: No subscription with this ID
        NOT_ACTIONABLE: State or date changed since selection
        INVALID_TRANSITION: Subscription cannot be advanced (e.g. no interval)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        installment_repo: InstallmentRepository,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.installment_repo = installment_repo

    async def execute(self, subscription_id: int, today: date) -> Result[ProcessSubscriptionResponseDTO]:
        installment = None
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            if not is_actionable(subscription.snapshot(), today):
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="NOT_ACTIONABLE",
                        message=f"Subscription {subscription_id} is no longer actionable",
                    )
                )

            line_item = await self.subscription_repo.get_line_item(subscription_id)
            installment_count = await self.installment_repo.count_by_subscription(subscription_id)
            snapshot = subscription.snapshot(line_item, installment_count)

            # An exhausted allowance is retired without billing another cycle
            if not can_be_deactivated(snapshot):
                installment = await self.installment_repo.create(
                    Installment(
                        subscription_id=subscription_id,
                        actionable_date=subscription.actionable_date,
                    )
                )
                installment_count = await self.installment_repo.count_by_subscription(subscription_id)
                snapshot = subscription.snapshot(line_item, installment_count)

            deactivated = can_be_deactivated(snapshot)
            if deactivated:
                transition = deactivate(snapshot)
            else:
                transition = advance_actionable_date(snapshot)

            apply_transition(subscription, transition)
            await self.subscription_repo.update(subscription)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message))
        except Exception:
            await self.uow.rollback()
            raise

        if deactivated:
            logger.info(
                f"Subscription {subscription_id} finished after {installment_count} installments"
            )
        else:
            logger.info(
                f"Subscription {subscription_id} processed, next cycle {transition.actionable_date}"
            )

        return Return.ok(
            ProcessSubscriptionResponseDTO(
                subscription_id=subscription_id,
                installment_id=installment.id if installment else None,
                state=transition.state,
                actionable_date=transition.actionable_date,
                deactivated=deactivated,
            )
        )
