"""DeactivateSubscription Use Case

Retires a subscription whose line item has used up its installments.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.installment_repository import InstallmentRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription_state import deactivate
from .dtos import DeactivateResponseDTO
from .mappers import apply_transition

logger = logging.getLogger(__name__)


class DeactivateSubscription:
    """
    Use Case: Deactivate a subscription

    Business Rules:
    1. Only active subscriptions whose installment count has reached the
       line item's max_installments are deactivated
    2. Otherwise nothing changes and deactivated=False is returned (not an error)
    3. Deactivation clears the actionable date
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

    async def execute(self, subscription_id: int) -> Result[DeactivateResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            line_item = await self.subscription_repo.get_line_item(subscription_id)
            installment_count = await self.installment_repo.count_by_subscription(subscription_id)

            transition = deactivate(subscription.snapshot(line_item, installment_count))

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
            logger.info(
                f"Subscription {subscription_id} deactivated after {installment_count} installments"
            )

        return Return.ok(
            DeactivateResponseDTO(
                subscription_id=subscription_id,
                deactivated=transition.applied,
                state=transition.state,
            )
        )
