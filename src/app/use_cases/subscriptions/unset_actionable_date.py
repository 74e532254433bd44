"""UnsetActionableDate Use Case

Removes a subscription from the actionable pool without changing its state.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription_state import unset_actionable_date
from .dtos import ActionableDateResponseDTO
from .mappers import apply_transition

logger = logging.getLogger(__name__)


class UnsetActionableDate:
    """Clears actionable_date unconditionally; idempotent"""

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int) -> Result[ActionableDateResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            if apply_transition(subscription, unset_actionable_date(subscription.snapshot())):
                await self.subscription_repo.update(subscription)
                logger.info(f"Actionable date of subscription {subscription_id} unset")
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(Error(code=e.code, message=e.message))
        except Exception:
            await self.uow.rollback()
            raise

        return Return.ok(ActionableDateResponseDTO(subscription_id=subscription_id, actionable_date=None))
