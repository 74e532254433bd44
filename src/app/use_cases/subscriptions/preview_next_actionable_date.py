"""PreviewNextActionableDate Use Case

Computes the date a subscription would advance to, without persisting.
"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import DomainError, SubscriptionNotFound
from src.domain.subscription_state import next_actionable_date
from .dtos import ActionableDateResponseDTO


class PreviewNextActionableDate:
    """
    Read-only counterpart of AdvanceActionableDate

    Same computation and same INVALID_TRANSITION preconditions; never writes.
    """

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int) -> Result[ActionableDateResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id)
            if not subscription:
                raise SubscriptionNotFound(subscription_id)

            next_date = next_actionable_date(subscription.snapshot())
        except DomainError as e:
            return Return.err(Error(code=e.code, message=e.message))

        return Return.ok(
            ActionableDateResponseDTO(subscription_id=subscription_id, actionable_date=next_date)
        )
