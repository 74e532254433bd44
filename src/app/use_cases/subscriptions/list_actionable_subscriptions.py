"""ListActionableSubscriptions Use Case

Selects the subscriptions due for processing as of a given date.
"""

from datetime import date
from libs.result import Result, Return
from src.app.repositories.subscription_repository import SubscriptionRepository
from .dtos import ActionableSubscriptionsResponseDTO
from .mappers import to_subscription_dto


class ListActionableSubscriptions:
    """
    Use Case: Actionable-set selection

    A subscription is actionable exactly when it is active, has an
    actionable_date, and that date is on or before as_of. Every other
    state (inactive, canceled, pending_cancellation, past_due) is excluded.
    """

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, as_of: date) -> Result[ActionableSubscriptionsResponseDTO]:
        subscriptions = await self.subscription_repo.get_actionable(as_of)

        return Return.ok(
            ActionableSubscriptionsResponseDTO(
                as_of=as_of,
                subscriptions=[to_subscription_dto(s) for s in subscriptions],
                total=len(subscriptions),
            )
        )
