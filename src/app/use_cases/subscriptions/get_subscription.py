"""GetSubscription Use Case

Read-only lookup of a subscription and its line item.
"""

from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import SubscriptionNotFound
from .dtos import SubscriptionResponseDTO
from .mappers import to_subscription_dto


class GetSubscription:

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int) -> Result[SubscriptionResponseDTO]:
        """
        Errors:
            SUBSCRIPTION_NOT_FOUND: No subscription with this ID
        """
        subscription = await self.subscription_repo.get_by_id(subscription_id)
        if not subscription:
            e = SubscriptionNotFound(subscription_id)
            return Return.err(Error(code=e.code, message=e.message))

        line_item = await self.subscription_repo.get_line_item(subscription_id)
        return Return.ok(to_subscription_dto(subscription, line_item))
