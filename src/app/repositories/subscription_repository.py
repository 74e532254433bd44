"""Subscription Repository Interface

Defines the contract for subscription aggregate persistence.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List
from src.domain.subscription import Subscription, LineItem


class SubscriptionRepository(ABC):
    """
    Repository interface for Subscription persistence

    The line item is owned by the subscription and persisted through this
    repository as part of the aggregate.
    """

    @abstractmethod
    async def get_by_id(self, subscription_id: int, for_update: bool = False) -> Optional[Subscription]:
        """
        Retrieve subscription by ID

        Args:
            subscription_id: Subscription ID
            for_update: If True, lock the row until the transaction ends

        Returns:
            Subscription if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_line_item(self, subscription_id: int) -> Optional[LineItem]:
        """
        Retrieve the line item owned by a subscription

        Args:
            subscription_id: Subscription ID

        Returns:
            LineItem if the subscription has one, None otherwise
        """
        pass

    @abstractmethod
    async def get_actionable(self, as_of: date) -> List[Subscription]:
        """
        Retrieve subscriptions due for processing

        Predicate: state is active, actionable_date is set and <= as_of.

        Args:
            as_of: The date considered "today"

        Returns:
            Matching subscriptions ordered by actionable_date, id
        """
        pass

    @abstractmethod
    async def get_pending_cancellations(self) -> List[Subscription]:
        """
        Retrieve subscriptions with a deferred cancellation

        Returns:
            Subscriptions in pending_cancellation state
        """
        pass

    @abstractmethod
    async def create(self, subscription: Subscription, line_item: Optional[LineItem] = None) -> Subscription:
        """
        Create a new subscription with its line item

        Args:
            subscription: Subscription entity to persist
            line_item: Optional line item; its subscription_id is filled in

        Returns:
            Created Subscription with generated ID
        """
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> Subscription:
        """
        Update an existing subscription

        Args:
            subscription: Subscription entity with updated values

        Returns:
            Updated Subscription
        """
        pass
