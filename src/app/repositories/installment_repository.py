"""Installment Repository Interface

Installments are append-only; there is no update or delete.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.subscription import Installment


class InstallmentRepository(ABC):

    @abstractmethod
    async def create(self, installment: Installment) -> Installment:
        """
        Append an installment to a subscription's history

        Args:
            installment: Installment entity to persist

        Returns:
            Created Installment with generated ID
        """
        pass

    @abstractmethod
    async def count_by_subscription(self, subscription_id: int) -> int:
        """Number of installments recorded for a subscription"""
        pass

    @abstractmethod
    async def list_by_subscription(self, subscription_id: int) -> List[Installment]:
        """Installments of a subscription, oldest first"""
        pass
