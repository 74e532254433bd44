from .subscription_repository import SubscriptionRepository
from .installment_repository import InstallmentRepository

__all__ = [
    "SubscriptionRepository",
    "InstallmentRepository",
]
