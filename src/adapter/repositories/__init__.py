from .subscription_repository import SqlAlchemySubscriptionRepository
from .installment_repository import SqlAlchemyInstallmentRepository

__all__ = [
    "SqlAlchemySubscriptionRepository",
    "SqlAlchemyInstallmentRepository",
]
