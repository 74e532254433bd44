from .base import BaseModel
from .errors import DomainError, InvalidTransition, SubscriptionNotFound
from .interval import Interval, IntervalUnit, next_actionable_date
from .subscription_state import SubscriptionState, SubscriptionSnapshot, Transition
from .subscription import Subscription, LineItem, Installment

__all__ = [
    "BaseModel",
    "DomainError",
    "InvalidTransition",
    "SubscriptionNotFound",
    "Interval",
    "IntervalUnit",
    "next_actionable_date",
    "SubscriptionState",
    "SubscriptionSnapshot",
    "Transition",
    "Subscription",
    "LineItem",
    "Installment",
]
