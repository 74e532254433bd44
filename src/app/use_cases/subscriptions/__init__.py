"""Subscription lifecycle use cases"""
from .create_subscription import CreateSubscription
from .get_subscription import GetSubscription
from .list_actionable_subscriptions import ListActionableSubscriptions
from .cancel_subscription import CancelSubscription
from .resolve_pending_cancellation import ResolvePendingCancellation
from .deactivate_subscription import DeactivateSubscription
from .advance_actionable_date import AdvanceActionableDate
from .preview_next_actionable_date import PreviewNextActionableDate
from .unset_actionable_date import UnsetActionableDate
from .activate_subscription import ActivateSubscription
from .mark_past_due import MarkPastDue
from .process_subscription import ProcessSubscription
from .dtos import (
    LineItemCommandDTO,
    CreateSubscriptionCommandDTO,
    LineItemDTO,
    SubscriptionResponseDTO,
    SubscriptionStateResponseDTO,
    DeactivateResponseDTO,
    ActionableDateResponseDTO,
    ActionableSubscriptionsResponseDTO,
    ProcessSubscriptionResponseDTO,
    ProcessingResultDTO,
)

__all__ = [
    "CreateSubscription",
    "GetSubscription",
    "ListActionableSubscriptions",
    "CancelSubscription",
    "ResolvePendingCancellation",
    "DeactivateSubscription",
    "AdvanceActionableDate",
    "PreviewNextActionableDate",
    "UnsetActionableDate",
    "ActivateSubscription",
    "MarkPastDue",
    "ProcessSubscription",
    "LineItemCommandDTO",
    "CreateSubscriptionCommandDTO",
    "LineItemDTO",
    "SubscriptionResponseDTO",
    "SubscriptionStateResponseDTO",
    "DeactivateResponseDTO",
    "ActionableDateResponseDTO",
    "ActionableSubscriptionsResponseDTO",
    "ProcessSubscriptionResponseDTO",
    "ProcessingResultDTO",
]
