"""Entity <-> DTO helpers shared by subscription use cases"""

from typing import Optional
from src.domain.subscription import Subscription, LineItem
from src.domain.subscription_state import Transition
from .dtos import SubscriptionResponseDTO, LineItemDTO


def to_subscription_dto(
    subscription: Subscription, line_item: Optional[LineItem] = None
) -> SubscriptionResponseDTO:
    return SubscriptionResponseDTO(
        id=subscription.id,
        user_id=subscription.user_id,
        state=subscription.state,
        actionable_date=subscription.actionable_date,
        interval_length=subscription.interval_length,
        interval_units=subscription.interval_units,
        end_date=subscription.end_date,
        line_item=LineItemDTO(
            subscribable_id=line_item.subscribable_id,
            quantity=line_item.quantity,
            max_installments=line_item.max_installments,
        ) if line_item else None,
        created_at=subscription.created_at,
        updated_at=subscription.updated_at,
    )


def apply_transition(subscription: Subscription, transition: Transition) -> bool:
    """
    Copy a transition's outcome onto the entity

    Returns:
        True if state or actionable_date changed and must be persisted
    """
    changed = (
        subscription.state != transition.state
        or subscription.actionable_date != transition.actionable_date
    )
    subscription.state = transition.state.value
    subscription.actionable_date = transition.actionable_date
    return changed
