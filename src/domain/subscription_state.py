"""Subscription State Machine

Pure transition logic over an immutable SubscriptionSnapshot. Guards are
predicates on the snapshot; transitions return a Transition describing the
resulting state and actionable date. Nothing here touches persistence.

    active --cancel (guard ok)--> canceled
    active --cancel (guard fails)--> pending_cancellation
    pending_cancellation --resolve (guard ok or cycle due)--> canceled
    pending_cancellation --activate--> active
    active --deactivate (guard ok)--> inactive
    active --mark_past_due--> past_due --activate--> active
    inactive, canceled: terminal
"""

from datetime import date, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.errors import InvalidTransition
from src.domain.interval import Interval, next_actionable_date as add_interval

DEFAULT_CANCELLATION_NOTICE = timedelta(days=1)


class SubscriptionState(str, Enum):
    """Subscription lifecycle states"""
    ACTIVE = "active"
    PENDING_CANCELLATION = "pending_cancellation"
    CANCELED = "canceled"
    INACTIVE = "inactive"
    PAST_DUE = "past_due"


ACTIONABLE_STATES = frozenset({SubscriptionState.ACTIVE})
CANCELABLE_STATES = frozenset({
    SubscriptionState.ACTIVE,
    SubscriptionState.PAST_DUE,
    SubscriptionState.PENDING_CANCELLATION,
})
ADVANCEABLE_STATES = frozenset({SubscriptionState.ACTIVE, SubscriptionState.PAST_DUE})
ACTIVATABLE_STATES = frozenset({
    SubscriptionState.PENDING_CANCELLATION,
    SubscriptionState.PAST_DUE,
})


class SubscriptionSnapshot(BaseModel):
    """
    Immutable view of a subscription aggregate

    Built by the repository layer from the subscription row, its line item
    and its installment count, so guards never trigger a lazy load.
    """

    state: SubscriptionState
    actionable_date: Optional[date] = None
    interval: Interval
    end_date: Optional[date] = None
    max_installments: Optional[int] = Field(default=None, ge=0)
    installment_count: int = Field(default=0, ge=0)

    class Config:
        frozen = True


class Transition(BaseModel):
    """
    Outcome of a transition function

    `applied` is False when a soft guard deferred or refused the requested
    transition; the state and actionable date are then what the caller
    should persist (possibly unchanged).
    """

    state: SubscriptionState
    actionable_date: Optional[date] = None
    applied: bool = True

    class Config:
        frozen = True


def _unchanged(snapshot: SubscriptionSnapshot, applied: bool) -> Transition:
    return Transition(
        state=snapshot.state,
        actionable_date=snapshot.actionable_date,
        applied=applied,
    )


def can_be_canceled(
    snapshot: SubscriptionSnapshot,
    today: date,
    minimum_notice: timedelta = DEFAULT_CANCELLATION_NOTICE,
) -> bool:
    """
    True when the next processing cycle is far enough away to cancel now

    A subscription without an actionable date has nothing pending.
    """
    if snapshot.actionable_date is None:
        return True
    return snapshot.actionable_date - minimum_notice > today


def is_actionable(snapshot: SubscriptionSnapshot, as_of: date) -> bool:
    """True when the subscription belongs to the actionable set for as_of"""
    return (
        snapshot.state in ACTIONABLE_STATES
        and snapshot.actionable_date is not None
        and snapshot.actionable_date <= as_of
    )


def pending_cycle_due(snapshot: SubscriptionSnapshot, today: date) -> bool:
    """True when the cycle that deferred a cancellation has come due"""
    return (
        snapshot.state == SubscriptionState.PENDING_CANCELLATION
        and snapshot.actionable_date is not None
        and snapshot.actionable_date <= today
    )


def installments_exhausted(snapshot: SubscriptionSnapshot) -> bool:
    if snapshot.max_installments is None:
        return False
    return snapshot.installment_count >= snapshot.max_installments


def can_be_deactivated(snapshot: SubscriptionSnapshot) -> bool:
    """True when an active subscription has used up its installment allowance"""
    if snapshot.state != SubscriptionState.ACTIVE:
        return False
    return installments_exhausted(snapshot)


def next_actionable_date(snapshot: SubscriptionSnapshot) -> Optional[date]:
    """
    Date the subscription would be advanced to

    Returns None when the next date falls after the subscription's end date.

    Raises:
        InvalidTransition: State is not advanceable, or the date or interval is missing
    """
    if snapshot.state not in ADVANCEABLE_STATES:
        raise InvalidTransition(
            f"Cannot advance a subscription in state '{snapshot.state.value}'"
        )
    if snapshot.actionable_date is None:
        raise InvalidTransition("Subscription has no actionable date to advance from")
    if snapshot.interval.is_zero:
        raise InvalidTransition("Subscription has no billing interval configured")

    next_date = add_interval(snapshot.actionable_date, snapshot.interval)
    if snapshot.end_date is not None and next_date > snapshot.end_date:
        return None
    return next_date


def cancel(
    snapshot: SubscriptionSnapshot,
    today: date,
    minimum_notice: timedelta = DEFAULT_CANCELLATION_NOTICE,
) -> Transition:
    """
    Cancel now if the guard allows, otherwise defer to pending_cancellation

    Raises:
        InvalidTransition: Subscription is inactive
    """
    if snapshot.state == SubscriptionState.CANCELED:
        return _unchanged(snapshot, applied=True)
    if snapshot.state not in CANCELABLE_STATES:
        raise InvalidTransition(f"Cannot cancel a subscription in state '{snapshot.state.value}'")

    if can_be_canceled(snapshot, today, minimum_notice):
        return Transition(
            state=SubscriptionState.CANCELED,
            actionable_date=snapshot.actionable_date,
            applied=True,
        )
    return Transition(
        state=SubscriptionState.PENDING_CANCELLATION,
        actionable_date=snapshot.actionable_date,
        applied=False,
    )


def resolve_pending_cancellation(
    snapshot: SubscriptionSnapshot,
    today: date,
    minimum_notice: timedelta = DEFAULT_CANCELLATION_NOTICE,
) -> Transition:
    """
    Complete a deferred cancellation

    The cancellation completes once the guard clears or once the cycle that
    blocked it is due. In the second case the caller records that final
    cycle before persisting the transition.
    """
    if snapshot.state != SubscriptionState.PENDING_CANCELLATION:
        raise InvalidTransition(
            f"Subscription in state '{snapshot.state.value}' has no pending cancellation"
        )
    if pending_cycle_due(snapshot, today):
        return Transition(
            state=SubscriptionState.CANCELED,
            actionable_date=snapshot.actionable_date,
            applied=True,
        )
    return cancel(snapshot, today, minimum_notice)


def deactivate(snapshot: SubscriptionSnapshot) -> Transition:
    """Move a finished subscription out of the actionable pool for good"""
    if not can_be_deactivated(snapshot):
        return _unchanged(snapshot, applied=False)
    return Transition(state=SubscriptionState.INACTIVE, actionable_date=None, applied=True)


def advance_actionable_date(snapshot: SubscriptionSnapshot) -> Transition:
    """
    Move the actionable date forward by one interval

    Raises:
        InvalidTransition: State is not advanceable, or the date or interval is missing
    """
    return Transition(
        state=snapshot.state,
        actionable_date=next_actionable_date(snapshot),
        applied=True,
    )


def unset_actionable_date(snapshot: SubscriptionSnapshot) -> Transition:
    return Transition(state=snapshot.state, actionable_date=None, applied=True)


def activate(snapshot: SubscriptionSnapshot, today: date) -> Transition:
    """
    Return a pending-cancellation or past-due subscription to active

    A missing or stale actionable date is rescheduled one interval from today.
    """
    if snapshot.state not in ACTIVATABLE_STATES:
        raise InvalidTransition(
            f"Cannot activate a subscription in state '{snapshot.state.value}'"
        )

    actionable_date = snapshot.actionable_date
    if actionable_date is None or actionable_date < today:
        if snapshot.interval.is_zero:
            raise InvalidTransition("Subscription has no billing interval configured")
        actionable_date = add_interval(today, snapshot.interval)

    return Transition(state=SubscriptionState.ACTIVE, actionable_date=actionable_date, applied=True)


def mark_past_due(snapshot: SubscriptionSnapshot) -> Transition:
    if snapshot.state != SubscriptionState.ACTIVE:
        raise InvalidTransition(
            f"Cannot mark a subscription in state '{snapshot.state.value}' as past due"
        )
    return Transition(
        state=SubscriptionState.PAST_DUE,
        actionable_date=snapshot.actionable_date,
        applied=True,
    )
