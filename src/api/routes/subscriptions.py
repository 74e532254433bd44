"""Subscription API Routes

FastAPI routes for subscription lifecycle and scheduling operations.
Time-dependent endpoints accept an optional `today` query parameter;
the server's clock is used when it is omitted.
"""

from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.schemas.subscription_request import CreateSubscriptionRequestSchema
from src.app.services.clock import Clock
from src.app.use_cases.subscriptions.dtos import (
    CreateSubscriptionCommandDTO,
    LineItemCommandDTO,
    SubscriptionResponseDTO,
    SubscriptionStateResponseDTO,
    DeactivateResponseDTO,
    ActionableDateResponseDTO,
    ActionableSubscriptionsResponseDTO,
)
from src.app.use_cases.subscriptions import (
    CreateSubscription,
    GetSubscription,
    ListActionableSubscriptions,
    CancelSubscription,
    DeactivateSubscription,
    AdvanceActionableDate,
    PreviewNextActionableDate,
    UnsetActionableDate,
    ActivateSubscription,
    MarkPastDue,
)
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.installment_repository import SqlAlchemyInstallmentRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, get_clock, get_cancellation_notice
from src.api.error import ClientError

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

NOT_FOUND_RESPONSE = {
    404: {
        "description": "Subscription not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "SUBSCRIPTION_NOT_FOUND",
                        "message": "Subscription 42 not found"
                    }
                }
            }
        }
    }
}

INVALID_TRANSITION_RESPONSE = {
    409: {
        "description": "Transition not allowed",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INVALID_TRANSITION",
                        "message": "Cannot cancel a subscription in state 'inactive'"
                    }
                }
            }
        }
    }
}

TodayQuery = Query(default=None, description="Evaluation date (defaults to server date)")


def _today(today: Optional[date], clock: Clock) -> date:
    return today or clock.today()


def _unwrap(result):
    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "",
    response_model=SubscriptionResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_subscription(
    request: CreateSubscriptionRequestSchema,
    today: Optional[date] = TodayQuery,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """
    Create an active subscription.

    **Request body:**
    - `user_id` (required): Owning user
    - `interval_length`, `interval_units` (required): Billing interval, e.g. 1 month
    - `actionable_date` (optional): First processing date, defaults to today + interval
    - `end_date` (optional): Last processable date
    - `line_item` (optional): `subscribable_id`, `quantity`, `max_installments`

    **Returns:**
    - 201: Subscription created
    - 422: Invalid request parameters
    """
    command = CreateSubscriptionCommandDTO(
        user_id=request.user_id,
        interval_length=request.interval_length,
        interval_units=request.interval_units,
        actionable_date=request.actionable_date,
        end_date=request.end_date,
        line_item=LineItemCommandDTO(**request.line_item.model_dump()) if request.line_item else None,
    )

    use_case = CreateSubscription(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    return _unwrap(await use_case.execute(command, _today(today, clock)))


@router.get(
    "/actionable",
    response_model=ActionableSubscriptionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_actionable_subscriptions(
    as_of: Optional[date] = Query(default=None, description="Selection date (defaults to server date)"),
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """
    List subscriptions due for processing.

    Returns active subscriptions whose actionable date is on or before
    `as_of`. Inactive, canceled, pending-cancellation and past-due
    subscriptions are never included.
    """
    use_case = ListActionableSubscriptions(SqlAlchemySubscriptionRepository(session))
    return _unwrap(await use_case.execute(_today(as_of, clock)))


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponseDTO,
    responses=NOT_FOUND_RESPONSE,
)
async def get_subscription(
    subscription_id: int,
    session: AsyncSession = Depends(get_session),
):
    use_case = GetSubscription(SqlAlchemySubscriptionRepository(session))
    return _unwrap(await use_case.execute(subscription_id))


@router.get(
    "/{subscription_id}/next_actionable_date",
    response_model=ActionableDateResponseDTO,
    responses={**NOT_FOUND_RESPONSE, **INVALID_TRANSITION_RESPONSE},
)
async def preview_next_actionable_date(
    subscription_id: int,
    session: AsyncSession = Depends(get_session),
):
    """
    Preview the date the subscription would advance to. Nothing is persisted.
    """
    use_case = PreviewNextActionableDate(SqlAlchemySubscriptionRepository(session))
    return _unwrap(await use_case.execute(subscription_id))


@router.post(
    "/{subscription_id}/cancel",
    response_model=SubscriptionStateResponseDTO,
    responses={**NOT_FOUND_RESPONSE, **INVALID_TRANSITION_RESPONSE},
)
async def cancel_subscription(
    subscription_id: int,
    today: Optional[date] = TodayQuery,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    minimum_notice: timedelta = Depends(get_cancellation_notice),
):
    """
    Cancel a subscription.

    When the next cycle is within the cancellation notice the subscription
    becomes `pending_cancellation` and `applied` is false. Check `state`
    in the response to tell the two outcomes apart.
    """
    use_case = CancelSubscription(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        minimum_notice=minimum_notice,
    )
    return _unwrap(await use_case.execute(subscription_id, _today(today, clock)))


@router.post(
    "/{subscription_id}/deactivate",
    response_model=DeactivateResponseDTO,
    responses=NOT_FOUND_RESPONSE,
)
async def deactivate_subscription(
    subscription_id: int,
    session: AsyncSession = Depends(get_session),
):
    """
    Deactivate a subscription whose installment allowance is used up.

    Returns `deactivated: false` (with status 200) when it cannot be deactivated.
    """
    use_case = DeactivateSubscription(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyInstallmentRepository(session),
    )
    return _unwrap(await use_case.execute(subscription_id))


@router.post(
    "/{subscription_id}/activate",
    response_model=SubscriptionStateResponseDTO,
    responses={**NOT_FOUND_RESPONSE, **INVALID_TRANSITION_RESPONSE},
)
async def activate_subscription(
    subscription_id: int,
    today: Optional[date] = TodayQuery,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    use_case = ActivateSubscription(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    return _unwrap(await use_case.execute(subscription_id, _today(today, clock)))


@router.post(
    "/{subscription_id}/past_due",
    response_model=SubscriptionStateResponseDTO,
    responses={**NOT_FOUND_RESPONSE, **INVALID_TRANSITION_RESPONSE},
)
async def mark_subscription_past_due(
    subscription_id: int,
    session: AsyncSession = Depends(get_session),
):
    use_case = MarkPastDue(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    return _unwrap(await use_case.execute(subscription_id))


@router.post(
    "/{subscription_id}/advance_actionable_date",
    response_model=ActionableDateResponseDTO,
    responses={**NOT_FOUND_RESPONSE, **INVALID_TRANSITION_RESPONSE},
)
async def advance_actionable_date(
    subscription_id: int,
    session: AsyncSession = Depends(get_session),
):
    """
    Advance the actionable date by one interval and persist it.
    """
    use_case = AdvanceActionableDate(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    return _unwrap(await use_case.execute(subscription_id))


@router.delete(
    "/{subscription_id}/actionable_date",
    response_model=ActionableDateResponseDTO,
    responses=NOT_FOUND_RESPONSE,
)
async def unset_actionable_date(
    subscription_id: int,
    session: AsyncSession = Depends(get_session),
):
    """
    Remove the subscription from the actionable pool without changing its state.
    """
    use_case = UnsetActionableDate(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    return _unwrap(await use_case.execute(subscription_id))
