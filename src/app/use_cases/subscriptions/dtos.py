"""Data Transfer Objects for Subscription Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from typing import Optional, List
from pydantic import BaseModel, Field

from src.domain.interval import IntervalUnit
from src.domain.subscription_state import SubscriptionState


class LineItemCommandDTO(BaseModel):
    """Line item attached to a new subscription"""

    subscribable_id: str = Field(
        ...,
        min_length=1,
        description="Product variant being renewed"
    )

    quantity: int = Field(
        default=1,
        gt=0,
        description="Units delivered per installment"
    )

    max_installments: Optional[int] = Field(
        default=None,
        ge=0,
        description="Installment allowance (None = unlimited)"
    )


class CreateSubscriptionCommandDTO(BaseModel):
    """
    Command DTO for creating a subscription

    When actionable_date is omitted the first cycle is scheduled one
    interval after the creation date.
    """

    user_id: str = Field(
        ...,
        min_length=1,
        description="Owning user ID (required)"
    )

    interval_length: int = Field(
        ...,
        gt=0,
        description="Number of interval units between cycles"
    )

    interval_units: IntervalUnit = Field(
        ...,
        description="Interval unit (day, week, month, year)"
    )

    actionable_date: Optional[date] = Field(
        default=None,
        description="First processing date (defaults to today + interval)"
    )

    end_date: Optional[date] = Field(
        default=None,
        description="Last date the subscription may be processed on"
    )

    line_item: Optional[LineItemCommandDTO] = Field(
        default=None,
        description="Billable item renewed by the subscription"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_123",
                "interval_length": 1,
                "interval_units": "month",
                "actionable_date": "2024-02-01",
                "end_date": None,
                "line_item": {
                    "subscribable_id": "variant_42",
                    "quantity": 2,
                    "max_installments": 12
                }
            }
        }


class LineItemDTO(BaseModel):
    subscribable_id: str
    quantity: int
    max_installments: Optional[int] = None


class SubscriptionResponseDTO(BaseModel):
    """Full view of a subscription"""

    id: int = Field(..., description="Subscription ID")
    user_id: str = Field(..., description="Owning user ID")
    state: SubscriptionState = Field(..., description="Lifecycle state")
    actionable_date: Optional[date] = Field(default=None, description="Next processing date")
    interval_length: int = Field(..., description="Number of interval units")
    interval_units: IntervalUnit = Field(..., description="Interval unit")
    end_date: Optional[date] = Field(default=None, description="Last processable date")
    line_item: Optional[LineItemDTO] = Field(default=None, description="Renewed item")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    class Config:
        json_schema_extra = {
            "example": {
                "id": 1,
                "user_id": "user_123",
                "state": "active",
                "actionable_date": "2024-02-01",
                "interval_length": 1,
                "interval_units": "month",
                "end_date": None,
                "line_item": {"subscribable_id": "variant_42", "quantity": 2, "max_installments": 12},
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }


class SubscriptionStateResponseDTO(BaseModel):
    """
    Result of a state transition

    applied=False means a soft guard deferred or refused the transition;
    callers must read `state` rather than assume the requested outcome.
    """

    subscription_id: int = Field(..., description="Subscription ID")
    state: SubscriptionState = Field(..., description="State after the operation")
    actionable_date: Optional[date] = Field(default=None, description="Actionable date after the operation")
    applied: bool = Field(..., description="Whether the requested transition took effect")

    class Config:
        json_schema_extra = {
            "example": {
                "subscription_id": 1,
                "state": "pending_cancellation",
                "actionable_date": "2024-02-01",
                "applied": False
            }
        }


class DeactivateResponseDTO(BaseModel):
    subscription_id: int = Field(..., description="Subscription ID")
    deactivated: bool = Field(..., description="True if the subscription is now inactive")
    state: SubscriptionState = Field(..., description="State after the operation")


class ActionableDateResponseDTO(BaseModel):
    """Actionable date produced by advance/preview/unset"""

    subscription_id: int = Field(..., description="Subscription ID")
    actionable_date: Optional[date] = Field(
        default=None,
        description="New (or previewed) actionable date; None when cleared or past end_date"
    )


class ActionableSubscriptionsResponseDTO(BaseModel):
    as_of: date = Field(..., description="Date the selection was evaluated for")
    subscriptions: List[SubscriptionResponseDTO] = Field(default_factory=list)
    total: int = Field(..., description="Number of actionable subscriptions")


class ProcessSubscriptionResponseDTO(BaseModel):
    """Outcome of processing one actionable subscription"""

    subscription_id: int = Field(..., description="Subscription ID")
    installment_id: Optional[int] = Field(
        default=None, description="Installment recorded for the cycle (None when retired unbilled)"
    )
    state: SubscriptionState = Field(..., description="State after processing")
    actionable_date: Optional[date] = Field(default=None, description="Next actionable date")
    deactivated: bool = Field(..., description="True if the allowance ran out this cycle")


class ProcessingResultDTO(BaseModel):
    """Summary of one processor run"""

    as_of: date = Field(..., description="Date the run was evaluated for")
    total_actionable: int = Field(..., description="Subscriptions selected")
    processed: int = Field(..., description="Subscriptions processed successfully")
    deactivated: int = Field(..., description="Subscriptions deactivated this run")
    failed: int = Field(..., description="Subscriptions that failed processing")
    cancellations_resolved: int = Field(..., description="Pending cancellations completed")
    execution_time_ms: int = Field(..., description="Run duration in milliseconds")

    class Config:
        json_schema_extra = {
            "example": {
                "as_of": "2024-02-01",
                "total_actionable": 120,
                "processed": 118,
                "deactivated": 4,
                "failed": 2,
                "cancellations_resolved": 3,
                "execution_time_ms": 850
            }
        }
