"""Request schemas for Subscription API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from src.domain.interval import IntervalUnit


class LineItemRequestSchema(BaseModel):
    subscribable_id: str = Field(
        ...,
        min_length=1,
        description="Product variant being renewed (required, non-empty)"
    )

    quantity: int = Field(
        default=1,
        gt=0,
        description="Units per installment (must be > 0)"
    )

    max_installments: Optional[int] = Field(
        default=None,
        ge=0,
        description="Installment allowance (None = unlimited)"
    )


class CreateSubscriptionRequestSchema(BaseModel):
    """
    Request schema for creating a subscription

    Used for POST /subscriptions endpoint.
    """

    user_id: str = Field(
        ...,
        min_length=1,
        description="Owning user ID (required, non-empty)"
    )

    interval_length: int = Field(
        ...,
        gt=0,
        description="Number of interval units between cycles (must be > 0)"
    )

    interval_units: IntervalUnit = Field(
        ...,
        description="Interval unit: day, week, month or year"
    )

    actionable_date: Optional[date] = Field(
        default=None,
        description="First processing date (defaults to today + interval)"
    )

    end_date: Optional[date] = Field(
        default=None,
        description="Last processable date (None = ongoing)"
    )

    line_item: Optional[LineItemRequestSchema] = Field(
        default=None,
        description="Billable item renewed by the subscription"
    )

    @model_validator(mode="after")
    def validate_end_date(self):
        """end_date cannot precede the first actionable date"""
        if self.end_date and self.actionable_date and self.end_date < self.actionable_date:
            raise ValueError("end_date must be on or after actionable_date")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_123",
                "interval_length": 1,
                "interval_units": "month",
                "actionable_date": "2024-02-01",
                "line_item": {
                    "subscribable_id": "variant_42",
                    "quantity": 2,
                    "max_installments": 12
                }
            }
        }
