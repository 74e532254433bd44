"""Subscription Domain Entities

Recurring subscription aggregate: the subscription row, its single line item
and its append-only installment history.
"""

from datetime import datetime, date
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Integer, String, Date, ForeignKey
from src.domain.base import BaseModel
from src.domain.interval import Interval, IntervalUnit
from src.domain.subscription_state import SubscriptionState, SubscriptionSnapshot

# SQLite only auto-increments INTEGER primary keys
IdType = BigInteger().with_variant(Integer, "sqlite")


class Subscription(BaseModel, table=True):
    """
    Subscription - Recurring billing schedule for one user

    Domain Rules:
    - Every subscription belongs to exactly one user
    - Created active with an initial actionable_date
    - state and actionable_date change only through the state machine
    - Never hard-deleted (canceled/inactive are end-of-life states)
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index('ix_subscriptions_user_id', 'user_id'),
        Index('ix_subscriptions_state_actionable_date', 'state', 'actionable_date'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique subscription identifier (auto-increment)"
    )

    user_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Owning user ID"
    )

    state: SubscriptionState = Field(
        default=SubscriptionState.ACTIVE,
        sa_column=Column(String(32), nullable=False, default=SubscriptionState.ACTIVE.value),
        description="Lifecycle state"
    )

    actionable_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Date on or after which the subscription is next processed"
    )

    interval_length: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Number of interval units between cycles"
    )

    interval_units: IntervalUnit = Field(
        default=IntervalUnit.MONTH,
        sa_column=Column(String(16), nullable=False, default=IntervalUnit.MONTH.value),
        description="Interval unit (day, week, month, year)"
    )

    end_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Last date the subscription may be processed on (None = ongoing)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Subscription creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    @property
    def interval(self) -> Interval:
        return Interval(length=self.interval_length, units=IntervalUnit(self.interval_units))

    def snapshot(
        self, line_item: Optional["LineItem"] = None, installment_count: int = 0
    ) -> SubscriptionSnapshot:
        """
        Freeze the aggregate for guard evaluation

        Args:
            line_item: The subscription's line item, if it has one
            installment_count: Number of installments recorded so far
        """
        return SubscriptionSnapshot(
            state=SubscriptionState(self.state),
            actionable_date=self.actionable_date,
            interval=self.interval,
            end_date=self.end_date,
            max_installments=line_item.max_installments if line_item else None,
            installment_count=installment_count,
        )


class LineItem(BaseModel, table=True):
    """
    LineItem - The billable item a subscription renews

    Owned 1:1 by a subscription. max_installments bounds how many times the
    subscription is processed (None = unlimited).
    """

    __tablename__ = "subscription_line_items"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    subscription_id: int = Field(
        sa_column=Column(IdType, ForeignKey("subscriptions.id"), nullable=False, unique=True),
        description="Owning subscription (one line item per subscription)"
    )

    subscribable_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Reference to the product variant being renewed"
    )

    quantity: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
    )

    max_installments: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, nullable=True),
        description="Installment allowance (None = unlimited)"
    )


class Installment(BaseModel, table=True):
    """Installment - One processed cycle of a subscription (append-only)"""

    __tablename__ = "subscription_installments"
    __table_args__ = (
        Index('ix_subscription_installments_subscription_id', 'subscription_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    subscription_id: int = Field(
        sa_column=Column(IdType, ForeignKey("subscriptions.id"), nullable=False),
    )

    actionable_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Cycle date the installment was created for"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
    )
