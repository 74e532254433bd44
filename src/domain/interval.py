"""Billing Interval Calculator

Pure calendar arithmetic for computing the next actionable date.

Month-overflow convention: when the target month has fewer days than the
source day, the result is clamped to the last day of the target month.
    2024-01-31 + 1 month -> 2024-02-29
    2023-01-31 + 1 month -> 2023-02-28
    2024-02-29 + 1 year  -> 2025-02-28
"""

from calendar import monthrange
from datetime import date, timedelta
from enum import Enum

from pydantic import BaseModel, Field


class IntervalUnit(str, Enum):
    """Calendar units a subscription interval can be expressed in"""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class Interval(BaseModel):
    """
    Billing interval - `length` x `units`

    Immutable value object. A zero length is representable (it is what an
    unconfigured subscription carries) but cannot be used to advance dates.
    """

    length: int = Field(..., ge=0, description="Number of interval units")
    units: IntervalUnit = Field(..., description="Calendar unit")

    class Config:
        frozen = True

    @property
    def is_zero(self) -> bool:
        return self.length == 0

    def __str__(self) -> str:
        suffix = "" if self.length == 1 else "s"
        return f"{self.length} {self.units.value}{suffix}"


def add_months(current_date: date, months: int) -> date:
    """Add months to a date, clamping to the last day of the target month"""
    month = current_date.month - 1 + months
    year = current_date.year + month // 12
    month = month % 12 + 1
    _, last_day = monthrange(year, month)
    return current_date.replace(year=year, month=month, day=min(current_date.day, last_day))


def next_actionable_date(current_date: date, interval: Interval) -> date:
    """
    Compute current_date + interval

    Args:
        current_date: Date to advance from
        interval: Billing interval

    Returns:
        The advanced date (current_date itself for a zero-length interval)
    """
    if interval.units == IntervalUnit.DAY:
        return current_date + timedelta(days=interval.length)
    if interval.units == IntervalUnit.WEEK:
        return current_date + timedelta(weeks=interval.length)
    if interval.units == IntervalUnit.MONTH:
        return add_months(current_date, interval.length)
    return add_months(current_date, interval.length * 12)
