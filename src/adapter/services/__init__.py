from .unit_of_work import SqlAlchemyUnitOfWork
from .clock import SystemClock, FixedClock

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SystemClock",
    "FixedClock",
]
