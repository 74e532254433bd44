"""Clock Service Interface

Source of "today" for time-dependent operations. Injected so schedules can
be evaluated for any date without patching global time.
"""

from abc import ABC, abstractmethod
from datetime import date


class Clock(ABC):

    @abstractmethod
    def today(self) -> date:
        """Current calendar date"""
        pass
