"""System Clock Implementation"""

from datetime import date, datetime
from src.app.services.clock import Clock


class SystemClock(Clock):
    """Clock backed by the host's UTC date"""

    def today(self) -> date:
        return datetime.utcnow().date()


class FixedClock(Clock):
    """Clock pinned to a given date (backfills, replays)"""

    def __init__(self, fixed_date: date):
        self.fixed_date = fixed_date

    def today(self) -> date:
        return self.fixed_date
