"""
Clock abstraction for "today"

Stage dates, default request dates and live maintenance status all read
the date from an injected Clock, never from the system date directly.
"""

from abc import ABC, abstractmethod
from datetime import date, timedelta
from flask import current_app, has_app_context

CLOCK_EXTENSION_KEY = "rigasset.clock"


class Clock(ABC):
    """Source of the current calendar date"""

    @abstractmethod
    def today(self) -> date:
        """Current calendar date"""


class SystemClock(Clock):

    def today(self) -> date:
        return date.today()


class FixedClock(Clock):
    """Clock pinned to a given date; ``advance`` moves it forward"""

    def __init__(self, today: date):
        self._today = today

    def today(self) -> date:
        return self._today

    def advance(self, days: int = 1) -> date:
        self._today = self._today + timedelta(days=days)
        return self._today

    def __repr__(self):
        return f'<FixedClock {self._today.isoformat()}>'


def get_clock() -> Clock:
    """Clock registered on the running app, or the system clock outside one"""
    if has_app_context():
        clock = current_app.extensions.get(CLOCK_EXTENSION_KEY)
        if clock is not None:
            return clock
    return SystemClock()
