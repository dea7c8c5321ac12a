"""Calendar access for the billing core."""

from datetime import date, timedelta
from typing import Protocol

from django.utils import timezone


def add_days(day: date, days: int) -> date:
    """Calendar-correct date arithmetic (month and year rollover)."""
    return day + timedelta(days=days)


class Clock(Protocol):
    def today(self) -> date: ...

    def add_days(self, day: date, days: int) -> date: ...


class SystemClock:
    """Today's date in the project's TIME_ZONE."""

    def today(self) -> date:
        return timezone.localdate()

    def add_days(self, day: date, days: int) -> date:
        return add_days(day, days)


class FixedClock:
    """A clock pinned to one date, advanced explicitly."""

    def __init__(self, current: date):
        self.current = current

    def today(self) -> date:
        return self.current

    def add_days(self, day: date, days: int) -> date:
        return add_days(day, days)

    def advance(self, days: int) -> date:
        self.current = add_days(self.current, days)
        return self.current
