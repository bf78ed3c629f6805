"""Clock sources for "today"."""
from datetime import date, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """The machine's local calendar day."""

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """A clock pinned to a given day; advance it by hand."""

    def __init__(self, day: date):
        self.day = day

    def today(self) -> date:
        return self.day

    def now(self) -> datetime:
        return datetime.combine(self.day, datetime.min.time())

    def advance(self, days: int = 1) -> date:
        self.day = self.day + timedelta(days=days)
        return self.day
