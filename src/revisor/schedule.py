"""Next-review date calculation on plain calendar dates."""
from datetime import date, datetime, timedelta

from revisor.errors import ValidationError
from revisor.intervals import interval_for
from revisor.models import ScheduleKind, Tier

MASTERED_INTERVAL_DAYS = 180


def to_calendar_date(value) -> date:
    """Normalize a date-like value to the local calendar day it falls on.

    Aware datetimes, and ISO strings with an offset, are converted to local
    time first so a late-evening session never lands on the neighbouring day.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError(f"Not a calendar date: {value!r}") from None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Not a calendar date: {value!r}")


def compute_next_date(
    anchor_date,
    tier: Tier,
    progression_level: int,
    kind: ScheduleKind = ScheduleKind.SUBSEQUENT,
) -> date:
    """Return anchor + interval(tier, level).

    The result may be today or in the past when the anchor is an old,
    retroactively logged session; it is never bumped forward.
    """
    anchor = to_calendar_date(anchor_date)
    return anchor + timedelta(days=interval_for(tier, progression_level, kind))


def mastered_next_date(anchor_date) -> date:
    return to_calendar_date(anchor_date) + timedelta(days=MASTERED_INTERVAL_DAYS)
