# tests/test_schedule.py
from datetime import date, datetime, timedelta, timezone

import pytest

from revisor.errors import ValidationError
from revisor.models import ScheduleKind, Tier
from revisor.schedule import compute_next_date, mastered_next_date, to_calendar_date


def test_first_schedule_from_study_date():
    assert compute_next_date(date(2024, 1, 1), Tier.EASY, 1, ScheduleKind.FIRST) == date(2024, 1, 8)


def test_subsequent_schedule_crosses_month_end():
    assert compute_next_date(date(2024, 1, 31), Tier.MEDIUM, 2) == date(2024, 2, 5)


def test_leap_day():
    assert compute_next_date(date(2024, 2, 28), Tier.HARD, 1) == date(2024, 2, 29)


def test_no_floor_to_tomorrow():
    year_ago = date.today() - timedelta(days=365)
    next_date = compute_next_date(year_ago, Tier.HARD, 1, ScheduleKind.FIRST)
    assert next_date < date.today()


def test_iso_string_anchor():
    assert to_calendar_date("2024-03-10") == date(2024, 3, 10)
    assert to_calendar_date("2024-03-10T23:30:00") == date(2024, 3, 10)


def test_naive_datetime_keeps_its_day():
    assert to_calendar_date(datetime(2024, 3, 10, 23, 59)) == date(2024, 3, 10)


def test_aware_datetime_uses_local_day():
    moment = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
    assert to_calendar_date(moment) == moment.astimezone().date()


def test_iso_string_with_offset_uses_local_day():
    moment = datetime(2024, 3, 10, 23, 30, tzinfo=timezone.utc)
    assert to_calendar_date("2024-03-10T23:30:00+00:00") == moment.astimezone().date()


@pytest.mark.parametrize("value", ["10/03/2024", "2024-01-08garbage", "2024-01-08 junk", "", 20240310, None])
def test_rejects_non_dates(value):
    with pytest.raises(ValidationError):
        to_calendar_date(value)


def test_mastered_next_date():
    assert mastered_next_date(date(2024, 1, 1)) == date(2024, 6, 29)
