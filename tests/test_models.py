# tests/test_models.py
from datetime import date

from revisor.models import (
    QuestionResult, ReviewRecord, StudyMode, Theme, ThemeStatus, Tier,
)


def test_theme_defaults():
    theme = Theme(id=None, name="Asthma")
    assert theme.difficulty_tier is Tier.EASY
    assert theme.progression_level == 0
    assert theme.questions_total == 0
    assert theme.study_mode is StudyMode.QUANTITATIVE
    assert theme.status is ThemeStatus.ACTIVE
    assert theme.next_review_date is None


def test_due_and_overdue():
    theme = Theme(id=1, name="Asthma", next_review_date=date(2024, 1, 8))
    assert not theme.is_due(date(2024, 1, 7))
    assert theme.is_due(date(2024, 1, 8))
    assert not theme.is_overdue(date(2024, 1, 8))
    assert theme.is_overdue(date(2024, 1, 9))


def test_unscheduled_theme_never_due():
    theme = Theme(id=1, name="Asthma")
    assert not theme.is_due(date(2099, 1, 1))
    assert not theme.is_overdue(date(2099, 1, 1))


def test_tier_weight():
    assert [t.weight for t in Tier] == [1, 2, 3]
    assert Tier("hard") is Tier.HARD


def test_record_pending():
    record = ReviewRecord(id=1, theme_id=1, scheduled_date=date(2024, 1, 8))
    assert record.is_pending
    record.completed_date = date(2024, 1, 8)
    assert not record.is_pending


def test_question_result_equality():
    result = QuestionResult(total=10, correct=8)
    assert result == QuestionResult(10, 8)
