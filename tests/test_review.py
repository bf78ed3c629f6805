# tests/test_review.py
"""Theme creation, review completion and mastery through the kernel."""
from datetime import date

import pytest

from revisor.errors import ThemeNotFound, ValidationError
from revisor.models import QuestionResult, SelfEvaluation, StudyMode, Theme, ThemeStatus, Tier

Q = StudyMode.QUANTITATIVE
S = StudyMode.SELF_EVALUATION


def pending_records(store, theme_id):
    with store.session() as s:
        return [r for r in s.records_for_theme(theme_id) if r.is_pending]


def test_create_theme_schedules_first_review(kernel, store):
    theme = kernel.add_theme("Heart failure", date(2024, 1, 1), QuestionResult(10, 8), Q,
                             specialty="Cardiology", area="Clinical")
    assert theme.difficulty_tier is Tier.EASY
    assert theme.retention_rate == 80
    assert theme.progression_level == 1
    assert theme.questions_total == 10
    assert theme.questions_correct == 8
    assert theme.next_review_date == date(2024, 1, 8)
    assert theme.last_review_date is None
    pending = pending_records(store, theme.id)
    assert len(pending) == 1
    assert pending[0].scheduled_date == date(2024, 1, 8)


def test_create_schedule_for_existing_theme(kernel, store):
    with store.transaction() as tx:
        theme = tx.insert_theme(Theme(id=None, name="Sepsis"))
    tier, next_date = kernel.create_schedule(theme.id, "2024-01-01", QuestionResult(10, 6), Q)
    assert tier is Tier.MEDIUM
    assert next_date == date(2024, 1, 4)


def test_create_schedule_twice_rejected(kernel):
    theme = kernel.add_theme("Asthma", date(2024, 1, 1), QuestionResult(10, 8), Q)
    with pytest.raises(ValidationError):
        kernel.create_schedule(theme.id, date(2024, 1, 2), QuestionResult(10, 8), Q)


def test_add_theme_requires_name(kernel):
    with pytest.raises(ValidationError):
        kernel.add_theme("  ", date(2024, 1, 1), QuestionResult(10, 8), Q)
    assert kernel.list_themes() == []


def test_invalid_first_session_persists_nothing(kernel):
    with pytest.raises(ValidationError):
        kernel.add_theme("Asthma", date(2024, 1, 1), QuestionResult(5, 8), Q)
    assert kernel.list_themes() == []


def test_complete_review_updates_theme(kernel, clock, store):
    theme = kernel.add_theme("Heart failure", date(2024, 1, 1), QuestionResult(10, 8), Q)
    clock.day = date(2024, 1, 8)
    updated = kernel.complete_review(theme.id, date(2024, 1, 8), QuestionResult(5, 2), Q)
    assert updated.difficulty_tier is Tier.HARD
    assert updated.questions_total == 15
    assert updated.questions_correct == 10
    assert updated.retention_rate == 67
    assert updated.progression_level == 2
    assert updated.next_review_date == date(2024, 1, 10)
    assert updated.last_review_date == date(2024, 1, 8)

    with store.session() as s:
        records = s.records_for_theme(theme.id)
        history = s.log_entries(theme.id)
    closed = [r for r in records if not r.is_pending]
    pending = [r for r in records if r.is_pending]
    assert len(closed) == 1
    assert closed[0].completed_date == date(2024, 1, 8)
    assert closed[0].session_accuracy == 40
    assert closed[0].result_tier is Tier.HARD
    assert len(pending) == 1
    assert pending[0].scheduled_date == date(2024, 1, 10)
    assert len(history) == 1
    assert history[0].questions_answered == 5
    assert history[0].questions_correct == 2


def test_unscheduled_review_synthesizes_record(kernel, clock, store):
    theme = kernel.add_theme("Asthma", date(2024, 1, 1), QuestionResult(10, 8), Q)
    with store.transaction() as tx:
        tx.delete_record(tx.pending_record(theme.id).id)
    updated = kernel.complete_review(theme.id, date(2024, 1, 3), QuestionResult(10, 10), Q)
    assert updated.progression_level == 2
    with store.session() as s:
        records = s.records_for_theme(theme.id)
    assert [r.scheduled_date for r in records if not r.is_pending] == [date(2024, 1, 3)]
    assert len([r for r in records if r.is_pending]) == 1


def test_self_evaluation_sets_retention_directly(kernel):
    theme = kernel.add_theme("Stroke", date(2024, 1, 1), SelfEvaluation.REASONABLE, S)
    assert theme.difficulty_tier is Tier.MEDIUM
    assert theme.retention_rate == 70
    assert theme.questions_total == 0
    assert theme.next_review_date == date(2024, 1, 4)

    updated = kernel.complete_review(theme.id, date(2024, 1, 4), SelfEvaluation.NEEDS_REVIEW, S)
    assert updated.retention_rate == 30
    assert updated.questions_total == 0
    assert updated.questions_correct == 0
    assert updated.difficulty_tier is Tier.HARD
    assert updated.next_review_date == date(2024, 1, 6)


def test_tier_follows_latest_session(kernel):
    theme = kernel.add_theme("Stroke", date(2024, 1, 1), QuestionResult(10, 2), Q)
    assert theme.difficulty_tier is Tier.HARD
    updated = kernel.complete_review(theme.id, date(2024, 1, 2), QuestionResult(10, 10), Q)
    assert updated.difficulty_tier is Tier.EASY
    assert updated.next_review_date == date(2024, 1, 9)


def test_missing_self_evaluation_changes_nothing(kernel):
    theme = kernel.add_theme("Stroke", date(2024, 1, 1), SelfEvaluation.CONFIDENT, S)
    with pytest.raises(ValidationError):
        kernel.complete_review(theme.id, date(2024, 1, 8), None, S)
    assert kernel.get_theme(theme.id) == theme


def test_review_unknown_theme(kernel):
    with pytest.raises(ThemeNotFound):
        kernel.complete_review(999, date(2024, 1, 8), QuestionResult(5, 5), Q)


def test_mark_mastered(kernel, store):
    theme = kernel.add_theme("Anemia", date(2024, 1, 1), QuestionResult(10, 4), Q)
    mastered = kernel.mark_mastered(theme.id, date(2024, 1, 5))
    assert mastered.status is ThemeStatus.MASTERED
    assert mastered.difficulty_tier is Tier.EASY
    assert mastered.progression_level == 5
    assert mastered.last_review_date == date(2024, 1, 5)
    assert mastered.next_review_date == date(2024, 7, 3)
    assert mastered.questions_total == 10
    assert kernel.review_history(theme.id) == []
    pending = pending_records(store, theme.id)
    assert len(pending) == 1
    assert pending[0].scheduled_date == date(2024, 7, 3)


def test_mark_mastered_keeps_higher_level(kernel):
    theme = kernel.add_theme("Anemia", date(2024, 1, 1), QuestionResult(10, 10), Q)
    for day in range(2, 8):
        kernel.complete_review(theme.id, date(2024, 1, day), QuestionResult(10, 10), Q)
    assert kernel.mark_mastered(theme.id, date(2024, 1, 8)).progression_level == 7


def test_mark_mastered_defaults_to_today(kernel, clock):
    theme = kernel.add_theme("Anemia", date(2024, 1, 1), QuestionResult(10, 10), Q)
    clock.day = date(2024, 2, 1)
    assert kernel.mark_mastered(theme.id).last_review_date == date(2024, 2, 1)


def test_reschedule_moves_pending_record(kernel, store):
    theme = kernel.add_theme("Anemia", date(2024, 1, 1), QuestionResult(10, 10), Q)
    moved = kernel.reschedule(theme.id, "2024-01-20")
    assert moved.next_review_date == date(2024, 1, 20)
    pending = pending_records(store, theme.id)
    assert [r.scheduled_date for r in pending] == [date(2024, 1, 20)]
