"""Scheduling writes: first schedule, review completion and mastery.

Each function runs inside a store transaction opened by the caller, so a
failure at any step leaves the theme and its review records untouched.
"""
from dataclasses import replace
from datetime import date, datetime

from loguru import logger

from revisor.classifier import classify, percentage, session_counts
from revisor.errors import ThemeNotFound, ValidationError
from revisor.models import (
    ReviewLogEntry, ReviewRecord, ScheduleKind, StudyMode, Theme, ThemeStatus, Tier,
)
from revisor.schedule import compute_next_date, mastered_next_date
from revisor.store import StoreSession

MASTERED_MIN_LEVEL = 5


def load_theme(session: StoreSession, theme_id: int) -> Theme:
    theme = session.get_theme(theme_id)
    if theme is None:
        raise ThemeNotFound(theme_id)
    return theme


def _move_pending(session: StoreSession, theme_id: int, scheduled_date: date) -> ReviewRecord:
    pending = session.pending_record(theme_id)
    if pending is None:
        return session.insert_record(ReviewRecord(id=None, theme_id=theme_id, scheduled_date=scheduled_date))
    return session.update_record(replace(pending, scheduled_date=scheduled_date))


def create_schedule(
    session: StoreSession,
    theme: Theme,
    study_date: date,
    first_session,
    mode: StudyMode,
) -> Theme:
    """Seed a new theme from its first study session using the first-schedule table."""
    if theme.progression_level > 0 or session.latest_log_entries(theme.id, limit=1):
        raise ValidationError(f"Theme {theme.id} is already scheduled")
    tier, accuracy = classify(mode, first_session)
    total, correct = session_counts(mode, first_session)
    next_date = compute_next_date(study_date, tier, 1, ScheduleKind.FIRST)
    updated = session.update_theme(replace(
        theme,
        difficulty_tier=tier,
        progression_level=1,
        questions_total=total,
        questions_correct=correct,
        retention_rate=accuracy,
        next_review_date=next_date,
        study_mode=mode,
        study_date=study_date,
        initial_tier=tier,
        initial_accuracy=accuracy,
    ))
    _move_pending(session, theme.id, next_date)
    logger.info(f"Scheduled theme {theme.id} ({tier.value}) for {next_date}")
    return updated


def complete_review(
    session: StoreSession,
    theme_id: int,
    completion_date: date,
    performance,
    mode: StudyMode,
    logged_at: datetime,
) -> Theme:
    """Close the pending review, fold the session into the theme and schedule the next one."""
    theme = load_theme(session, theme_id)
    tier, accuracy = classify(mode, performance)
    answered, correct = session_counts(mode, performance)

    pending = session.pending_record(theme_id)
    if pending is None:
        # an unscheduled review is still allowed
        pending = session.insert_record(ReviewRecord(id=None, theme_id=theme_id, scheduled_date=completion_date))
    closed = session.update_record(replace(
        pending, completed_date=completion_date, session_accuracy=accuracy, result_tier=tier,
    ))

    session.insert_log_entry(ReviewLogEntry(
        id=None,
        theme_id=theme_id,
        review_record_id=closed.id,
        study_mode=mode,
        questions_answered=answered,
        questions_correct=correct,
        session_accuracy=accuracy,
        result_tier=tier,
        completed_date=completion_date,
        logged_at=logged_at,
    ))

    questions_total = theme.questions_total + answered
    questions_correct = theme.questions_correct + correct
    if mode is StudyMode.SELF_EVALUATION:
        retention = accuracy
    else:
        retention = percentage(questions_correct, questions_total)
    level = theme.progression_level + 1
    next_date = compute_next_date(completion_date, tier, level, ScheduleKind.SUBSEQUENT)

    updated = session.update_theme(replace(
        theme,
        questions_total=questions_total,
        questions_correct=questions_correct,
        retention_rate=retention,
        progression_level=level,
        difficulty_tier=tier,
        last_review_date=completion_date,
        next_review_date=next_date,
    ))
    session.insert_record(ReviewRecord(id=None, theme_id=theme_id, scheduled_date=next_date))
    logger.info(
        f"Completed review for theme {theme_id}: {accuracy}% ({tier.value}), "
        f"level {level}, next {next_date}"
    )
    return updated


def mark_mastered(session: StoreSession, theme_id: int, completion_date: date) -> Theme:
    """Terminal shortcut: easy tier, far-future review, no log entry."""
    theme = load_theme(session, theme_id)
    next_date = mastered_next_date(completion_date)
    latest = session.latest_log_entries(theme_id, limit=1)
    updated = session.update_theme(replace(
        theme,
        difficulty_tier=Tier.EASY,
        progression_level=max(theme.progression_level, MASTERED_MIN_LEVEL),
        last_review_date=completion_date,
        next_review_date=next_date,
        status=ThemeStatus.MASTERED,
        mastered_on=completion_date,
        mastered_after_entry=latest[0].id if latest else 0,
    ))
    _move_pending(session, theme_id, next_date)
    logger.info(f"Theme {theme_id} mastered, next review {next_date}")
    return updated


def reschedule(session: StoreSession, theme_id: int, new_date: date) -> Theme:
    """Manually move a theme's next review."""
    theme = load_theme(session, theme_id)
    updated = session.update_theme(replace(theme, next_review_date=new_date))
    _move_pending(session, theme_id, new_date)
    logger.info(f"Theme {theme_id} rescheduled to {new_date}")
    return updated
