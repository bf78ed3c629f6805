"""Same-day reversal of a theme's most recent review."""
from dataclasses import replace
from datetime import date
from typing import Optional

from loguru import logger

from revisor.classifier import percentage
from revisor.errors import NotReversible
from revisor.models import ReviewLogEntry, StudyMode, Theme, ThemeStatus, Tier
from revisor.review import load_theme
from revisor.store import StoreSession


def _restored_retention(theme: Theme, total: int, correct: int, previous: Optional[ReviewLogEntry]) -> int:
    # A self-evaluated session sets retention directly, so the value it
    # replaced cannot always be recomputed from the counters.
    if previous is not None:
        if previous.study_mode is StudyMode.SELF_EVALUATION:
            return previous.session_accuracy
        return percentage(correct, total)
    if theme.initial_accuracy is not None:
        return theme.initial_accuracy
    return percentage(correct, total)


def undo_last_review(session: StoreSession, theme_id: int, today: date) -> Theme:
    """Revert the latest completed review if it happened today.

    Only one step can be undone: the tier and last-review date are restored
    from the entry before it (or the theme's first session when there is
    none) and the theme becomes due today. Mastery itself is never undone,
    but a review logged after a theme was mastered is.
    """
    theme = load_theme(session, theme_id)
    entries = session.latest_log_entries(theme_id, limit=2)
    if not entries:
        raise NotReversible(f"Theme {theme_id} has no review to undo")
    last = entries[0]
    previous = entries[1] if len(entries) > 1 else None
    mastered = theme.status is ThemeStatus.MASTERED
    mastered_after = theme.mastered_after_entry or 0
    if mastered and mastered_after >= last.id:
        logger.warning(f"Refusing undo for theme {theme_id}: mastered after its last review")
        raise NotReversible(f"Theme {theme_id} was mastered after its last review; mastery cannot be undone")
    if last.completed_date != today:
        logger.warning(f"Refusing undo for theme {theme_id}: last review was {last.completed_date}")
        raise NotReversible(f"The last review of theme {theme_id} was not done today")

    total = max(0, theme.questions_total - last.questions_answered)
    correct = max(0, theme.questions_correct - last.questions_correct)
    if mastered and mastered_after == (previous.id if previous else 0):
        # mastered between the previous review and this one
        tier = Tier.EASY
        last_review_date = theme.mastered_on
    elif previous is not None:
        tier = previous.result_tier
        last_review_date = previous.completed_date
    else:
        tier = theme.initial_tier or Tier.EASY
        last_review_date = None

    updated = session.update_theme(replace(
        theme,
        questions_total=total,
        questions_correct=correct,
        retention_rate=_restored_retention(theme, total, correct, previous),
        difficulty_tier=tier,
        progression_level=max(0, theme.progression_level - 1),
        next_review_date=today,
        last_review_date=last_review_date,
    ))

    # drop the review scheduled by the undone completion before reopening
    pending = session.pending_record(theme_id)
    if pending is not None:
        session.delete_record(pending.id)
    closed = session.get_record(last.review_record_id)
    session.update_record(replace(closed, completed_date=None, session_accuracy=None, result_tier=None))
    session.delete_log_entry(last.id)

    logger.info(f"Undid review of theme {theme_id} from {last.completed_date}")
    return updated
