"""Progress dashboard scoring and statistics."""
from typing import Optional

from revisor.classifier import percentage
from revisor.models import DailyProgress, ReviewLogEntry, Theme, ThemeStatus, Tier


def get_retention_label(score: float) -> str:
    if score >= 80:
        return "STRONG"
    elif score >= 50:
        return "FAIR"
    return "WEAK"


def get_retention_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 50:
        return "dark_orange"
    return "red"


def daily_progress(due: list[Theme], reviewed: list[Theme]) -> DailyProgress:
    """Today's reviews done vs still due.

    A theme reviewed today is normally scheduled into the future, so the two
    lists are disjoint; ids in both count once, as completed.
    """
    done_ids = {t.id for t in reviewed}
    remaining = sum(1 for t in due if t.id not in done_ids)
    completed = len(done_ids)
    total = completed + remaining
    return DailyProgress(
        total=total,
        completed=completed,
        remaining=remaining,
        percentage=percentage(completed, total),
    )


def general_accuracy(themes: list[Theme]) -> Optional[int]:
    total = sum(t.questions_total for t in themes)
    if total == 0:
        return None
    return percentage(sum(t.questions_correct for t in themes), total)


def focus_themes(themes: list[Theme], limit: int = 5) -> list[Theme]:
    """Hard themes and those below the overall accuracy, hardest and weakest first."""
    target = general_accuracy(themes) or 0
    critical = [
        t for t in themes
        if t.difficulty_tier is Tier.HARD or (target > 0 and t.retention_rate < target)
    ]
    critical.sort(key=lambda t: (-t.difficulty_tier.weight, t.retention_rate, t.id))
    return critical[:limit]


def effort_by_area(themes: list[Theme]) -> list[dict]:
    effort: dict[str, int] = {}
    for t in themes:
        if t.area:
            effort[t.area] = effort.get(t.area, 0) + t.questions_total
    total = sum(effort.values())
    results = [
        {"area": area, "questions": questions, "percentage": percentage(questions, total)}
        for area, questions in effort.items()
    ]
    results.sort(key=lambda r: (-r["percentage"], r["area"]))
    return results


def retention_delta(theme: Theme, history: list[ReviewLogEntry]) -> Optional[int]:
    """Change in retention caused by the latest review (history newest first)."""
    if not history:
        return None
    last = history[0]
    prev_total = theme.questions_total - last.questions_answered
    prev_correct = theme.questions_correct - last.questions_correct
    if prev_total <= 0:
        return None
    return theme.retention_rate - percentage(prev_correct, prev_total)


def get_study_stats(themes: list[Theme]) -> dict:
    return {
        "themes": len(themes),
        "mastered": sum(1 for t in themes if t.status is ThemeStatus.MASTERED),
        "questions_answered": sum(t.questions_total for t in themes),
        "general_accuracy": general_accuracy(themes),
    }
