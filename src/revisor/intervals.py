"""Fixed interval tables keyed by tier and progression level."""
from revisor.errors import ValidationError
from revisor.models import ScheduleKind, Tier

# Days until the first review after a theme is added.
FIRST_SCHEDULE = {
    Tier.EASY: (7, 30, 90),
    Tier.MEDIUM: (3, 14, 45),
    Tier.HARD: (1, 7, 21),
}

# Days until the next review after a completed review.
SUBSEQUENT_SCHEDULE = {
    Tier.EASY: (1, 7, 30, 90, 180),
    Tier.MEDIUM: (1, 5, 15, 45, 90),
    Tier.HARD: (1, 2, 5, 10, 10),
}

TABLES = {
    ScheduleKind.FIRST: FIRST_SCHEDULE,
    ScheduleKind.SUBSEQUENT: SUBSEQUENT_SCHEDULE,
}


def interval_for(tier: Tier, progression_level: int, kind: ScheduleKind = ScheduleKind.SUBSEQUENT) -> int:
    """Interval in days for the level just reached (1-based).

    Levels past the end of a tier's table plateau at its last entry.
    """
    if progression_level < 0:
        raise ValidationError(f"Progression level cannot be negative: {progression_level}")
    intervals = TABLES[ScheduleKind(kind)][Tier(tier)]
    index = max(0, min(progression_level - 1, len(intervals) - 1))
    return intervals[index]
