"""Daily load estimation over the themes due today."""
from typing import Iterable

from revisor.classifier import percentage
from revisor.errors import ValidationError
from revisor.models import TIER_WEIGHTS, LoadLabel, LoadSignal, Theme

REVIEWS_PER_AVAILABLE_DAY = 3
UNKNOWN_TIER_WEIGHT = 3


def tier_weight(tier) -> int:
    return TIER_WEIGHTS.get(tier, UNKNOWN_TIER_WEIGHT)


def get_load_label(weight: int) -> LoadLabel:
    if weight == 0:
        return LoadLabel.NONE
    elif weight < 4:
        return LoadLabel.LOW
    elif weight < 7:
        return LoadLabel.MEDIUM
    return LoadLabel.HIGH


def get_load_color(label: LoadLabel) -> str:
    if label is LoadLabel.HIGH:
        return "red"
    elif label is LoadLabel.MEDIUM:
        return "dark_orange"
    return "green"


def estimate(due_themes: Iterable[Theme], weekly_available_days: int) -> LoadSignal:
    if weekly_available_days < 0:
        raise ValidationError("Weekly available days cannot be negative")
    weight = sum(tier_weight(t.difficulty_tier) for t in due_themes)
    capacity = weekly_available_days * REVIEWS_PER_AVAILABLE_DAY
    if capacity == 0:
        pct = 100 if weight else 0
    else:
        pct = min(100, percentage(weight, capacity))
    return LoadSignal(weight=weight, capacity=capacity, percentage=pct, label=get_load_label(weight))
