# tests/test_load.py
import pytest

from revisor.errors import ValidationError
from revisor.load import estimate, get_load_color, get_load_label, tier_weight
from revisor.models import LoadLabel, Theme, Tier


def make(tier, theme_id=1):
    return Theme(id=theme_id, name=f"t{theme_id}", difficulty_tier=tier)


def test_two_hard_one_medium_is_high():
    themes = [make(Tier.HARD, 1), make(Tier.HARD, 2), make(Tier.MEDIUM, 3)]
    signal = estimate(themes, 5)
    assert signal.weight == 8
    assert signal.capacity == 15
    assert signal.percentage == 53
    assert signal.label is LoadLabel.HIGH


def test_nothing_due():
    signal = estimate([], 5)
    assert signal.weight == 0
    assert signal.percentage == 0
    assert signal.label is LoadLabel.NONE


def test_percentage_capped_at_100():
    themes = [make(Tier.HARD, i) for i in range(10)]
    assert estimate(themes, 1).percentage == 100


def test_zero_capacity():
    assert estimate([make(Tier.EASY)], 0).percentage == 100
    assert estimate([], 0).percentage == 0


def test_labels():
    assert get_load_label(0) is LoadLabel.NONE
    assert get_load_label(3) is LoadLabel.LOW
    assert get_load_label(4) is LoadLabel.MEDIUM
    assert get_load_label(6) is LoadLabel.MEDIUM
    assert get_load_label(7) is LoadLabel.HIGH


def test_tier_weights():
    assert tier_weight(Tier.EASY) == 1
    assert tier_weight(Tier.MEDIUM) == 2
    assert tier_weight(Tier.HARD) == 3
    assert tier_weight(None) == 3


def test_load_color():
    assert get_load_color(LoadLabel.HIGH) == "red"
    assert get_load_color(LoadLabel.LOW) == "green"


def test_negative_days_rejected():
    with pytest.raises(ValidationError):
        estimate([], -1)
