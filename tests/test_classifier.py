# tests/test_classifier.py
import pytest

from revisor.classifier import classify, percentage, session_counts, tier_for_accuracy
from revisor.errors import ValidationError
from revisor.models import QuestionResult, SelfEvaluation, StudyMode, Tier

Q = StudyMode.QUANTITATIVE
S = StudyMode.SELF_EVALUATION


def test_tier_boundaries():
    assert classify(Q, QuestionResult(100, 80)) == (Tier.EASY, 80)
    assert classify(Q, QuestionResult(100, 79)) == (Tier.MEDIUM, 79)
    assert classify(Q, QuestionResult(100, 50)) == (Tier.MEDIUM, 50)
    assert classify(Q, QuestionResult(100, 49)) == (Tier.HARD, 49)


def test_every_accuracy_maps_to_one_tier():
    for correct in range(101):
        tier, accuracy = classify(Q, QuestionResult(100, correct))
        assert accuracy == correct
        assert tier is tier_for_accuracy(correct)


def test_zero_questions_is_hard():
    assert classify(Q, QuestionResult(0, 0)) == (Tier.HARD, 0)


def test_accuracy_rounds_half_up():
    assert classify(Q, QuestionResult(3, 2))[1] == 67
    assert classify(Q, QuestionResult(8, 1))[1] == 13
    assert percentage(101, 200) == 51
    assert percentage(5, 0) == 0


def test_self_evaluation_mapping():
    assert classify(S, SelfEvaluation.CONFIDENT) == (Tier.EASY, 100)
    assert classify(S, SelfEvaluation.REASONABLE) == (Tier.MEDIUM, 70)
    assert classify(S, SelfEvaluation.NEEDS_REVIEW) == (Tier.HARD, 30)


def test_self_evaluation_accepts_string_value():
    assert classify("self_evaluation", "reasonable") == (Tier.MEDIUM, 70)


@pytest.mark.parametrize("performance", [None, "great", ""])
def test_self_evaluation_requires_valid_selection(performance):
    with pytest.raises(ValidationError):
        classify(S, performance)


@pytest.mark.parametrize("total,correct", [(-1, 0), (5, -1), (5, 6)])
def test_invalid_question_counts(total, correct):
    with pytest.raises(ValidationError):
        classify(Q, QuestionResult(total, correct))


def test_unknown_mode_rejected():
    with pytest.raises(ValidationError):
        classify("flashcards", QuestionResult(10, 5))


def test_quantitative_needs_question_result():
    with pytest.raises(ValidationError):
        classify(Q, SelfEvaluation.CONFIDENT)


def test_session_counts():
    assert session_counts(Q, QuestionResult(10, 7)) == (10, 7)
    assert session_counts(S, SelfEvaluation.CONFIDENT) == (0, 0)
