"""Difficulty classification of a study session."""
from revisor.errors import ValidationError
from revisor.models import QuestionResult, SelfEvaluation, StudyMode, Tier

EASY_THRESHOLD = 80
MEDIUM_THRESHOLD = 50

SELF_EVALUATION_SCORES = {
    SelfEvaluation.CONFIDENT: (100, Tier.EASY),
    SelfEvaluation.REASONABLE: (70, Tier.MEDIUM),
    SelfEvaluation.NEEDS_REVIEW: (30, Tier.HARD),
}


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up (2/3 -> 67); 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def tier_for_accuracy(accuracy: int) -> Tier:
    if accuracy >= EASY_THRESHOLD:
        return Tier.EASY
    elif accuracy >= MEDIUM_THRESHOLD:
        return Tier.MEDIUM
    return Tier.HARD


def validate_questions(total: int, correct: int) -> None:
    if total < 0 or correct < 0:
        raise ValidationError("Question counts cannot be negative")
    if correct > total:
        raise ValidationError(f"Correct answers ({correct}) exceed questions answered ({total})")


def as_study_mode(mode) -> StudyMode:
    try:
        return StudyMode(mode)
    except ValueError:
        raise ValidationError(f"Unknown study mode: {mode!r}") from None


def _as_self_evaluation(value) -> SelfEvaluation:
    if value is None:
        raise ValidationError("A self-evaluation must be selected")
    try:
        return SelfEvaluation(value)
    except ValueError:
        raise ValidationError(f"Unknown self-evaluation: {value!r}") from None


def classify(mode: StudyMode, performance) -> tuple[Tier, int]:
    """Map a session outcome to (tier, accuracy).

    Args:
        mode: How the session was measured.
        performance: A QuestionResult for quantitative sessions, or a
            SelfEvaluation (or its string value) for self-evaluated ones.

    Returns:
        Tuple of the difficulty tier and the session accuracy (0-100).
    """
    mode = as_study_mode(mode)
    if mode is StudyMode.QUANTITATIVE:
        if not isinstance(performance, QuestionResult):
            raise ValidationError("Quantitative sessions need a question count")
        validate_questions(performance.total, performance.correct)
        accuracy = percentage(performance.correct, performance.total)
        return tier_for_accuracy(accuracy), accuracy

    accuracy, tier = SELF_EVALUATION_SCORES[_as_self_evaluation(performance)]
    return tier, accuracy


def session_counts(mode: StudyMode, performance) -> tuple[int, int]:
    """Question counts a session adds to a theme; self-evaluation adds none."""
    if as_study_mode(mode) is StudyMode.QUANTITATIVE:
        return performance.total, performance.correct
    return 0, 0
