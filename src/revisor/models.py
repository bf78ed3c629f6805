"""Data classes and enums for the revision domain model."""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Tier(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def weight(self) -> int:
        return TIER_WEIGHTS[self]


# Hard items weigh the most; used both for due-list tiebreaks and daily load.
TIER_WEIGHTS = {Tier.EASY: 1, Tier.MEDIUM: 2, Tier.HARD: 3}


class StudyMode(str, Enum):
    QUANTITATIVE = "quantitative"
    SELF_EVALUATION = "self_evaluation"


class SelfEvaluation(str, Enum):
    CONFIDENT = "confident"
    REASONABLE = "reasonable"
    NEEDS_REVIEW = "needs_review"


class ThemeStatus(str, Enum):
    ACTIVE = "active"
    MASTERED = "mastered"


class ScheduleKind(str, Enum):
    FIRST = "first"
    SUBSEQUENT = "subsequent"


class LoadLabel(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class QuestionResult:
    total: int
    correct: int


@dataclass
class Theme:
    id: Optional[int]
    name: str
    specialty: str = ""
    area: str = ""
    difficulty_tier: Tier = Tier.EASY
    progression_level: int = 0
    questions_total: int = 0
    questions_correct: int = 0
    retention_rate: int = 0
    last_review_date: Optional[date] = None
    next_review_date: Optional[date] = None
    study_mode: StudyMode = StudyMode.QUANTITATIVE
    status: ThemeStatus = ThemeStatus.ACTIVE
    study_date: Optional[date] = None
    initial_tier: Optional[Tier] = None
    initial_accuracy: Optional[int] = None
    mastered_on: Optional[date] = None
    # id of the latest log entry when the theme was mastered (0 if none)
    mastered_after_entry: Optional[int] = None
    created_at: Optional[datetime] = None
    version: int = 0

    def is_overdue(self, as_of: date) -> bool:
        return self.next_review_date is not None and self.next_review_date < as_of

    def is_due(self, as_of: date) -> bool:
        return self.next_review_date is not None and self.next_review_date <= as_of


@dataclass
class ReviewRecord:
    id: Optional[int]
    theme_id: int
    scheduled_date: date
    completed_date: Optional[date] = None
    session_accuracy: Optional[int] = None
    result_tier: Optional[Tier] = None

    @property
    def is_pending(self) -> bool:
        return self.completed_date is None


@dataclass(frozen=True)
class ReviewLogEntry:
    id: Optional[int]
    theme_id: int
    review_record_id: int
    study_mode: StudyMode
    questions_answered: int
    questions_correct: int
    session_accuracy: int
    result_tier: Tier
    completed_date: date
    logged_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class LoadSignal:
    weight: int
    capacity: int
    percentage: int
    label: LoadLabel


@dataclass(frozen=True)
class DailyProgress:
    total: int
    completed: int
    remaining: int
    percentage: int
