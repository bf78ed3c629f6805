"""
Revision kernel: the operations collaborators call to schedule and review themes.

Writes to one theme are serialized by a per-theme lock and run inside a
single store transaction; reads take no lock.
"""
from datetime import date, timedelta
from typing import Optional

from loguru import logger

from revisor import ledger, load, review, undo
from revisor.classifier import as_study_mode, classify
from revisor.clock import Clock
from revisor.config import Settings, get_settings
from revisor.dashboard import daily_progress
from revisor.errors import ValidationError
from revisor.locks import ThemeLocks
from revisor.models import DailyProgress, LoadSignal, ReviewLogEntry, StudyMode, Theme, Tier
from revisor.schedule import to_calendar_date
from revisor.store import SqliteStore


class RevisionKernel:
    def __init__(self, store: SqliteStore, clock: Clock, settings: Optional[Settings] = None):
        self.store = store
        self.clock = clock
        self.settings = settings or get_settings()
        self.locks = ThemeLocks(self.settings.lock_timeout_seconds)

    def _validate(self, mode, performance) -> StudyMode:
        mode = as_study_mode(mode)
        classify(mode, performance)
        return mode

    # Writes

    def add_theme(
        self,
        name: str,
        study_date,
        first_session,
        mode=StudyMode.QUANTITATIVE,
        specialty: str = "",
        area: str = "",
    ) -> Theme:
        """Insert a theme and schedule its first review in one transaction."""
        if not name or not name.strip():
            raise ValidationError("Theme name is required")
        mode = self._validate(mode, first_session)
        study_date = to_calendar_date(study_date)
        with self.store.transaction() as tx:
            theme = tx.insert_theme(Theme(
                id=None, name=name.strip(), specialty=specialty, area=area,
                study_mode=mode, created_at=self.clock.now(),
            ))
            return review.create_schedule(tx, theme, study_date, first_session, mode)

    def create_schedule(self, theme_id: int, study_date, first_session, mode) -> tuple[Tier, date]:
        mode = self._validate(mode, first_session)
        study_date = to_calendar_date(study_date)
        with self.locks.hold(theme_id), self.store.transaction() as tx:
            theme = review.load_theme(tx, theme_id)
            updated = review.create_schedule(tx, theme, study_date, first_session, mode)
        return updated.difficulty_tier, updated.next_review_date

    def complete_review(self, theme_id: int, completion_date, performance, mode) -> Theme:
        mode = self._validate(mode, performance)
        completion_date = to_calendar_date(completion_date)
        with self.locks.hold(theme_id), self.store.transaction() as tx:
            return review.complete_review(
                tx, theme_id, completion_date, performance, mode, logged_at=self.clock.now(),
            )

    def undo_last_review(self, theme_id: int) -> Theme:
        with self.locks.hold(theme_id), self.store.transaction() as tx:
            return undo.undo_last_review(tx, theme_id, self.clock.today())

    def mark_mastered(self, theme_id: int, completion_date=None) -> Theme:
        completion_date = to_calendar_date(completion_date or self.clock.today())
        with self.locks.hold(theme_id), self.store.transaction() as tx:
            return review.mark_mastered(tx, theme_id, completion_date)

    def reschedule(self, theme_id: int, new_date) -> Theme:
        new_date = to_calendar_date(new_date)
        with self.locks.hold(theme_id), self.store.transaction() as tx:
            return review.reschedule(tx, theme_id, new_date)

    # Reads

    def get_theme(self, theme_id: int) -> Theme:
        with self.store.session() as s:
            return review.load_theme(s, theme_id)

    def list_themes(self) -> list[Theme]:
        with self.store.session() as s:
            return s.all_themes()

    def list_due(self, as_of=None) -> list[Theme]:
        as_of = to_calendar_date(as_of or self.clock.today())
        with self.store.session() as s:
            themes = ledger.due_on_or_before(s, as_of)
        logger.debug(f"{len(themes)} themes due on or before {as_of}")
        return themes

    def list_due_exactly(self, day) -> list[Theme]:
        day = to_calendar_date(day)
        with self.store.session() as s:
            return ledger.due_exactly(s, day)

    def list_due_tomorrow(self, as_of=None) -> list[Theme]:
        as_of = to_calendar_date(as_of or self.clock.today())
        return self.list_due_exactly(as_of + timedelta(days=1))

    def list_reviewed_on(self, day=None) -> list[Theme]:
        day = to_calendar_date(day or self.clock.today())
        with self.store.session() as s:
            return ledger.reviewed_on(s, day)

    def daily_progress(self, as_of=None) -> DailyProgress:
        as_of = to_calendar_date(as_of or self.clock.today())
        with self.store.session() as s:
            due = ledger.due_on_or_before(s, as_of)
            reviewed = ledger.reviewed_on(s, as_of)
        return daily_progress(due, reviewed)

    def review_history(self, theme_id: int) -> list[ReviewLogEntry]:
        with self.store.session() as s:
            review.load_theme(s, theme_id)
            return s.log_entries(theme_id)

    def estimate_daily_load(self, as_of=None, weekly_available_days: Optional[int] = None) -> LoadSignal:
        if weekly_available_days is None:
            weekly_available_days = self.settings.weekly_available_days
        return load.estimate(self.list_due(as_of), weekly_available_days)
