"""SQLite-backed record store for themes, review records and the review log.

All writes happen inside ``SqliteStore.transaction()``: the block either
commits as a whole or is rolled back, so callers never observe a half-applied
review. SQLite failures are translated to kernel error kinds at this boundary.
"""
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator, Optional

from loguru import logger

from revisor.db import DEFAULT_DB_PATH, get_connection, init_db
from revisor.errors import ConcurrentModification, StorageUnavailable, ValidationError
from revisor.models import (
    ReviewLogEntry, ReviewRecord, StudyMode, Theme, ThemeStatus, Tier,
)


# sqlite names the columns of the one-pending-review unique index
PENDING_CONFLICT = "UNIQUE constraint failed: review_records.theme_id"


def _date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _theme_from_row(row: sqlite3.Row) -> Theme:
    return Theme(
        id=row["id"],
        name=row["name"],
        specialty=row["specialty"] or "",
        area=row["area"] or "",
        difficulty_tier=Tier(row["difficulty_tier"]),
        progression_level=row["progression_level"],
        questions_total=row["questions_total"],
        questions_correct=row["questions_correct"],
        retention_rate=row["retention_rate"],
        last_review_date=_date(row["last_review_date"]),
        next_review_date=_date(row["next_review_date"]),
        study_mode=StudyMode(row["study_mode"]),
        status=ThemeStatus(row["status"]),
        study_date=_date(row["study_date"]),
        initial_tier=Tier(row["initial_tier"]) if row["initial_tier"] else None,
        initial_accuracy=row["initial_accuracy"],
        mastered_on=_date(row["mastered_on"]),
        mastered_after_entry=row["mastered_after_entry"],
        created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
        version=row["version"],
    )


def _record_from_row(row: sqlite3.Row) -> ReviewRecord:
    return ReviewRecord(
        id=row["id"],
        theme_id=row["theme_id"],
        scheduled_date=_date(row["scheduled_date"]),
        completed_date=_date(row["completed_date"]),
        session_accuracy=row["session_accuracy"],
        result_tier=Tier(row["result_tier"]) if row["result_tier"] else None,
    )


def _log_entry_from_row(row: sqlite3.Row) -> ReviewLogEntry:
    return ReviewLogEntry(
        id=row["id"],
        theme_id=row["theme_id"],
        review_record_id=row["review_record_id"],
        study_mode=StudyMode(row["study_mode"]),
        questions_answered=row["questions_answered"],
        questions_correct=row["questions_correct"],
        session_accuracy=row["session_accuracy"],
        result_tier=Tier(row["result_tier"]),
        completed_date=_date(row["completed_date"]),
        logged_at=datetime.fromisoformat(row["logged_at"]),
    )


def _theme_params(theme: Theme) -> tuple:
    return (
        theme.name, theme.specialty, theme.area, theme.difficulty_tier.value,
        theme.progression_level, theme.questions_total, theme.questions_correct,
        theme.retention_rate, _iso(theme.last_review_date), _iso(theme.next_review_date),
        theme.study_mode.value, theme.status.value, _iso(theme.study_date),
        theme.initial_tier.value if theme.initial_tier else None, theme.initial_accuracy,
        _iso(theme.mastered_on), theme.mastered_after_entry,
    )


class StoreSession:
    """Queries and writes against one open connection."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # Themes

    def get_theme(self, theme_id: int) -> Optional[Theme]:
        row = self.conn.execute("SELECT * FROM themes WHERE id = ?", (theme_id,)).fetchone()
        return _theme_from_row(row) if row else None

    def insert_theme(self, theme: Theme) -> Theme:
        created_at = theme.created_at or datetime.now()
        cursor = self.conn.execute(
            """INSERT INTO themes (
                name, specialty, area, difficulty_tier, progression_level,
                questions_total, questions_correct, retention_rate,
                last_review_date, next_review_date, study_mode, status,
                study_date, initial_tier, initial_accuracy, mastered_on,
                mastered_after_entry, created_at, version
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0)""",
            _theme_params(theme) + (created_at.isoformat(),),
        )
        return self.get_theme(cursor.lastrowid)

    def update_theme(self, theme: Theme) -> Theme:
        """Write the theme back if nobody else changed it since it was read."""
        cursor = self.conn.execute(
            """UPDATE themes SET
                name=?, specialty=?, area=?, difficulty_tier=?, progression_level=?,
                questions_total=?, questions_correct=?, retention_rate=?,
                last_review_date=?, next_review_date=?, study_mode=?, status=?,
                study_date=?, initial_tier=?, initial_accuracy=?, mastered_on=?,
                mastered_after_entry=?, version=version + 1
            WHERE id=? AND version=?""",
            _theme_params(theme) + (theme.id, theme.version),
        )
        if cursor.rowcount == 0:
            raise ConcurrentModification(f"Theme {theme.id} was modified by another writer")
        return self.get_theme(theme.id)

    def all_themes(self) -> list[Theme]:
        rows = self.conn.execute("SELECT * FROM themes ORDER BY id").fetchall()
        return [_theme_from_row(r) for r in rows]

    def themes_due_on_or_before(self, day: date) -> list[Theme]:
        rows = self.conn.execute(
            """SELECT * FROM themes
            WHERE next_review_date IS NOT NULL AND next_review_date <= ?
            ORDER BY next_review_date ASC, id ASC""",
            (day.isoformat(),),
        ).fetchall()
        return [_theme_from_row(r) for r in rows]

    def themes_due_exactly(self, day: date) -> list[Theme]:
        rows = self.conn.execute(
            "SELECT * FROM themes WHERE next_review_date = ? ORDER BY id ASC",
            (day.isoformat(),),
        ).fetchall()
        return [_theme_from_row(r) for r in rows]

    def themes_reviewed_on(self, day: date) -> list[Theme]:
        rows = self.conn.execute(
            """SELECT * FROM themes WHERE id IN (
                SELECT theme_id FROM review_records WHERE completed_date = ?
            ) ORDER BY id ASC""",
            (day.isoformat(),),
        ).fetchall()
        return [_theme_from_row(r) for r in rows]

    # Review records

    def get_record(self, record_id: int) -> Optional[ReviewRecord]:
        row = self.conn.execute("SELECT * FROM review_records WHERE id = ?", (record_id,)).fetchone()
        return _record_from_row(row) if row else None

    def pending_record(self, theme_id: int) -> Optional[ReviewRecord]:
        row = self.conn.execute(
            "SELECT * FROM review_records WHERE theme_id = ? AND completed_date IS NULL",
            (theme_id,),
        ).fetchone()
        return _record_from_row(row) if row else None

    def records_for_theme(self, theme_id: int) -> list[ReviewRecord]:
        rows = self.conn.execute(
            "SELECT * FROM review_records WHERE theme_id = ? ORDER BY scheduled_date, id",
            (theme_id,),
        ).fetchall()
        return [_record_from_row(r) for r in rows]

    def insert_record(self, record: ReviewRecord) -> ReviewRecord:
        cursor = self.conn.execute(
            """INSERT INTO review_records
            (theme_id, scheduled_date, completed_date, session_accuracy, result_tier)
            VALUES (?, ?, ?, ?, ?)""",
            (
                record.theme_id, _iso(record.scheduled_date), _iso(record.completed_date),
                record.session_accuracy, record.result_tier.value if record.result_tier else None,
            ),
        )
        return self.get_record(cursor.lastrowid)

    def update_record(self, record: ReviewRecord) -> ReviewRecord:
        self.conn.execute(
            """UPDATE review_records SET scheduled_date=?, completed_date=?,
            session_accuracy=?, result_tier=? WHERE id=?""",
            (
                _iso(record.scheduled_date), _iso(record.completed_date), record.session_accuracy,
                record.result_tier.value if record.result_tier else None, record.id,
            ),
        )
        return self.get_record(record.id)

    def delete_record(self, record_id: int) -> None:
        self.conn.execute("DELETE FROM review_records WHERE id = ?", (record_id,))

    # Review log

    def insert_log_entry(self, entry: ReviewLogEntry) -> ReviewLogEntry:
        cursor = self.conn.execute(
            """INSERT INTO review_log (
                theme_id, review_record_id, study_mode, questions_answered,
                questions_correct, session_accuracy, result_tier, completed_date, logged_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                entry.theme_id, entry.review_record_id, entry.study_mode.value,
                entry.questions_answered, entry.questions_correct, entry.session_accuracy,
                entry.result_tier.value, entry.completed_date.isoformat(), entry.logged_at.isoformat(),
            ),
        )
        row = self.conn.execute("SELECT * FROM review_log WHERE id = ?", (cursor.lastrowid,)).fetchone()
        return _log_entry_from_row(row)

    def latest_log_entries(self, theme_id: int, limit: int = 2) -> list[ReviewLogEntry]:
        """Most recent entries first."""
        rows = self.conn.execute(
            "SELECT * FROM review_log WHERE theme_id = ? ORDER BY id DESC LIMIT ?",
            (theme_id, limit),
        ).fetchall()
        return [_log_entry_from_row(r) for r in rows]

    def log_entries(self, theme_id: int) -> list[ReviewLogEntry]:
        rows = self.conn.execute(
            "SELECT * FROM review_log WHERE theme_id = ? ORDER BY id DESC", (theme_id,)
        ).fetchall()
        return [_log_entry_from_row(r) for r in rows]

    def delete_log_entry(self, entry_id: int) -> None:
        self.conn.execute("DELETE FROM review_log WHERE id = ?", (entry_id,))


class SqliteStore:
    def __init__(self, db_path: str = DEFAULT_DB_PATH, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout
        try:
            init_db(db_path)
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Could not initialize {db_path}: {e}")
            raise StorageUnavailable(str(e)) from e

    def _connect(self) -> sqlite3.Connection:
        try:
            return get_connection(self.db_path, timeout=self.timeout)
        except sqlite3.Error as e:
            logger.error(f"Could not open {self.db_path}: {e}")
            raise StorageUnavailable(str(e)) from e

    @contextmanager
    def transaction(self) -> Iterator[StoreSession]:
        """Run a block of writes atomically: commit on success, roll back on any error."""
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield StoreSession(conn)
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            if PENDING_CONFLICT in str(e):
                logger.warning(f"Pending review conflict, transaction rolled back: {e}")
                raise ConcurrentModification(str(e)) from e
            logger.error(f"Constraint violation, transaction rolled back: {e}")
            raise ValidationError(str(e)) from e
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Storage failure, transaction rolled back: {e}")
            raise StorageUnavailable(str(e)) from e
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def session(self) -> Iterator[StoreSession]:
        """Read-only access with the store's normal read consistency."""
        conn = self._connect()
        try:
            yield StoreSession(conn)
        except sqlite3.Error as e:
            logger.error(f"Storage failure during read: {e}")
            raise StorageUnavailable(str(e)) from e
        finally:
            conn.close()
