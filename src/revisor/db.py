"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".revisor" / "revisor.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS themes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    specialty TEXT DEFAULT '',
    area TEXT DEFAULT '',
    difficulty_tier TEXT NOT NULL DEFAULT 'easy',
    progression_level INTEGER NOT NULL DEFAULT 0 CHECK (progression_level >= 0),
    questions_total INTEGER NOT NULL DEFAULT 0 CHECK (questions_total >= 0),
    questions_correct INTEGER NOT NULL DEFAULT 0 CHECK (questions_correct >= 0),
    retention_rate INTEGER NOT NULL DEFAULT 0,
    last_review_date TEXT,
    next_review_date TEXT,
    study_mode TEXT NOT NULL DEFAULT 'quantitative',
    status TEXT NOT NULL DEFAULT 'active',
    study_date TEXT,
    initial_tier TEXT,
    initial_accuracy INTEGER,
    mastered_on TEXT,
    mastered_after_entry INTEGER,
    created_at TEXT,
    version INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS review_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    theme_id INTEGER NOT NULL REFERENCES themes(id),
    scheduled_date TEXT NOT NULL,
    completed_date TEXT,
    session_accuracy INTEGER,
    result_tier TEXT
);

CREATE TABLE IF NOT EXISTS review_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    theme_id INTEGER NOT NULL REFERENCES themes(id),
    review_record_id INTEGER NOT NULL REFERENCES review_records(id),
    study_mode TEXT NOT NULL,
    questions_answered INTEGER NOT NULL,
    questions_correct INTEGER NOT NULL,
    session_accuracy INTEGER NOT NULL,
    result_tier TEXT NOT NULL,
    completed_date TEXT NOT NULL,
    logged_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_themes_next_review ON themes(next_review_date);
CREATE INDEX IF NOT EXISTS idx_review_records_completed ON review_records(completed_date);
CREATE INDEX IF NOT EXISTS idx_review_log_theme ON review_log(theme_id, id);

-- one pending review per theme
CREATE UNIQUE INDEX IF NOT EXISTS idx_review_records_one_pending
    ON review_records(theme_id) WHERE completed_date IS NULL;
"""


def get_connection(db_path: str = DEFAULT_DB_PATH, timeout: float = 5.0) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path, timeout=timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
