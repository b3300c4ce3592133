"""SQLite database connection and schema management.

Provides connection management and schema initialization for the skills
tracker. Every get_db() call opens its own connection and transaction;
there is no pooling and no transaction spanning several calls.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import structlog

logger = structlog.get_logger(__name__)

# Default database location
DEFAULT_DB_PATH = Path("db/skills_tracker.db")

# Current database (module-level for simplicity in CLI context)
_db_path: Path | None = None


class PersistenceError(Exception):
    """Storage I/O failure. Not retried; the caller decides how to recover."""

    pass


def init_db(db_path: Path | None = None) -> None:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to db/skills_tracker.db

    Raises:
        PersistenceError: If the file cannot be created or the schema fails
    """
    global _db_path
    _db_path = Path(db_path) if db_path else DEFAULT_DB_PATH

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))


def get_db_path() -> Path:
    """Path of the database currently in use."""
    return _db_path or DEFAULT_DB_PATH


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Commits when the block exits normally, rolls back otherwise.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Raises:
        PersistenceError: Wrapping any sqlite3.Error

    Example:
        with get_db() as conn:
            rows = conn.execute("SELECT * FROM Skills").fetchall()
    """
    db_path = get_db_path()

    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path)
    except (OSError, sqlite3.Error) as e:
        raise PersistenceError(f"Cannot open database {db_path}: {e}") from e

    conn.row_factory = sqlite3.Row

    try:
        conn.execute("PRAGMA foreign_keys = ON")
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("database.error", path=str(db_path), error=str(e))
        raise PersistenceError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        -- Students: archived rows are kept but skipped on load
        CREATE TABLE IF NOT EXISTS Students (
            Id INTEGER PRIMARY KEY,
            Name TEXT NOT NULL,
            Email TEXT NOT NULL,
            EnrollmentDate TEXT NOT NULL,
            IsArchived INTEGER NOT NULL DEFAULT 0 CHECK(IsArchived IN (0, 1))
        );

        CREATE TABLE IF NOT EXISTS Skills (
            Id INTEGER PRIMARY KEY,
            Name TEXT NOT NULL,
            Description TEXT NOT NULL,
            Category TEXT NOT NULL,
            PassingScore INTEGER NOT NULL
        );

        -- SkillProgress: fully replaced per student on save
        CREATE TABLE IF NOT EXISTS SkillProgress (
            Id INTEGER PRIMARY KEY AUTOINCREMENT,
            StudentId INTEGER NOT NULL,
            SkillId INTEGER NOT NULL,
            CurrentScore INTEGER NOT NULL,
            Status INTEGER NOT NULL CHECK(Status IN (0, 1, 2)),
            LastUpdated TEXT NOT NULL,
            FOREIGN KEY (StudentId) REFERENCES Students(Id)
        );

        CREATE TABLE IF NOT EXISTS TrainingPrograms (
            Id INTEGER PRIMARY KEY,
            Name TEXT NOT NULL,
            Description TEXT NOT NULL,
            MinimumPassingPercentage INTEGER NOT NULL
        );

        -- ProgramSkills: fully replaced per program on save
        CREATE TABLE IF NOT EXISTS ProgramSkills (
            ProgramId INTEGER NOT NULL,
            SkillId INTEGER NOT NULL,
            PRIMARY KEY (ProgramId, SkillId),
            FOREIGN KEY (ProgramId) REFERENCES TrainingPrograms(Id)
        );

        -- Indexes
        CREATE INDEX IF NOT EXISTS idx_progress_student ON SkillProgress(StudentId);
        CREATE INDEX IF NOT EXISTS idx_students_archived ON Students(IsArchived);
        """
    )
