"""Fixtures for F3 tests - SQLite persistence."""

import sqlite3
from pathlib import Path

import pytest

from skills_tracker.db.database import init_db


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Fresh database with the schema created."""
    path = tmp_path / "db" / "skills_tracker.db"
    init_db(path)
    return path


@pytest.fixture
def raw_conn(db_path):
    """Direct connection for asserting on stored rows."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    yield conn
    conn.close()
