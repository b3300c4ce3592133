"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Save/load/archive functions for students, skills and programs
"""

from skills_tracker.db.database import PersistenceError, get_db, init_db

__all__ = ["PersistenceError", "get_db", "init_db"]
