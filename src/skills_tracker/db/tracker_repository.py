"""Persistence functions for students, skills and training programs.

Save functions upsert the parent row and then fully replace its association
rows (SkillProgress per student, ProgramSkills per program): delete all,
reinsert the in-memory set. Each save runs inside a single get_db() scope,
so it commits or rolls back as one SQLite transaction.

Load functions read rows in ascending id order and rebuild entities through
the repositories' add_with_id(), replaying child rows through the entity
mutation methods so validation and status derivation run again.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Generator

import structlog

from skills_tracker.core.models import Skill, Student, TrainingProgram
from skills_tracker.core.repositories import (
    SkillRepository,
    StudentRepository,
    TrainingProgramRepository,
)
from skills_tracker.db.database import PersistenceError, get_db

logger = structlog.get_logger(__name__)


@contextmanager
def _stored_row(table: str, row_id: int) -> Generator[None, None, None]:
    """Report a row that no longer passes entity validation as PersistenceError."""
    try:
        yield
    except (ValueError, TypeError) as e:
        logger.error("database.invalid_row", table=table, row_id=row_id, error=str(e))
        raise PersistenceError(f"Invalid {table} row {row_id}: {e}") from e


# =============================================================================
# STUDENTS
# =============================================================================


def save_student(student: Student) -> None:
    """Upsert a student and replace all of their progress rows.

    Progress rows not present in student.skill_progress are lost.

    Raises:
        PersistenceError: On any storage failure
    """
    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO Students (Id, Name, Email, EnrollmentDate, IsArchived)
            VALUES (?, ?, ?, ?, 0)
            ON CONFLICT(Id) DO UPDATE SET
                Name = excluded.Name,
                Email = excluded.Email,
                EnrollmentDate = excluded.EnrollmentDate,
                IsArchived = 0
            """,
            (
                student.id,
                student.name,
                student.email,
                student.enrollment_date.isoformat(),
            ),
        )

        conn.execute("DELETE FROM SkillProgress WHERE StudentId = ?", (student.id,))
        conn.executemany(
            """
            INSERT INTO SkillProgress (StudentId, SkillId, CurrentScore, Status, LastUpdated)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                (
                    student.id,
                    progress.skill_id,
                    progress.current_score,
                    int(progress.status),
                    progress.last_updated.isoformat(),
                )
                for progress in student.skill_progress
            ],
        )

    logger.debug(
        "students.saved",
        student_id=student.id,
        progress_rows=len(student.skill_progress),
    )


def archive_student(student_id: int) -> None:
    """Mark a student as archived. Progress rows stay in the database."""
    with get_db() as conn:
        conn.execute("UPDATE Students SET IsArchived = 1 WHERE Id = ?", (student_id,))

    logger.info("students.archived", student_id=student_id)


def load_students(repository: StudentRepository) -> int:
    """Load every non-archived student with their progress.

    Args:
        repository: Target repository (normally empty)

    Returns:
        Number of students loaded

    Raises:
        PersistenceError: On storage failure, or if a stored row fails
            entity validation (e.g. a score above 100 or a malformed date)
    """
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT Id, Name, Email, EnrollmentDate FROM Students
            WHERE IsArchived = 0 ORDER BY Id
            """
        ).fetchall()

        for row in rows:
            with _stored_row("Students", row["Id"]):
                student = repository.add_with_id(
                    row["Id"],
                    row["Name"],
                    row["Email"],
                    datetime.fromisoformat(row["EnrollmentDate"]),
                )

            progress_rows = conn.execute(
                """
                SELECT Id, SkillId, CurrentScore, LastUpdated FROM SkillProgress
                WHERE StudentId = ? ORDER BY Id
                """,
                (student.id,),
            ).fetchall()

            # Stored Status is ignored: update_skill_progress re-derives it
            for prow in progress_rows:
                with _stored_row("SkillProgress", prow["Id"]):
                    student.update_skill_progress(
                        prow["SkillId"],
                        prow["CurrentScore"],
                        last_updated=datetime.fromisoformat(prow["LastUpdated"]),
                    )

    logger.debug("students.loaded", count=len(rows))
    return len(rows)


# =============================================================================
# SKILLS
# =============================================================================


def save_skill(skill: Skill) -> None:
    """Upsert a skill."""
    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO Skills (Id, Name, Description, Category, PassingScore)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(Id) DO UPDATE SET
                Name = excluded.Name,
                Description = excluded.Description,
                Category = excluded.Category,
                PassingScore = excluded.PassingScore
            """,
            (skill.id, skill.name, skill.description, skill.category, skill.passing_score),
        )

    logger.debug("skills.saved", skill_id=skill.id)


def load_skills(repository: SkillRepository) -> int:
    """Load all skills. Returns the number loaded."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT Id, Name, Description, Category, PassingScore FROM Skills ORDER BY Id"
        ).fetchall()

    for row in rows:
        with _stored_row("Skills", row["Id"]):
            repository.add_with_id(
                row["Id"],
                row["Name"],
                row["Description"],
                row["Category"],
                row["PassingScore"],
            )

    logger.debug("skills.loaded", count=len(rows))
    return len(rows)


# =============================================================================
# TRAINING PROGRAMS
# =============================================================================


def save_program(program: TrainingProgram) -> None:
    """Upsert a program and replace its required-skill rows."""
    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO TrainingPrograms (Id, Name, Description, MinimumPassingPercentage)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(Id) DO UPDATE SET
                Name = excluded.Name,
                Description = excluded.Description,
                MinimumPassingPercentage = excluded.MinimumPassingPercentage
            """,
            (
                program.id,
                program.name,
                program.description,
                program.minimum_passing_percentage,
            ),
        )

        conn.execute("DELETE FROM ProgramSkills WHERE ProgramId = ?", (program.id,))
        conn.executemany(
            "INSERT INTO ProgramSkills (ProgramId, SkillId) VALUES (?, ?)",
            [(program.id, skill_id) for skill_id in program.required_skill_ids],
        )

    logger.debug(
        "programs.saved",
        program_id=program.id,
        required_skills=program.total_required_skills,
    )


def load_programs(repository: TrainingProgramRepository) -> int:
    """Load all programs with their required skills. Returns the number loaded."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT Id, Name, Description, MinimumPassingPercentage
            FROM TrainingPrograms ORDER BY Id
            """
        ).fetchall()

        for row in rows:
            with _stored_row("TrainingPrograms", row["Id"]):
                program = repository.add_with_id(
                    row["Id"],
                    row["Name"],
                    row["Description"],
                    row["MinimumPassingPercentage"],
                )

            skill_rows = conn.execute(
                "SELECT SkillId FROM ProgramSkills WHERE ProgramId = ? ORDER BY rowid",
                (program.id,),
            ).fetchall()
            for srow in skill_rows:
                program.add_required_skill(srow["SkillId"])

    logger.debug("programs.loaded", count=len(rows))
    return len(rows)


# =============================================================================
# UTILITY
# =============================================================================


def _next_id(table: str) -> int:
    with get_db() as conn:
        row = conn.execute(f"SELECT COALESCE(MAX(Id), 0) + 1 AS next_id FROM {table}").fetchone()
    return row["next_id"]


def get_next_student_id() -> int:
    """max(Students.Id) + 1, archived students included."""
    return _next_id("Students")


def get_next_skill_id() -> int:
    return _next_id("Skills")


def get_next_program_id() -> int:
    return _next_id("TrainingPrograms")


def has_data() -> bool:
    """True if any student row exists (restore run rather than first run)."""
    with get_db() as conn:
        row = conn.execute("SELECT COUNT(*) AS n FROM Students").fetchone()
    return row["n"] > 0
