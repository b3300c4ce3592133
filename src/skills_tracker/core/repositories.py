"""In-memory repositories for students, skills and training programs.

Each repository keeps its entities in insertion order, keyed by integer id,
and owns its own next-id counter:
- add(...) assigns the next id (starting at 1, never reused)
- add_with_id(id, ...) restores an entity loaded from the database and
  advances the counter past it

Not thread-safe: callers sharing a repository across threads must serialize
access themselves.
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, Iterator, TypeVar

import structlog

from skills_tracker.core.models import (
    DEFAULT_MINIMUM_PASSING_PERCENTAGE,
    DEFAULT_PASSING_SCORE,
    Skill,
    Student,
    TrainingProgram,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T", Student, Skill, TrainingProgram)


class _Repository(Generic[T]):
    """Identity-keyed collection with a monotonic id counter."""

    def __init__(self) -> None:
        self._items: dict[int, T] = {}
        self._next_id = 1

    @property
    def next_id(self) -> int:
        """Id the next add() call will assign."""
        return self._next_id

    def advance_next_id(self, next_id: int) -> None:
        """Make sure future add() calls never assign an id below next_id."""
        self._next_id = max(self._next_id, next_id)

    def _take_next_id(self) -> int:
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def _store(self, entity: T) -> T:
        self._items[entity.id] = entity
        if entity.id >= self._next_id:
            self._next_id = entity.id + 1
        return entity

    def get_by_id(self, entity_id: int) -> T | None:
        """Get an entity by id, or None if not found."""
        return self._items.get(entity_id)

    def get_all(self) -> tuple[T, ...]:
        """All entities in insertion order."""
        return tuple(self._items.values())

    @property
    def count(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.get_all())


class StudentRepository(_Repository[Student]):
    """Active (non-archived) students."""

    def add(self, name: str, email: str) -> Student:
        """Create a student with the next free id.

        Raises:
            ValidationError: If name or email is empty (no id is consumed)
        """
        student = Student(self._next_id, name, email)
        self._take_next_id()
        logger.debug("students.added", student_id=student.id)
        return self._store(student)

    def add_with_id(
        self,
        student_id: int,
        name: str,
        email: str,
        enrollment_date: datetime | None = None,
    ) -> Student:
        """Restore a student under a known id (database load path)."""
        return self._store(Student(student_id, name, email, enrollment_date))

    def delete(self, student_id: int) -> bool:
        """Remove a student from the active set. Returns True if removed."""
        if self._items.pop(student_id, None) is None:
            return False
        logger.debug("students.removed", student_id=student_id)
        return True

    def search_by_name(self, name: str) -> Iterator[Student]:
        """Students whose name contains the text (case-insensitive)."""
        needle = name.casefold()
        return (s for s in self.get_all() if needle in s.name.casefold())


class SkillRepository(_Repository[Skill]):
    """All skills known to the system."""

    def add(
        self,
        name: str,
        description: str,
        category: str,
        passing_score: int = DEFAULT_PASSING_SCORE,
    ) -> Skill:
        skill = Skill(self._next_id, name, description, category, passing_score)
        self._take_next_id()
        logger.debug("skills.added", skill_id=skill.id)
        return self._store(skill)

    def add_with_id(
        self,
        skill_id: int,
        name: str,
        description: str,
        category: str,
        passing_score: int = DEFAULT_PASSING_SCORE,
    ) -> Skill:
        return self._store(Skill(skill_id, name, description, category, passing_score))

    def get_by_category(self, category: str) -> Iterator[Skill]:
        """Skills in a category (case-insensitive match)."""
        wanted = category.casefold()
        return (s for s in self.get_all() if s.category.casefold() == wanted)

    def get_categories(self) -> list[str]:
        """Distinct categories, sorted."""
        return sorted({s.category for s in self._items.values()})


class TrainingProgramRepository(_Repository[TrainingProgram]):
    """Training programs available for certification."""

    def add(
        self,
        name: str,
        description: str,
        minimum_passing_percentage: int = DEFAULT_MINIMUM_PASSING_PERCENTAGE,
    ) -> TrainingProgram:
        program = TrainingProgram(
            self._next_id, name, description, minimum_passing_percentage
        )
        self._take_next_id()
        logger.debug("programs.added", program_id=program.id)
        return self._store(program)

    def add_with_id(
        self,
        program_id: int,
        name: str,
        description: str,
        minimum_passing_percentage: int = DEFAULT_MINIMUM_PASSING_PERCENTAGE,
    ) -> TrainingProgram:
        return self._store(
            TrainingProgram(program_id, name, description, minimum_passing_percentage)
        )
