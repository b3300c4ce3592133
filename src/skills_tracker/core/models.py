"""Entity types for the skills tracker.

Entities:
- Skill: something a student can learn, with its own passing score
- SkillProgress: a student's score on one skill (status derived from score)
- Student: identity, contact data and owned SkillProgress records
- TrainingProgram: set of required skill ids plus a certification threshold

Skill and program references are stored as plain integer ids and resolved
through the repositories at read time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Iterable

# Fixed boundary for status derivation (independent of Skill.passing_score)
STATUS_COMPLETED_THRESHOLD = 70

DEFAULT_PASSING_SCORE = 70
DEFAULT_MINIMUM_PASSING_PERCENTAGE = 100


class ValidationError(ValueError):
    """Raised when an entity attribute violates an invariant."""

    pass


class ProgressStatus(IntEnum):
    """Progress status, stored as its integer value."""

    NOT_STARTED = 0
    IN_PROGRESS = 1
    COMPLETED = 2

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


# =============================================================================
# VALIDATION HELPERS
# =============================================================================


def _require_text(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} cannot be empty.")
    return value


def _require_percentage(value: int, field_name: str) -> int:
    # bool is an int subclass; scores are whole numbers only
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be a whole number.")
    if value < 0 or value > 100:
        raise ValidationError(f"{field_name} must be between 0 and 100.")
    return value


def _require_id(value: int, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field_name} must be a positive integer.")
    return value


def derive_status(score: int) -> ProgressStatus:
    """Map a raw score to its status using the fixed 70 boundary."""
    if score == 0:
        return ProgressStatus.NOT_STARTED
    if score < STATUS_COMPLETED_THRESHOLD:
        return ProgressStatus.IN_PROGRESS
    return ProgressStatus.COMPLETED


# =============================================================================
# ENTITIES
# =============================================================================


@dataclass(frozen=True)
class Skill:
    """A skill students can learn in a training program."""

    id: int
    name: str
    description: str
    category: str
    passing_score: int = DEFAULT_PASSING_SCORE

    def __post_init__(self) -> None:
        _require_id(self.id, "Skill id")
        _require_text(self.name, "Skill name")
        _require_text(self.category, "Skill category")
        if self.description is None:
            raise ValidationError("Skill description cannot be None.")
        _require_percentage(self.passing_score, "Passing score")

    def is_passing(self, score: int) -> bool:
        """Check whether a score meets this skill's passing threshold."""
        return score >= self.passing_score

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "passing_score": self.passing_score,
        }

    def __str__(self) -> str:
        return f"[{self.id}] {self.name} ({self.category}) - Pass: {self.passing_score}%"


class SkillProgress:
    """A student's progress on a single skill.

    The status is recomputed on every score update and never set directly.
    """

    def __init__(
        self,
        skill_id: int,
        score: int = 0,
        last_updated: datetime | None = None,
    ) -> None:
        self.skill_id = skill_id
        self.current_score = 0
        self.status = ProgressStatus.NOT_STARTED
        self.last_updated = datetime.now()

        if score != 0:
            self.update_score(score)
        if last_updated is not None:
            self.last_updated = last_updated

    def update_score(self, score: int) -> None:
        """Set a new score (0-100), re-derive status and refresh the timestamp."""
        _require_percentage(score, "Score")

        self.current_score = score
        self.status = derive_status(score)
        self.last_updated = datetime.now()

    def is_completed(self, passing_score: int) -> bool:
        """Check completion against a skill-specific passing score."""
        return self.current_score >= passing_score

    def to_dict(self) -> dict[str, Any]:
        return {
            "skill_id": self.skill_id,
            "current_score": self.current_score,
            "status": self.status.name,
            "last_updated": self.last_updated.isoformat(),
        }

    def __repr__(self) -> str:
        return (
            f"SkillProgress(skill_id={self.skill_id}, "
            f"current_score={self.current_score}, status={self.status.name})"
        )

    def __str__(self) -> str:
        return (
            f"Skill {self.skill_id}: {self.current_score}% ({self.status.label}) "
            f"- Updated: {self.last_updated:%Y-%m-%d %H:%M}"
        )


class Student:
    """A student enrolled in the training program."""

    def __init__(
        self,
        id: int,
        name: str,
        email: str,
        enrollment_date: datetime | None = None,
    ) -> None:
        self.id = _require_id(id, "Student id")
        self._name = _require_text(name, "Name")
        self._email = _require_text(email, "Email")
        self._enrollment_date = enrollment_date or datetime.now()
        self._skill_progress: list[SkillProgress] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> str:
        return self._email

    @property
    def enrollment_date(self) -> datetime:
        return self._enrollment_date

    @property
    def skill_progress(self) -> tuple[SkillProgress, ...]:
        """Progress records in the order skills were first touched."""
        return tuple(self._skill_progress)

    def update_name(self, name: str) -> None:
        self._name = _require_text(name, "Name")

    def update_email(self, email: str) -> None:
        self._email = _require_text(email, "Email")

    def update_skill_progress(
        self,
        skill_id: int,
        score: int,
        last_updated: datetime | None = None,
    ) -> SkillProgress:
        """Add or update progress for a skill.

        Args:
            skill_id: Skill identity (not validated against any repository)
            score: New score, 0-100
            last_updated: Restore a stored timestamp instead of "now"

        Returns:
            The created or updated SkillProgress

        Raises:
            ValidationError: If score is outside 0-100 (nothing is changed)
        """
        existing = self.get_skill_progress(skill_id)

        if existing is not None:
            existing.update_score(score)
            if last_updated is not None:
                existing.last_updated = last_updated
            return existing

        progress = SkillProgress(skill_id, score, last_updated=last_updated)
        self._skill_progress.append(progress)
        return progress

    def get_skill_progress(self, skill_id: int) -> SkillProgress | None:
        """Get the progress record for a skill, or None if never touched."""
        for progress in self._skill_progress:
            if progress.skill_id == skill_id:
                return progress
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "enrollment_date": self.enrollment_date.isoformat(),
            "skill_progress": [p.to_dict() for p in self._skill_progress],
        }

    def __repr__(self) -> str:
        return f"Student(id={self.id}, name={self.name!r})"

    def __str__(self) -> str:
        return f"[{self.id}] {self.name} ({self.email}) - Enrolled: {self.enrollment_date:%Y-%m-%d}"


class TrainingProgram:
    """A training program with the skills required for certification.

    Required skill ids are unique and kept in insertion order. They are only
    changed through add_required_skill() and remove_required_skill().
    """

    def __init__(
        self,
        id: int,
        name: str,
        description: str,
        minimum_passing_percentage: int = DEFAULT_MINIMUM_PASSING_PERCENTAGE,
        required_skill_ids: Iterable[int] = (),
    ) -> None:
        self.id = _require_id(id, "Program id")
        self.name = _require_text(name, "Program name")
        if description is None:
            raise ValidationError("Program description cannot be None.")
        self.description = description
        self._minimum_passing_percentage = _require_percentage(
            minimum_passing_percentage, "Minimum passing percentage"
        )
        # Drop duplicates, keep first occurrence order
        self._required_skill_ids: list[int] = list(dict.fromkeys(required_skill_ids))

    @property
    def minimum_passing_percentage(self) -> int:
        return self._minimum_passing_percentage

    @minimum_passing_percentage.setter
    def minimum_passing_percentage(self, value: int) -> None:
        self._minimum_passing_percentage = _require_percentage(
            value, "Minimum passing percentage"
        )

    @property
    def required_skill_ids(self) -> tuple[int, ...]:
        """Required skill ids in the order they were added."""
        return tuple(self._required_skill_ids)

    @property
    def total_required_skills(self) -> int:
        return len(self._required_skill_ids)

    def add_required_skill(self, skill_id: int) -> None:
        """Add a required skill id (ignored if already present)."""
        if skill_id not in self._required_skill_ids:
            self._required_skill_ids.append(skill_id)

    def remove_required_skill(self, skill_id: int) -> None:
        if skill_id in self._required_skill_ids:
            self._required_skill_ids.remove(skill_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "minimum_passing_percentage": self.minimum_passing_percentage,
            "required_skill_ids": list(self._required_skill_ids),
        }

    def __repr__(self) -> str:
        return f"TrainingProgram(id={self.id}, name={self.name!r})"

    def __str__(self) -> str:
        return (
            f"[{self.id}] {self.name} - {self.total_required_skills} required skills, "
            f"{self.minimum_passing_percentage}% minimum"
        )
