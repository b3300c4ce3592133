"""Core module for the skills tracker.

Contains:
- Entity types (models)
- In-memory repositories
- Progress analytics and certification readiness
- Bootstrap (first-run seed or restore)
"""

from skills_tracker.core.models import (
    ProgressStatus,
    Skill,
    SkillProgress,
    Student,
    TrainingProgram,
    ValidationError,
)
from skills_tracker.core.progress_analyzer import ProgressAnalyzer
from skills_tracker.core.repositories import (
    SkillRepository,
    StudentRepository,
    TrainingProgramRepository,
)

__all__ = [
    "ProgressStatus",
    "Skill",
    "SkillProgress",
    "Student",
    "TrainingProgram",
    "ValidationError",
    "ProgressAnalyzer",
    "SkillRepository",
    "StudentRepository",
    "TrainingProgramRepository",
]
