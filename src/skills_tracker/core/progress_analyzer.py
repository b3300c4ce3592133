"""Progress analytics and certification readiness.

Responsibilities:
- Overall progress of a student across every skill in the system
- Certification readiness for a training program
- Per-student progress summary (completed / in progress / not started)
- Skills needing attention, ranked by distance to the passing score
- Class-wide statistics

A skill counts as completed when the student's score reaches that skill's
own passing score. This is deliberately different from SkillProgress.status,
which uses a fixed 70 boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

import structlog

from skills_tracker.core.models import ProgressStatus, Skill, Student, TrainingProgram
from skills_tracker.core.repositories import SkillRepository

logger = structlog.get_logger(__name__)

DEFAULT_ATTENTION_COUNT = 3
DEFAULT_TOP_PERFORMERS = 3
DEFAULT_SUPPORT_THRESHOLD = 50.0

# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass
class CertificationReadiness:
    """Readiness of one student for one training program."""

    student: Student
    program: TrainingProgram
    completed_skills: list[Skill] = field(default_factory=list)
    incomplete_skills: list[Skill] = field(default_factory=list)
    readiness_percentage: float = 0.0
    is_ready: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "student_id": self.student.id,
            "program_id": self.program.id,
            "completed_skills": [s.id for s in self.completed_skills],
            "incomplete_skills": [s.id for s in self.incomplete_skills],
            "readiness_percentage": self.readiness_percentage,
            "is_ready": self.is_ready,
        }


@dataclass
class ProgressSummary:
    """Every skill in the system, bucketed for one student."""

    student: Student
    completed: list[tuple[Skill, int]] = field(default_factory=list)
    in_progress: list[tuple[Skill, int]] = field(default_factory=list)
    not_started: list[Skill] = field(default_factory=list)
    overall_percentage: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "student_id": self.student.id,
            "completed": [{"skill_id": s.id, "score": score} for s, score in self.completed],
            "in_progress": [{"skill_id": s.id, "score": score} for s, score in self.in_progress],
            "not_started": [s.id for s in self.not_started],
            "overall_percentage": self.overall_percentage,
        }


@dataclass
class AttentionItem:
    """A skill below its passing score and how far off the student is."""

    skill: Skill
    score: int
    gap: int


@dataclass
class ClassStatistics:
    """Aggregate progress across a group of students."""

    total_students: int = 0
    average_progress: float = 0.0
    highest_progress: float = 0.0
    lowest_progress: float = 0.0
    top_performers: list[tuple[Student, float]] = field(default_factory=list)
    students_needing_support: list[tuple[Student, float]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_students": self.total_students,
            "average_progress": self.average_progress,
            "highest_progress": self.highest_progress,
            "lowest_progress": self.lowest_progress,
            "top_performers": [
                {"student_id": s.id, "progress": p} for s, p in self.top_performers
            ],
            "students_needing_support": [
                {"student_id": s.id, "progress": p} for s, p in self.students_needing_support
            ],
        }


# =============================================================================
# ANALYZER
# =============================================================================


class ProgressAnalyzer:
    """Read-only analytics over repository state.

    Holds only the skill repository, which is needed to resolve skill ids
    and passing scores. Results reflect the repositories at call time.
    """

    def __init__(self, skill_repository: SkillRepository) -> None:
        self._skills = skill_repository

    def _is_completed(self, student: Student, skill: Skill) -> bool:
        progress = student.get_skill_progress(skill.id)
        return progress is not None and progress.is_completed(skill.passing_score)

    def calculate_overall_progress(self, student: Student) -> float:
        """Percentage of all system skills the student has completed.

        Returns 0.0 when there are no skills.
        """
        all_skills = self._skills.get_all()
        if not all_skills:
            return 0.0

        completed = sum(1 for skill in all_skills if self._is_completed(student, skill))
        return completed / len(all_skills) * 100

    def check_certification_readiness(
        self, student: Student, program: TrainingProgram
    ) -> CertificationReadiness:
        """Check how close a student is to certification in a program.

        Required skill ids that no longer resolve to a skill are skipped, but
        still count in the denominator of readiness_percentage.
        """
        result = CertificationReadiness(student=student, program=program)

        for skill_id in program.required_skill_ids:
            skill = self._skills.get_by_id(skill_id)
            if skill is None:
                logger.debug(
                    "readiness.dangling_skill",
                    program_id=program.id,
                    skill_id=skill_id,
                )
                continue

            if self._is_completed(student, skill):
                result.completed_skills.append(skill)
            else:
                result.incomplete_skills.append(skill)

        required = len(program.required_skill_ids)
        if required > 0:
            result.readiness_percentage = len(result.completed_skills) / required * 100

        result.is_ready = result.readiness_percentage >= program.minimum_passing_percentage
        return result

    def generate_progress_summary(self, student: Student) -> ProgressSummary:
        """Place every skill in exactly one bucket for this student."""
        all_skills = self._skills.get_all()
        summary = ProgressSummary(student=student)

        for skill in all_skills:
            progress = student.get_skill_progress(skill.id)

            if progress is None or progress.status == ProgressStatus.NOT_STARTED:
                summary.not_started.append(skill)
            elif progress.is_completed(skill.passing_score):
                summary.completed.append((skill, progress.current_score))
            else:
                summary.in_progress.append((skill, progress.current_score))

        if all_skills:
            summary.overall_percentage = len(summary.completed) / len(all_skills) * 100

        return summary

    def get_skills_needing_attention(
        self, student: Student, count: int = DEFAULT_ATTENTION_COUNT
    ) -> list[AttentionItem]:
        """Skills below their passing score, largest gap first.

        A skill without a progress record counts as score 0. Ties keep skill
        enumeration order (sorted() is stable).
        """
        items = []
        for skill in self._skills.get_all():
            progress = student.get_skill_progress(skill.id)
            score = progress.current_score if progress is not None else 0

            if score < skill.passing_score:
                items.append(AttentionItem(skill, score, skill.passing_score - score))

        items = sorted(items, key=lambda item: item.gap, reverse=True)
        return items[: max(count, 0)]

    def calculate_class_statistics(
        self,
        students: Iterable[Student],
        top_count: int = DEFAULT_TOP_PERFORMERS,
        support_threshold: float = DEFAULT_SUPPORT_THRESHOLD,
    ) -> ClassStatistics:
        """Aggregate overall progress across students.

        An empty input yields an all-zero ClassStatistics.
        """
        student_list = list(students)
        if not student_list:
            return ClassStatistics()

        ranked = sorted(
            ((s, self.calculate_overall_progress(s)) for s in student_list),
            key=lambda pair: pair[1],
            reverse=True,
        )
        progress_values = [p for _, p in ranked]

        return ClassStatistics(
            total_students=len(ranked),
            average_progress=sum(progress_values) / len(progress_values),
            highest_progress=ranked[0][1],
            lowest_progress=ranked[-1][1],
            top_performers=ranked[:top_count],
            students_needing_support=[
                (s, p) for s, p in ranked if p < support_threshold
            ],
        )
