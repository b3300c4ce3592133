"""Tests for entity types (F1)."""

from datetime import datetime, timedelta

import pytest

from skills_tracker.core.models import (
    ProgressStatus,
    Skill,
    SkillProgress,
    Student,
    TrainingProgram,
    ValidationError,
    derive_status,
)


class TestStatusDerivation:
    """Status depends only on the raw score (fixed 70 boundary)."""

    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, ProgressStatus.NOT_STARTED),
            (1, ProgressStatus.IN_PROGRESS),
            (50, ProgressStatus.IN_PROGRESS),
            (69, ProgressStatus.IN_PROGRESS),
            (70, ProgressStatus.COMPLETED),
            (100, ProgressStatus.COMPLETED),
        ],
    )
    def test_derive_status_boundaries(self, score, expected):
        assert derive_status(score) == expected

    def test_update_score_sets_status(self):
        progress = SkillProgress(skill_id=1)
        for score in range(0, 101):
            progress.update_score(score)
            assert progress.status == derive_status(score)

    def test_status_ignores_skill_passing_score(self):
        """Passing a skill with threshold 50 still shows IN_PROGRESS below 70."""
        skill = Skill(1, "Teamwork", "", "Soft Skills", passing_score=50)
        progress = SkillProgress(skill.id, 60)

        assert progress.is_completed(skill.passing_score) is True
        assert progress.status == ProgressStatus.IN_PROGRESS

    def test_status_stored_values(self):
        assert int(ProgressStatus.NOT_STARTED) == 0
        assert int(ProgressStatus.IN_PROGRESS) == 1
        assert int(ProgressStatus.COMPLETED) == 2


class TestSkillProgress:
    """Tests for SkillProgress."""

    def test_new_progress_defaults(self):
        progress = SkillProgress(skill_id=3)
        assert progress.current_score == 0
        assert progress.status == ProgressStatus.NOT_STARTED

    def test_update_refreshes_timestamp(self):
        old = datetime.now() - timedelta(days=3)
        progress = SkillProgress(skill_id=1, score=40, last_updated=old)
        assert progress.last_updated == old

        progress.update_score(45)
        assert progress.last_updated > old

    @pytest.mark.parametrize("score", [-1, 101, 500])
    def test_invalid_score_rejected(self, score):
        progress = SkillProgress(skill_id=1, score=55)

        with pytest.raises(ValidationError):
            progress.update_score(score)

        # Prior state kept
        assert progress.current_score == 55
        assert progress.status == ProgressStatus.IN_PROGRESS

    def test_invalid_initial_score_rejected(self):
        with pytest.raises(ValidationError):
            SkillProgress(skill_id=1, score=-5)

    @pytest.mark.parametrize("score", [70.5, True, "80"])
    def test_non_integer_score_rejected(self, score):
        progress = SkillProgress(skill_id=1, score=55)

        with pytest.raises(ValidationError):
            progress.update_score(score)

        assert progress.current_score == 55

    def test_is_completed_uses_given_threshold(self):
        progress = SkillProgress(skill_id=1, score=65)
        assert progress.is_completed(65) is True
        assert progress.is_completed(66) is False


class TestSkill:
    """Tests for Skill."""

    def test_default_passing_score(self):
        skill = Skill(1, "Git", "Version control", "Programming")
        assert skill.passing_score == 70

    @pytest.mark.parametrize("passing", [-1, 101])
    def test_passing_score_out_of_range(self, passing):
        with pytest.raises(ValidationError):
            Skill(1, "Git", "", "Programming", passing)

    def test_passing_score_limits_accepted(self):
        assert Skill(1, "A", "", "X", 0).passing_score == 0
        assert Skill(2, "B", "", "X", 100).passing_score == 100

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            Skill(1, "  ", "", "Programming")

    def test_empty_category_rejected(self):
        with pytest.raises(ValidationError):
            Skill(1, "Git", "", "")

    def test_is_passing(self):
        skill = Skill(1, "SQL", "", "Programming", 65)
        assert skill.is_passing(65)
        assert not skill.is_passing(64)

    def test_str(self):
        skill = Skill(4, "SQL", "", "Programming", 65)
        assert str(skill) == "[4] SQL (Programming) - Pass: 65%"


class TestStudent:
    """Tests for Student."""

    def test_enrollment_date_set_on_creation(self):
        before = datetime.now()
        student = Student(1, "Ana", "ana@example.com")
        assert before <= student.enrollment_date <= datetime.now()

    def test_enrollment_date_restored(self):
        enrolled = datetime(2024, 9, 1, 8, 30)
        student = Student(1, "Ana", "ana@example.com", enrolled)
        assert student.enrollment_date == enrolled

    def test_enrollment_date_is_read_only(self):
        student = Student(1, "Ana", "ana@example.com")
        with pytest.raises(AttributeError):
            student.enrollment_date = datetime(2000, 1, 1)

    @pytest.mark.parametrize("name,email", [("", "a@b.c"), ("Ana", ""), ("   ", "a@b.c")])
    def test_empty_fields_rejected(self, name, email):
        with pytest.raises(ValidationError):
            Student(1, name, email)

    def test_update_name_and_email(self):
        student = Student(1, "Ana", "ana@example.com")
        student.update_name("Ana García")
        student.update_email("ana.garcia@example.com")

        assert student.name == "Ana García"
        assert student.email == "ana.garcia@example.com"

    def test_invalid_update_keeps_previous_value(self):
        student = Student(1, "Ana", "ana@example.com")

        with pytest.raises(ValidationError):
            student.update_name("")
        with pytest.raises(ValidationError):
            student.update_email("   ")

        assert student.name == "Ana"
        assert student.email == "ana@example.com"

    def test_update_skill_progress_adds_then_updates(self):
        student = Student(1, "Ana", "ana@example.com")

        student.update_skill_progress(3, 40)
        student.update_skill_progress(3, 80)

        assert len(student.skill_progress) == 1
        progress = student.get_skill_progress(3)
        assert progress.current_score == 80
        assert progress.status == ProgressStatus.COMPLETED

    def test_progress_unique_per_skill_and_ordered(self):
        student = Student(1, "Ana", "ana@example.com")
        for skill_id in (5, 2, 9, 2, 5):
            student.update_skill_progress(skill_id, 50)

        assert [p.skill_id for p in student.skill_progress] == [5, 2, 9]

    def test_zero_score_creates_not_started_record(self):
        student = Student(1, "Ana", "ana@example.com")
        student.update_skill_progress(7, 0)

        progress = student.get_skill_progress(7)
        assert progress is not None
        assert progress.status == ProgressStatus.NOT_STARTED

    def test_get_skill_progress_missing_returns_none(self):
        student = Student(1, "Ana", "ana@example.com")
        assert student.get_skill_progress(42) is None

    def test_invalid_score_does_not_add_record(self):
        student = Student(1, "Ana", "ana@example.com")

        with pytest.raises(ValidationError):
            student.update_skill_progress(1, 101)

        assert student.get_skill_progress(1) is None
        assert student.skill_progress == ()

    def test_skill_progress_is_a_copy(self):
        student = Student(1, "Ana", "ana@example.com")
        student.update_skill_progress(1, 10)

        records = student.skill_progress
        assert isinstance(records, tuple)
        assert len(student.skill_progress) == 1


class TestTrainingProgram:
    """Tests for TrainingProgram."""

    def test_defaults(self):
        program = TrainingProgram(1, "Backend", "Server side")
        assert program.minimum_passing_percentage == 100
        assert program.required_skill_ids == ()
        assert program.total_required_skills == 0

    def test_add_required_skill_ignores_duplicates(self):
        program = TrainingProgram(1, "Backend", "")
        program.add_required_skill(3)
        program.add_required_skill(1)
        program.add_required_skill(3)

        assert program.required_skill_ids == (3, 1)
        assert program.total_required_skills == 2

    def test_constructor_deduplicates(self):
        program = TrainingProgram(1, "Backend", "", 80, [2, 2, 4, 2])
        assert program.required_skill_ids == (2, 4)

    def test_remove_required_skill(self):
        program = TrainingProgram(1, "Backend", "")
        program.add_required_skill(3)
        program.remove_required_skill(3)
        program.remove_required_skill(99)

        assert program.required_skill_ids == ()

    @pytest.mark.parametrize("minimum", [-1, 101])
    def test_minimum_out_of_range(self, minimum):
        with pytest.raises(ValidationError):
            TrainingProgram(1, "Backend", "", minimum)

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            TrainingProgram(1, "", "desc")

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            TrainingProgram(1, "Backend", "", 150)

    def test_required_skill_ids_cannot_be_mutated(self):
        program = TrainingProgram(1, "Backend", "")
        program.add_required_skill(1)

        ids = program.required_skill_ids
        with pytest.raises(AttributeError):
            ids.append(1)
        with pytest.raises(AttributeError):
            program.required_skill_ids = [1, 1]

        assert program.required_skill_ids == (1,)

    def test_minimum_setter_validates(self):
        program = TrainingProgram(1, "Backend", "", 80)
        program.minimum_passing_percentage = 90

        with pytest.raises(ValidationError):
            program.minimum_passing_percentage = 150

        assert program.minimum_passing_percentage == 90


class TestIdentities:
    """Entity ids must be positive integers."""

    @pytest.mark.parametrize("entity_id", [0, -3])
    def test_student_id(self, entity_id):
        with pytest.raises(ValidationError):
            Student(entity_id, "Ana", "ana@example.com")

    @pytest.mark.parametrize("entity_id", [0, -3])
    def test_skill_id(self, entity_id):
        with pytest.raises(ValidationError):
            Skill(entity_id, "Git", "", "Programming")

    @pytest.mark.parametrize("entity_id", [0, -3])
    def test_program_id(self, entity_id):
        with pytest.raises(ValidationError):
            TrainingProgram(entity_id, "Backend", "")
