"""Bootstrap: open the database and populate the repositories.

Startup is a binary branch with no merge path:
- the database already has students -> load skills, students, programs
- otherwise -> seed sample data and save it (or load whatever exists when
  seeding is disabled)

The returned Tracker bundles the repositories and the analyzer. It is not
safe to share between threads or processes without external locking around
every repository + persistence call.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from skills_tracker.config.app_config import AppConfig, load_app_config
from skills_tracker.core.progress_analyzer import ProgressAnalyzer
from skills_tracker.core.repositories import (
    SkillRepository,
    StudentRepository,
    TrainingProgramRepository,
)
from skills_tracker.core.sample_data import load_sample_data
from skills_tracker.db import tracker_repository
from skills_tracker.db.database import init_db

logger = structlog.get_logger(__name__)


@dataclass
class Tracker:
    """Repositories plus the analyzer bound to the skill repository."""

    students: StudentRepository = field(default_factory=StudentRepository)
    skills: SkillRepository = field(default_factory=SkillRepository)
    programs: TrainingProgramRepository = field(default_factory=TrainingProgramRepository)
    analyzer: ProgressAnalyzer = field(init=False)

    def __post_init__(self) -> None:
        self.analyzer = ProgressAnalyzer(self.skills)


def open_tracker(config: AppConfig | None = None) -> Tracker:
    """Initialize the database and return populated repositories.

    Args:
        config: Application config. Defaults to load_app_config().

    Returns:
        Tracker with data loaded from the database, or freshly seeded.

    Raises:
        PersistenceError: If the database cannot be read or written
    """
    config = config or load_app_config()
    init_db(config.database.path)

    tracker = Tracker()

    if tracker_repository.has_data() or not config.seed_sample_data:
        # Skills first so progress and program references resolve
        tracker_repository.load_skills(tracker.skills)
        tracker_repository.load_students(tracker.students)
        tracker_repository.load_programs(tracker.programs)
        # Archived students are not loaded but their ids stay taken
        tracker.students.advance_next_id(tracker_repository.get_next_student_id())
        logger.info(
            "tracker.loaded",
            students=tracker.students.count,
            skills=tracker.skills.count,
            programs=tracker.programs.count,
        )
    else:
        load_sample_data(tracker.students, tracker.skills, tracker.programs)
        logger.info("tracker.seeded")

    return tracker
