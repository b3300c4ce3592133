"""Demo data used to seed an empty database on first run."""

from __future__ import annotations

import structlog

from skills_tracker.core.repositories import (
    SkillRepository,
    StudentRepository,
    TrainingProgramRepository,
)
from skills_tracker.db import tracker_repository

logger = structlog.get_logger(__name__)

# (name, description, category, passing_score)
SAMPLE_SKILLS = [
    ("Python Fundamentals", "Core Python syntax, data structures and OOP", "Programming", 70),
    ("Python Tooling", "Packaging, virtual environments, testing and linting", "Programming", 70),
    ("SQL & Databases", "Database design, SQL queries, and data management", "Programming", 65),
    ("Git Version Control", "Source control with Git, branching, and collaboration", "Programming", 60),
    ("HTML/CSS", "Web markup and styling fundamentals", "Web Development", 70),
    ("JavaScript", "Client-side scripting and DOM manipulation", "Web Development", 70),
    ("Web Frameworks", "Building web applications and REST APIs", "Web Development", 75),
    ("Communication", "Clear written and verbal communication skills", "Soft Skills", 70),
    ("Teamwork", "Collaborative work and team dynamics", "Soft Skills", 65),
    ("Problem Solving", "Analytical thinking and solution development", "Soft Skills", 70),
]

# (name, email, {skill name: score})
SAMPLE_STUDENTS = [
    (
        "Sarah Johnson",
        "sarah.johnson@email.com",
        {
            "Python Fundamentals": 85,
            "Python Tooling": 78,
            "SQL & Databases": 72,
            "Git Version Control": 90,
            "HTML/CSS": 88,
            "JavaScript": 65,
            "Communication": 82,
        },
    ),
    (
        "Michael Chen",
        "michael.chen@email.com",
        {
            "Python Fundamentals": 92,
            "Python Tooling": 88,
            "SQL & Databases": 95,
            "Git Version Control": 85,
            "Web Frameworks": 80,
            "Problem Solving": 90,
        },
    ),
    (
        "Emily Davis",
        "emily.davis@email.com",
        {
            "Python Fundamentals": 55,
            "Python Tooling": 45,
            "HTML/CSS": 70,
            "JavaScript": 60,
            "Teamwork": 85,
        },
    ),
    (
        "James Wilson",
        "james.wilson@email.com",
        {
            "Python Fundamentals": 78,
            "SQL & Databases": 82,
            "Git Version Control": 75,
            "Communication": 88,
            "Teamwork": 90,
            "Problem Solving": 85,
        },
    ),
    (
        "Lisa Thompson",
        "lisa.thompson@email.com",
        {
            "HTML/CSS": 95,
            "JavaScript": 88,
            "Web Frameworks": 72,
        },
    ),
]

# (name, description, minimum_passing_percentage, [required skill names])
SAMPLE_PROGRAMS = [
    (
        "Full Stack Developer",
        "Complete web development certification covering front-end, back-end, and databases",
        100,
        [
            "Python Fundamentals",
            "Python Tooling",
            "SQL & Databases",
            "HTML/CSS",
            "JavaScript",
            "Web Frameworks",
            "Git Version Control",
        ],
    ),
    (
        "Backend Developer",
        "Server-side development with Python and databases",
        100,
        ["Python Fundamentals", "Python Tooling", "SQL & Databases", "Web Frameworks"],
    ),
    (
        "Programming Foundations",
        "Entry-level programming concepts and tools",
        80,
        ["Python Fundamentals", "Git Version Control", "Problem Solving"],
    ),
]


def load_sample_data(
    students: StudentRepository,
    skills: SkillRepository,
    programs: TrainingProgramRepository,
) -> None:
    """Populate the repositories with demo data and save every entity.

    Skills are saved first, then students, then programs.
    """
    skill_ids: dict[str, int] = {}
    for name, description, category, passing_score in SAMPLE_SKILLS:
        skill = skills.add(name, description, category, passing_score)
        skill_ids[name] = skill.id
        tracker_repository.save_skill(skill)

    for name, email, scores in SAMPLE_STUDENTS:
        student = students.add(name, email)
        for skill_name, score in scores.items():
            student.update_skill_progress(skill_ids[skill_name], score)
        tracker_repository.save_student(student)

    for name, description, minimum, required in SAMPLE_PROGRAMS:
        program = programs.add(name, description, minimum)
        for skill_name in required:
            program.add_required_skill(skill_ids[skill_name])
        tracker_repository.save_program(program)

    logger.info(
        "sample_data.loaded",
        students=students.count,
        skills=skills.count,
        programs=programs.count,
    )
