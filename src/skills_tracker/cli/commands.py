"""CLI commands for the skills tracker.

Commands:
- students / skills / categories / programs: listings
- add-student, update-student, archive-student: student management
- add-skill, add-program: catalogue management
- score: record a student's score on a skill
- report, readiness, attention, stats: analytics

Every mutating command updates the in-memory repositories first and then
mirrors the change to the database.
"""

import json
import logging
import sys

import structlog
import typer
from rich.console import Console
from rich.table import Table

from skills_tracker.config.app_config import load_app_config
from skills_tracker.core.models import ProgressStatus, Student, ValidationError
from skills_tracker.core.tracker import Tracker, open_tracker
from skills_tracker.db import tracker_repository
from skills_tracker.db.database import PersistenceError

app = typer.Typer(
    name="skills",
    help="Track student skills and training-program certification progress.",
    no_args_is_help=True,
)

console = Console()

STATUS_COLORS = {
    ProgressStatus.NOT_STARTED: "dim",
    ProgressStatus.IN_PROGRESS: "yellow",
    ProgressStatus.COMPLETED: "green",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    """Configure logging for the invoked command."""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


# =============================================================================
# HELPERS
# =============================================================================


def _open_tracker_or_exit() -> Tracker:
    """Load repositories from the configured database, or exit on failure."""
    try:
        return open_tracker(load_app_config())
    except PersistenceError as e:
        console.print(f"[red]✗ Database error: {e}[/red]")
        raise typer.Exit(code=1)


def _get_student_or_exit(tracker: Tracker, student_id: int) -> Student:
    student = tracker.students.get_by_id(student_id)
    if student is None:
        console.print(f"[red]✗ Student not found: {student_id}[/red]")
        raise typer.Exit(code=1)
    return student


def _save_or_exit(save, entity) -> None:
    """Mirror an in-memory change to the database."""
    try:
        save(entity)
    except PersistenceError as e:
        console.print(f"[red]✗ Could not save changes: {e}[/red]")
        raise typer.Exit(code=1)


def _progress_color(percentage: float) -> str:
    if percentage >= 70:
        return "green"
    if percentage >= 50:
        return "yellow"
    return "red"


def _print_json(data) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


# =============================================================================
# LISTINGS
# =============================================================================


@app.command(name="students")
def list_students(
    search: str | None = typer.Option(None, "--search", "-s", help="Filter by name"),
) -> None:
    """List active students with their overall progress."""
    tracker = _open_tracker_or_exit()

    students = list(tracker.students.search_by_name(search)) if search else tracker.students.get_all()

    if not students:
        console.print("[yellow]No students found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Enrolled")
    table.add_column("Progress", justify="right")

    for student in students:
        progress = tracker.analyzer.calculate_overall_progress(student)
        color = _progress_color(progress)
        table.add_row(
            str(student.id),
            student.name,
            student.email,
            f"{student.enrollment_date:%Y-%m-%d}",
            f"[{color}]{progress:.1f}%[/{color}]",
        )

    console.print(table)


@app.command(name="skills")
def list_skills(
    category: str | None = typer.Option(None, "--category", "-c", help="Filter by category"),
) -> None:
    """List skills, optionally filtered by category."""
    tracker = _open_tracker_or_exit()

    skills = list(tracker.skills.get_by_category(category)) if category else tracker.skills.get_all()

    if not skills:
        console.print("[yellow]No skills found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Pass", justify="right")
    table.add_column("Description")

    for skill in skills:
        table.add_row(
            str(skill.id),
            skill.name,
            skill.category,
            f"{skill.passing_score}%",
            skill.description,
        )

    console.print(table)


@app.command()
def categories() -> None:
    """List skill categories."""
    tracker = _open_tracker_or_exit()

    for name in tracker.skills.get_categories():
        count = sum(1 for _ in tracker.skills.get_by_category(name))
        console.print(f"  [bold]{name}[/bold] [dim]({count} skills)[/dim]")


@app.command(name="programs")
def list_programs() -> None:
    """List training programs and their required skills."""
    tracker = _open_tracker_or_exit()

    if not tracker.programs.count:
        console.print("[yellow]No training programs[/yellow]")
        return

    for program in tracker.programs.get_all():
        console.print(f"\n  [bold]{program.id}. {program.name}[/bold]")
        console.print(f"    [dim]{program.description}[/dim]")
        console.print(f"    [dim]minimum:[/dim] {program.minimum_passing_percentage}%")
        for skill_id in program.required_skill_ids:
            skill = tracker.skills.get_by_id(skill_id)
            label = skill.name if skill else f"[red]missing skill {skill_id}[/red]"
            console.print(f"      • {label}")


# =============================================================================
# STUDENT MANAGEMENT
# =============================================================================


@app.command(name="add-student")
def add_student(
    name: str = typer.Argument(..., help="Full name"),
    email: str = typer.Argument(..., help="Email address"),
) -> None:
    """Enroll a new student."""
    tracker = _open_tracker_or_exit()

    try:
        student = tracker.students.add(name, email)
    except ValidationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    _save_or_exit(tracker_repository.save_student, student)
    console.print(f"[green]✓ Student added:[/green] {student}")


@app.command(name="update-student")
def update_student(
    student_id: int = typer.Argument(..., help="Student ID"),
    name: str | None = typer.Option(None, "--name", help="New name"),
    email: str | None = typer.Option(None, "--email", help="New email"),
) -> None:
    """Change a student's name and/or email."""
    if name is None and email is None:
        console.print("[yellow]Nothing to update (use --name and/or --email)[/yellow]")
        raise typer.Exit(code=1)

    tracker = _open_tracker_or_exit()
    student = _get_student_or_exit(tracker, student_id)

    try:
        if name is not None:
            student.update_name(name)
        if email is not None:
            student.update_email(email)
    except ValidationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    _save_or_exit(tracker_repository.save_student, student)
    console.print(f"[green]✓ Student updated:[/green] {student}")


@app.command(name="archive-student")
def archive_student(
    student_id: int = typer.Argument(..., help="Student ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
) -> None:
    """Archive a student (kept in the database, hidden from listings)."""
    tracker = _open_tracker_or_exit()
    student = _get_student_or_exit(tracker, student_id)

    if not yes:
        confirm = typer.confirm(f"Archive {student.name}?")
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(code=0)

    tracker.students.delete(student_id)
    _save_or_exit(tracker_repository.archive_student, student_id)
    console.print(f"[green]✓ Archived:[/green] {student.name}")


@app.command()
def score(
    student_id: int = typer.Argument(..., help="Student ID"),
    skill_id: int = typer.Argument(..., help="Skill ID"),
    value: int = typer.Argument(..., help="Score (0-100)"),
) -> None:
    """Record a student's score on a skill."""
    tracker = _open_tracker_or_exit()
    student = _get_student_or_exit(tracker, student_id)

    skill = tracker.skills.get_by_id(skill_id)
    if skill is None:
        console.print(f"[red]✗ Skill not found: {skill_id}[/red]")
        raise typer.Exit(code=1)

    try:
        progress = student.update_skill_progress(skill_id, value)
    except ValidationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    _save_or_exit(tracker_repository.save_student, student)

    color = STATUS_COLORS[progress.status]
    passed = "passed" if skill.is_passing(value) else f"needs {skill.passing_score}%"
    console.print(
        f"[green]✓[/green] {student.name} - {skill.name}: {value}% "
        f"[{color}]{progress.status.label}[/{color}] [dim]({passed})[/dim]"
    )


# =============================================================================
# CATALOGUE MANAGEMENT
# =============================================================================


@app.command(name="add-skill")
def add_skill(
    name: str = typer.Argument(..., help="Skill name"),
    category: str = typer.Argument(..., help="Category label"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    passing_score: int = typer.Option(70, "--passing-score", "-p", help="Passing score (0-100)"),
) -> None:
    """Add a skill to the catalogue."""
    tracker = _open_tracker_or_exit()

    try:
        skill = tracker.skills.add(name, description, category, passing_score)
    except ValidationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    _save_or_exit(tracker_repository.save_skill, skill)
    console.print(f"[green]✓ Skill added:[/green] {skill}")


@app.command(name="add-program")
def add_program(
    name: str = typer.Argument(..., help="Program name"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    min_percentage: int = typer.Option(
        100, "--min-percentage", "-m", help="Required skills to complete (%)"
    ),
    skill_ids: list[int] = typer.Option([], "--skill", "-s", help="Required skill ID (repeatable)"),
) -> None:
    """Create a training program."""
    tracker = _open_tracker_or_exit()

    unknown = [sid for sid in skill_ids if tracker.skills.get_by_id(sid) is None]
    if unknown:
        console.print(f"[red]✗ Unknown skill IDs: {', '.join(map(str, unknown))}[/red]")
        raise typer.Exit(code=1)

    try:
        program = tracker.programs.add(name, description, min_percentage)
    except ValidationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    for sid in skill_ids:
        program.add_required_skill(sid)

    _save_or_exit(tracker_repository.save_program, program)
    console.print(f"[green]✓ Program added:[/green] {program}")


# =============================================================================
# ANALYTICS
# =============================================================================


@app.command()
def report(
    student_id: int = typer.Argument(..., help="Student ID"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Progress summary for one student."""
    tracker = _open_tracker_or_exit()
    student = _get_student_or_exit(tracker, student_id)

    summary = tracker.analyzer.generate_progress_summary(student)

    if as_json:
        _print_json(summary.to_dict())
        return

    color = _progress_color(summary.overall_percentage)
    console.print(f"\n[bold]{student.name}[/bold] [dim]({student.email})[/dim]")
    console.print(f"Overall: [{color}]{summary.overall_percentage:.1f}%[/{color}]\n")

    console.print(f"[green]Completed ({len(summary.completed)}):[/green]")
    for skill, value in summary.completed:
        console.print(f"  ✓ {skill.name}: {value}%")

    console.print(f"[yellow]In progress ({len(summary.in_progress)}):[/yellow]")
    for skill, value in summary.in_progress:
        console.print(f"  • {skill.name}: {value}% [dim](needs {skill.passing_score}%)[/dim]")

    console.print(f"[dim]Not started ({len(summary.not_started)}):[/dim]")
    for skill in summary.not_started:
        console.print(f"  ○ {skill.name}")


@app.command()
def readiness(
    student_id: int = typer.Argument(..., help="Student ID"),
    program_id: int = typer.Argument(..., help="Training program ID"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Certification readiness of a student for a program."""
    tracker = _open_tracker_or_exit()
    student = _get_student_or_exit(tracker, student_id)

    program = tracker.programs.get_by_id(program_id)
    if program is None:
        console.print(f"[red]✗ Program not found: {program_id}[/red]")
        raise typer.Exit(code=1)

    result = tracker.analyzer.check_certification_readiness(student, program)

    if as_json:
        _print_json(result.to_dict())
        return

    verdict = "[green]READY[/green]" if result.is_ready else "[red]NOT READY[/red]"
    console.print(f"\n[bold]{student.name}[/bold] → [bold]{program.name}[/bold]: {verdict}")
    console.print(
        f"Readiness: {result.readiness_percentage:.1f}% "
        f"[dim](minimum {program.minimum_passing_percentage}%)[/dim]\n"
    )
    for skill in result.completed_skills:
        console.print(f"  [green]✓[/green] {skill.name}")
    for skill in result.incomplete_skills:
        console.print(f"  [red]✗[/red] {skill.name}")


@app.command()
def attention(
    student_id: int = typer.Argument(..., help="Student ID"),
    count: int | None = typer.Option(None, "--count", "-n", help="How many skills to show"),
) -> None:
    """Skills furthest below their passing score."""
    config = load_app_config()
    tracker = _open_tracker_or_exit()
    student = _get_student_or_exit(tracker, student_id)

    items = tracker.analyzer.get_skills_needing_attention(
        student, count if count is not None else config.analytics.attention_count
    )

    if not items:
        console.print(f"[green]✓ {student.name} has passed every skill[/green]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Skill")
    table.add_column("Score", justify="right")
    table.add_column("Pass", justify="right")
    table.add_column("Gap", justify="right", style="red")

    for item in items:
        table.add_row(
            item.skill.name,
            f"{item.score}%",
            f"{item.skill.passing_score}%",
            str(item.gap),
        )

    console.print(table)


@app.command()
def stats(
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
) -> None:
    """Class-wide progress statistics."""
    config = load_app_config()
    tracker = _open_tracker_or_exit()

    result = tracker.analyzer.calculate_class_statistics(
        tracker.students.get_all(),
        top_count=config.analytics.top_performers,
        support_threshold=config.analytics.support_threshold,
    )

    if as_json:
        _print_json(result.to_dict())
        return

    if result.total_students == 0:
        console.print("[yellow]No students enrolled[/yellow]")
        return

    console.print(f"\n[bold]Students:[/bold] {result.total_students}")
    console.print(f"[bold]Average:[/bold]  {result.average_progress:.1f}%")
    console.print(f"[bold]Highest:[/bold]  {result.highest_progress:.1f}%")
    console.print(f"[bold]Lowest:[/bold]   {result.lowest_progress:.1f}%")

    console.print("\n[bold]Top performers:[/bold]")
    for rank, (student, progress) in enumerate(result.top_performers, 1):
        console.print(f"  {rank}. {student.name} - {progress:.1f}%")

    if result.students_needing_support:
        console.print(
            f"\n[bold red]Needing support (< {config.analytics.support_threshold:g}%):[/bold red]"
        )
        for student, progress in result.students_needing_support:
            console.print(f"  • {student.name} - {progress:.1f}%")


if __name__ == "__main__":
    app()
