"""CLI interface for Checkmate using Typer.

Usage:
    checkmate task add "Write report" -p work=3 --sprint current
    checkmate focus               # What to work on now
    checkmate session start ID    # Start a focus session
    checkmate sprint health       # Capacity check for this week

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (task, session, sprint, tag, routine)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from checkmate import __version__
from checkmate.domain.shared import Err
from checkmate.global_config import CheckmateConfig, get_config_dir, get_global_config, save_global_config
from checkmate.infrastructure.storage import export_to_file, import_from_file
from checkmate.interfaces.cli.commands import routine, session, sprint, tag, task
from checkmate.interfaces.cli.common import (
    fail,
    format_duration,
    format_task_line,
    get_services,
    print_header,
    print_info,
    print_separator,
    print_success,
    print_warning,
    resolve_location,
    unwrap,
)

app = typer.Typer(
    name="checkmate",
    help="Weekly sprints, focus queues and capacity for one person",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"checkmate version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log what the services do"),
) -> None:
    """Checkmate - plan the week, then work one task at a time."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(task.app, name="task")
app.add_typer(session.app, name="session")
app.add_typer(sprint.app, name="sprint")
app.add_typer(tag.app, name="tag")
app.add_typer(routine.app, name="routine")


# =============================================================================
# Top-Level Commands
# =============================================================================


@app.command("focus")
def focus(
    sprint_ref: Optional[str] = typer.Option(
        None, "--sprint", "-s", help="current, next, an id, a start date or 'backlog'"
    ),
    routine_ref: Optional[str] = typer.Option(
        None, "--routine", "-r", help="Use this routine instead of the active one"
    ),
    no_routine: bool = typer.Option(False, "--no-routine", help="Ignore routines"),
) -> None:
    """Show the focus task and what comes up next.

    Without --sprint, the current sprint is used when one exists.
    """
    services = get_services()
    if sprint_ref:
        location = resolve_location(services, sprint_ref)
    else:
        current = services.sprints.current_sprint()
        location = resolve_location(services, "current") if current else None

    routine_id = None
    if routine_ref:
        routine_id = unwrap(services.routines.get_routine(routine_ref)).id

    view = unwrap(
        services.focus.get_focus(location, use_routine=not no_routine, routine_id=routine_id)
    )
    queue = view.queue

    if view.routine is not None:
        print_info(f"Routine: {view.routine.name}")
    if queue.focus_task is None:
        print_success("Nothing to focus on.")
    else:
        print_header(f"Focus: {queue.focus_task.title}")
        typer.echo(format_task_line(queue.focus_task))
        if queue.up_next:
            print_separator("-")
            typer.echo("Up next:")
            for upcoming in queue.up_next:
                typer.echo(f"  {format_task_line(upcoming)}")
    if queue.hidden_count:
        typer.echo(f"{queue.hidden_count} task(s) skipped for today")
    if view.filtered_out:
        typer.echo(f"{view.filtered_out} task(s) outside the routine")


@app.command("stats")
def stats() -> None:
    """Show today's and this week's progress."""
    services = get_services()
    summary = services.stats.summary()

    print_header("Stats")
    typer.echo(
        f"Today:      {summary.today.tasks_completed} task(s), "
        f"{summary.today.points_completed} point(s), "
        f"{format_duration(summary.today.focus_seconds)} focused"
    )
    typer.echo(
        f"This week:  {summary.week.tasks_completed} task(s), "
        f"{summary.week.points_completed} point(s), "
        f"{format_duration(summary.week.focus_seconds)} focused"
    )
    for tag_id, points in sorted(summary.week.points_by_tag.items()):
        typer.echo(f"  {tag_id:<20} {points:>4}")
    focus_stats = summary.focus
    if focus_stats.total:
        typer.echo(
            f"Focus (7d): {focus_stats.focused_percent:.0f}% focused over "
            f"{focus_stats.total} session(s)"
        )
    typer.echo(f"Streak:     {summary.streak_days} day(s)")


@app.command("export")
def export(
    path: Path = typer.Argument(..., help="File to write"),
) -> None:
    """Export all data to a JSON snapshot."""
    services = get_services()
    result = export_to_file(services.repos, path, services.clock.now())
    if isinstance(result, Err):
        fail(result.error)
    snapshot = result.value
    print_success(
        f"Exported {len(snapshot.tasks)} task(s), {len(snapshot.sprints)} sprint(s), "
        f"{len(snapshot.tags)} tag(s), {len(snapshot.routines)} routine(s) to {path}"
    )


@app.command("import")
def import_(
    path: Path = typer.Argument(..., help="Snapshot file to read"),
    merge: bool = typer.Option(False, "--merge", help="Keep existing data and upsert by id"),
) -> None:
    """Import a JSON snapshot. Replaces existing data unless --merge is given."""
    services = get_services()
    result = import_from_file(services.repos, path, merge=merge)
    if isinstance(result, Err):
        fail(result.error)
    summary = result.value
    print_success(
        f"Imported {summary.tasks} task(s), {summary.sprints} sprint(s), "
        f"{summary.tags} tag(s), {summary.routines} routine(s)"
    )
    services.tags.ensure_untagged()


@app.command("config")
def config(
    key: Optional[str] = typer.Argument(None, help="Setting to change"),
    value: Optional[str] = typer.Argument(None, help="New value"),
) -> None:
    """Show configuration, or set one value.

    Example:
        checkmate config default_session_minutes 50
    """
    current = get_global_config()
    if key is None:
        typer.echo(f"Config dir: {get_config_dir()}")
        typer.echo(f"Data dir:   {current.resolve_data_dir()}")
        typer.echo(json.dumps(current.model_dump(mode="json"), indent=2))
        return

    data = current.model_dump(mode="json")
    if key not in data or key == "health":
        fail(f"Unknown setting '{key}'. Settings: {', '.join(k for k in data if k != 'health')}")
    if value is None:
        typer.echo(f"{key} = {data[key]}")
        return

    data[key] = None if value.lower() in ("", "none", "null") else value
    try:
        updated = CheckmateConfig.model_validate(data)
    except ValidationError as e:
        fail(f"Invalid value for {key}: {e.errors()[0]['msg']}")
    save_global_config(updated)
    if key == "data_dir":
        print_warning("Existing data is not moved to the new directory")
    print_success(f"{key} = {getattr(updated, key)}")


__all__ = ["app"]
