"""Focus session CLI commands."""

from typing import Optional

import typer

from checkmate.domain.task import FocusLevel
from checkmate.interfaces.cli.common import (
    fail,
    format_duration,
    get_services,
    parse_timestamp,
    print_info,
    print_success,
    unwrap,
)

app = typer.Typer(help="Focus session commands")

FOCUS_CHOICES = ", ".join(level.value for level in FocusLevel)


def _running_task_id(task_id: str | None) -> str:
    """Explicit task id, or the only task with a running session."""
    if task_id:
        return task_id
    running = get_services().tasks.sessions_in_progress()
    if not running:
        fail("No session in progress")
    if len(running) > 1:
        fail("Several sessions are running; pass a task ID")
    return running[0].id


@app.command("start")
def start(
    task_id: str = typer.Argument(..., help="Task ID"),
    minutes: Optional[int] = typer.Option(
        None, "--minutes", "-m", help="Planned length (defaults to the configured value)"
    ),
) -> None:
    """Start a focus session on a task."""
    services = get_services()
    task, event = unwrap(services.tasks.start_session(task_id, minutes))
    planned = f" for {event.planned_minutes} min" if event.planned_minutes else ""
    print_success(f"Session started on '{task.title}'{planned}")


@app.command("end")
def end(
    task_id: Optional[str] = typer.Argument(None, help="Task ID (defaults to the running session)"),
    focus: str = typer.Option("neutral", "--focus", "-f", help=f"Focus level: {FOCUS_CHOICES}"),
    note: Optional[str] = typer.Option(None, "--note", "-n", help="Note about the session"),
) -> None:
    """End the running session and rate your focus."""
    target = _running_task_id(task_id)
    services = get_services()
    task, event = unwrap(services.tasks.end_session(target, focus, note=note))
    print_success(
        f"Session on '{task.title}' ended after {format_duration(event.duration_seconds)} "
        f"({event.focus_level})"
    )


@app.command("abandon")
def abandon(
    task_id: Optional[str] = typer.Argument(None, help="Task ID (defaults to the running session)"),
) -> None:
    """Abandon the running session without recording focus."""
    target = _running_task_id(task_id)
    services = get_services()
    task, _ = unwrap(services.tasks.abandon_session(target))
    print_info(f"Session on '{task.title}' abandoned")


@app.command("log")
def log(
    task_id: str = typer.Argument(..., help="Task ID"),
    start_at: str = typer.Option(..., "--start", help="Start time (ISO, e.g. 2025-01-06T09:00)"),
    end_at: str = typer.Option(..., "--end", help="End time (ISO)"),
    focus: str = typer.Option("neutral", "--focus", "-f", help=f"Focus level: {FOCUS_CHOICES}"),
    note: Optional[str] = typer.Option(None, "--note", "-n", help="Note about the session"),
) -> None:
    """Log a session that happened away from the timer."""
    services = get_services()
    task, event = unwrap(
        services.tasks.add_manual_session(
            task_id,
            parse_timestamp(start_at),
            parse_timestamp(end_at),
            focus,
            note=note,
        )
    )
    print_success(f"Logged {format_duration(event.duration_seconds)} on '{task.title}'")
