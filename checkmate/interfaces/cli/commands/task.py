"""Task management CLI commands.

Commands for the task lifecycle: adding, listing, completing, canceling,
skipping, moving between sprints, comments and recurring instances.
"""

from datetime import timedelta
from typing import Optional

import typer

from checkmate.domain.task import SkipForDay
from checkmate.interfaces.cli.common import (
    fail,
    format_duration,
    format_points,
    format_task_line,
    get_services,
    parse_tag_points,
    print_header,
    print_info,
    print_separator,
    print_success,
    resolve_location,
    resolve_sprint,
    unwrap,
)

app = typer.Typer(help="Task management commands")


# =============================================================================
# Commands
# =============================================================================


@app.command("add")
def add(
    title: str = typer.Argument(..., help="Task title"),
    points: list[str] = typer.Option(
        ..., "--points", "-p", help="TAG=POINTS (repeatable), Fibonacci values only"
    ),
    description: str = typer.Option("", "--description", "-d", help="Longer description"),
    sprint: Optional[str] = typer.Option(
        None, "--sprint", "-s", help="Sprint: current, next, an id or a start date"
    ),
    recurrence: Optional[str] = typer.Option(
        None, "--every", help="RRULE for a recurring template, e.g. FREQ=WEEKLY;BYDAY=MO"
    ),
) -> None:
    """Add a task to the backlog or a sprint.

    Example:
        checkmate task add "Write report" -p work=3 --sprint current
    """
    services = get_services()
    tag_points = parse_tag_points(services, points)
    sprint_id = resolve_sprint(services, sprint).id if sprint else None

    task, _ = unwrap(
        services.tasks.create_task(
            title,
            tag_points,
            description=description,
            sprint_id=sprint_id,
            recurrence=recurrence,
        )
    )
    print_success(f"Added: {task.title} ({task.id})")


@app.command("list")
def list_tasks(
    sprint: Optional[str] = typer.Option(
        None, "--sprint", "-s", help="Only this sprint (current, next, id, date) or 'backlog'"
    ),
    all_tasks: bool = typer.Option(False, "--all", "-a", help="Include completed and canceled"),
    templates: bool = typer.Option(False, "--templates", help="Show recurring templates only"),
) -> None:
    """List tasks in manual order."""
    services = get_services()
    if templates:
        tasks = services.tasks.list_templates()
    else:
        location = resolve_location(services, sprint) if sprint else None
        tasks = services.tasks.list_tasks(location, include_closed=all_tasks)

    if not tasks:
        print_info("No tasks.")
        return
    for task in tasks:
        typer.echo(format_task_line(task))


@app.command("show")
def show(task_id: str = typer.Argument(..., help="Task ID")) -> None:
    """Show a task with its sessions and comments."""
    services = get_services()
    task = unwrap(services.tasks.get_task(task_id))

    print_header(task.title)
    typer.echo(f"ID:        {task.id}")
    typer.echo(f"Status:    {task.status.value}")
    typer.echo(f"Location:  {task.location}")
    typer.echo(f"Points:    {format_points(task)} (total {task.total_points})")
    if task.description:
        typer.echo(f"\n{task.description}\n")
    if task.recurrence:
        typer.echo(f"Recurs:    {task.recurrence}")
    if task.parent_id:
        typer.echo(f"Template:  {task.parent_id}")
    if isinstance(task.skip_state, SkipForDay) and not task.skip_state.returned:
        typer.echo(f"Skipped until {task.skip_state.return_at.isoformat()}")
    elif task.skip_state is not None:
        typer.echo("Skipped for now")
    if task.sprint_history:
        typer.echo(f"Previous sprints: {', '.join(task.sprint_history)}")

    if task.sessions:
        print_separator("-")
        typer.echo("Sessions:")
        for session in task.sessions:
            level = session.focus_level.value if session.focus_level else "-"
            manual = " (manual)" if session.is_manual else ""
            typer.echo(
                f"  {session.started_at:%Y-%m-%d %H:%M}  {session.status.value:<11} "
                f"{format_duration(session.duration_seconds):>7}  {level}{manual}"
            )

    if task.comments:
        print_separator("-")
        typer.echo("Comments:")
        for comment in task.comments:
            flag = ""
            if comment.is_skip_justification:
                flag = " [skip]"
            elif comment.is_cancel_justification:
                flag = " [cancel]"
            typer.echo(f"  {comment.id}{flag}: {comment.content}")
    print_separator()


@app.command("done")
def done(task_id: str = typer.Argument(..., help="Task ID")) -> None:
    """Mark a task completed."""
    services = get_services()
    task, event = unwrap(services.tasks.complete_task(task_id))
    print_success(f"Completed: {task.title} (+{event.total_points} points)")


@app.command("cancel")
def cancel(
    task_id: str = typer.Argument(..., help="Task ID"),
    reason: str = typer.Option(..., "--reason", "-r", help="Why the task is canceled"),
) -> None:
    """Cancel a task with a justification."""
    services = get_services()
    task, _ = unwrap(services.tasks.cancel_task(task_id, reason))
    print_success(f"Canceled: {task.title}")


@app.command("skip")
def skip(
    task_id: str = typer.Argument(..., help="Task ID"),
    for_day: bool = typer.Option(False, "--day", help="Hide the task until tomorrow"),
    reason: Optional[str] = typer.Option(
        None, "--reason", "-r", help="Justification (required with --day)"
    ),
) -> None:
    """Skip a task for now, or for the rest of the day."""
    services = get_services()
    if for_day and not (reason and reason.strip()):
        fail("A reason is required to skip for the day (--reason)")
    task, _ = unwrap(services.tasks.skip_task(task_id, for_day=for_day, justification=reason))
    if for_day:
        print_success(f"Skipped for today: {task.title}")
    else:
        print_success(f"Skipped for now: {task.title}")


@app.command("unskip")
def unskip(task_id: str = typer.Argument(..., help="Task ID")) -> None:
    """Clear any skip on a task."""
    services = get_services()
    task = unwrap(services.tasks.clear_skip(task_id))
    print_success(f"Back in the queue: {task.title}")


@app.command("move")
def move(
    task_id: str = typer.Argument(..., help="Task ID"),
    to: str = typer.Argument(..., help="'backlog', 'current', 'next', a sprint id or start date"),
) -> None:
    """Move a task between the backlog and sprints."""
    services = get_services()
    if to == "backlog":
        task, _ = unwrap(services.tasks.move_to_backlog(task_id))
        print_success(f"Moved to backlog: {task.title}")
        return

    sprint = resolve_sprint(services, to)
    task, _ = unwrap(services.tasks.move_to_sprint(task_id, sprint.id))
    print_success(f"Moved to sprint {sprint.start_date.isoformat()}: {task.title}")


@app.command("comment")
def comment(
    task_id: str = typer.Argument(..., help="Task ID"),
    content: str = typer.Argument(..., help="Comment text"),
) -> None:
    """Add a comment to a task."""
    services = get_services()
    _, added = unwrap(services.tasks.add_comment(task_id, content))
    print_success(f"Comment added ({added.id})")


@app.command("uncomment")
def uncomment(
    task_id: str = typer.Argument(..., help="Task ID"),
    comment_id: str = typer.Argument(..., help="Comment ID"),
) -> None:
    """Delete a comment. Skip and cancel justifications cannot be deleted."""
    services = get_services()
    unwrap(services.tasks.delete_comment(task_id, comment_id))
    print_success("Comment deleted")


@app.command("spawn")
def spawn(
    template_id: Optional[str] = typer.Argument(None, help="Template ID; omit to spawn all due"),
    days: int = typer.Option(7, "--days", help="Look-ahead window when spawning all due"),
) -> None:
    """Spawn instances of recurring templates.

    With a template ID, spawns exactly one instance. Without, spawns every
    instance owed for the next DAYS days.
    """
    services = get_services()
    if template_id:
        task, _ = unwrap(services.tasks.spawn_instance(template_id))
        print_success(f"Spawned: {task.title} ({task.id})")
        return

    now = services.clock.now()
    spawned = unwrap(services.tasks.spawn_due_instances(now, now + timedelta(days=days)))
    if not spawned:
        print_info("Nothing to spawn.")
        return
    for task in spawned:
        typer.echo(f"Spawned: {task.title} ({task.id})")
    print_success(f"{len(spawned)} instance(s) spawned")
