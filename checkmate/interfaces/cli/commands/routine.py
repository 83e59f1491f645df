"""Routine CLI commands."""

import typer

from checkmate.interfaces.cli.common import get_services, print_info, print_success, unwrap

app = typer.Typer(help="Routine commands")


@app.command("add")
def add(
    name: str = typer.Argument(..., help="Routine name"),
    priority: int = typer.Option(5, "--priority", "-p", help="1-10, higher wins"),
    when: str = typer.Option(
        "", "--when", help="Activation expression, e.g. 'is_weekday and 9 <= hour < 12'"
    ),
    tasks: str = typer.Option("", "--tasks", help="Task filter, e.g. 'hasTag(\"work\")'"),
    icon: str = typer.Option("", "--icon", help="Icon (emoji)"),
) -> None:
    """Create a routine."""
    services = get_services()
    routine = unwrap(
        services.routines.create_routine(
            name,
            priority,
            task_filter_expression=tasks,
            activation_expression=when,
            icon=icon,
        )
    )
    print_success(f"Created routine {routine.name} ({routine.id})")


@app.command("list")
def list_routines() -> None:
    """List routines in evaluation order."""
    services = get_services()
    routines = services.routines.list_routines()
    if not routines:
        print_info("No routines.")
        return
    for routine in routines:
        typer.echo(f"[{routine.priority:>2}] {routine.name}  ({routine.id})")
        if routine.activation_expression:
            typer.echo(f"     when:  {routine.activation_expression}")
        if routine.task_filter_expression:
            typer.echo(f"     tasks: {routine.task_filter_expression}")


@app.command("active")
def active() -> None:
    """Show the routine that is live right now."""
    services = get_services()
    routine = unwrap(services.routines.active_routine())
    if routine is None:
        print_info("No routine active; showing all tasks.")
        return
    typer.echo(f"Active: {routine.name} (priority {routine.priority})")
