"""Sprint CLI commands."""

from typing import Optional

import typer

from checkmate.domain.sprint import HealthStatus, Sprint
from checkmate.interfaces.cli.common import (
    get_services,
    print_header,
    print_info,
    print_success,
    resolve_sprint,
    unwrap,
)

app = typer.Typer(help="Sprint commands")

HEALTH_COLORS = {
    HealthStatus.ON_TRACK: typer.colors.GREEN,
    HealthStatus.AT_RISK: typer.colors.YELLOW,
    HealthStatus.OFF_TRACK: typer.colors.RED,
}


def _describe(sprint: Sprint, label: str) -> str:
    return f"{label}: {sprint.start_date:%a %Y-%m-%d} to {sprint.end_date:%a %Y-%m-%d}  ({sprint.id})"


@app.command("create")
def create(
    start: str = typer.Argument(..., help="Start date, must be a Sunday (YYYY-MM-DD)"),
) -> None:
    """Create a sprint starting on a Sunday."""
    services = get_services()
    sprint = unwrap(services.sprints.create_sprint(start))
    print_success(_describe(sprint, "Created sprint"))


@app.command("current")
def current() -> None:
    """Show this week's sprint and the upcoming ones."""
    services = get_services()
    sprint = services.sprints.ensure_current_sprint()
    today = services.sprints.today()
    typer.echo(_describe(sprint, Sprint.label(0)))
    typer.echo(f"  {sprint.days_remaining(today)} day(s) remaining")
    for index, upcoming in enumerate(services.sprints.upcoming_sprints(), start=1):
        typer.echo(_describe(upcoming, Sprint.label(index)))


@app.command("health")
def health(
    sprint: Optional[str] = typer.Argument(None, help="Sprint (defaults to current)"),
) -> None:
    """Show scheduled points against capacity per tag."""
    services = get_services()
    target = resolve_sprint(services, sprint or "current")
    report = unwrap(services.sprints.health(target.id))

    print_header(f"Sprint {target.start_date.isoformat()}: {report.overall.value}")
    if report.days_remaining is not None:
        typer.echo(f"{report.days_remaining} day(s) remaining")
    if not report.by_tag:
        print_info("Nothing scheduled yet.")
        return
    names = {t.id: t.name for t in services.tags.list_tags()}
    for tag in report.by_tag:
        ratio = f"{tag.ratio:.0%}" if tag.ratio is not None else "n/a"
        name = names.get(tag.tag_id, tag.tag_id)
        line = f"{name:<20} {tag.scheduled:>4} / {tag.capacity:<4} {ratio:>6}  {tag.health.value}"
        typer.echo(typer.style(line, fg=HEALTH_COLORS[tag.health]))


@app.command("capacity")
def capacity(
    tag: str = typer.Argument(..., help="Tag name or ID"),
    value: Optional[int] = typer.Argument(None, help="Capacity for this sprint; omit with --clear"),
    sprint: str = typer.Option("current", "--sprint", "-s", help="Sprint (defaults to current)"),
    clear: bool = typer.Option(False, "--clear", help="Remove the override"),
) -> None:
    """Override a tag's capacity for one sprint."""
    services = get_services()
    target = resolve_sprint(services, sprint)
    found = services.tags.resolve(tag)
    tag_id = found.id if found else tag

    if clear:
        unwrap(services.sprints.clear_capacity_override(target.id, tag_id))
        print_success(f"Capacity override for {tag_id} cleared")
        return
    if value is None:
        print_info(f"{tag_id}: {target.capacity_overrides.get(tag_id, 'no override')}")
        return

    unwrap(services.sprints.set_capacity_override(target.id, tag_id, value))
    print_success(f"Capacity for {tag_id} set to {value} in sprint {target.start_date.isoformat()}")
