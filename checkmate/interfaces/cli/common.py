"""Shared utilities for Checkmate CLI commands.

This module provides common utilities used across CLI commands:
- Service access over the configured data directory
- Result unwrapping that turns domain errors into exit code 1
- Parsing of tag points, sprint references and timestamps
- Formatted output helpers (error, success, info)
"""

from datetime import UTC, datetime, timedelta
from typing import NoReturn, TypeVar

import typer

from checkmate.domain.shared import DomainError, Err, Result, unwrap_or
from checkmate.domain.sprint import Sprint
from checkmate.domain.task import Task
from checkmate.domain.types import BACKLOG, BacklogLocation, SprintLocation
from checkmate.infrastructure.storage import StorageError
from checkmate.interfaces.services import Services, build_services

T = TypeVar("T")


# =============================================================================
# Services
# =============================================================================


def get_services() -> Services:
    """Build services over the configured data directory.

    Raises:
        typer.Exit: If the data files cannot be opened.
    """
    try:
        services = build_services()
        services.tags.ensure_untagged()
        return services
    except StorageError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def unwrap(result: Result[T, DomainError]) -> T:
    """Return the Ok value or print the error and exit with status 1."""
    if isinstance(result, Err):
        print_error(result.error.message)
        raise typer.Exit(1)
    return result.value


def fail(msg: str) -> NoReturn:
    """Print an error and exit with status 1."""
    print_error(msg)
    raise typer.Exit(1)


# =============================================================================
# Parsing
# =============================================================================


def parse_tag_points(services: Services, items: list[str]) -> dict[str, int]:
    """Turn ``["work=5", "admin=1"]`` into ``{tag_id: points}``.

    Tags are looked up by id or name. A bare number assigns the points to
    the untagged tag.

    Raises:
        typer.Exit: On malformed input or unknown tags.
    """
    points: dict[str, int] = {}
    for item in items:
        name, sep, raw = item.rpartition("=")
        if not sep:
            name, raw = "untagged", item
        try:
            value = int(raw)
        except ValueError:
            fail(f"Invalid points in '{item}' (expected TAG=POINTS)")
        tag = services.tags.resolve(name.strip())
        if tag is None:
            fail(f"Unknown tag '{name.strip()}'. Create it with: checkmate tag add {name.strip()}")
        points[tag.id] = value
    return points


def resolve_sprint(services: Services, ref: str) -> Sprint:
    """Find a sprint by ``current``, ``next``, its id or its start date."""
    if ref == "current":
        return services.sprints.ensure_current_sprint()
    if ref == "next":
        current = services.sprints.ensure_current_sprint()
        start = current.end_date + timedelta(days=1)
        existing = services.repos.sprints.find_by_start_date(start)
        if existing is not None:
            return existing
        return unwrap(services.sprints.create_sprint(start))

    found = unwrap_or(services.sprints.get_sprint(ref), None)
    if found is not None:
        return found
    try:
        day = datetime.fromisoformat(ref).date()
    except ValueError:
        fail(f"Sprint not found: {ref}")
    match = services.repos.sprints.find_by_start_date(day)
    if match is None:
        fail(f"No sprint starts on {day.isoformat()}")
    return match


def resolve_location(services: Services, sprint_ref: str | None) -> BacklogLocation | SprintLocation:
    if sprint_ref is None or sprint_ref == "backlog":
        return BACKLOG
    return SprintLocation(sprint_id=resolve_sprint(services, sprint_ref).id)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        fail(f"Invalid timestamp '{value}' (expected ISO format, e.g. 2025-01-06T09:30)")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


# =============================================================================
# Output
# =============================================================================


def print_error(msg: str) -> None:
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


def format_points(task: Task) -> str:
    return ", ".join(f"{tag}:{points}" for tag, points in task.tag_points.items())


def format_task_line(task: Task) -> str:
    """One-line summary: id, status marker, title, points."""
    if task.status.is_terminal:
        marker = "[x]" if task.status.value == "completed" else "[-]"
    elif task.is_hidden:
        marker = "[z]"
    elif task.skip_state is not None:
        marker = "[~]"
    else:
        marker = "[ ]"
    extra = " (recurring)" if task.is_template else ""
    return f"{marker} {task.title}{extra}  ({format_points(task)})  {task.id}"


def format_duration(seconds: int) -> str:
    hours, rest = divmod(seconds, 3600)
    minutes = rest // 60
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


__all__ = [
    "get_services",
    "unwrap",
    "fail",
    "parse_tag_points",
    "resolve_sprint",
    "resolve_location",
    "parse_timestamp",
    "print_error",
    "print_success",
    "print_info",
    "print_warning",
    "print_separator",
    "print_header",
    "format_points",
    "format_task_line",
    "format_duration",
]
