"""Task domain events.

Immutable records of task state changes. Application services return them
with the updated aggregate; they carry no behaviour.
"""

from typing import Literal

from checkmate.domain.shared.events import DomainEvent


class TaskCreated(DomainEvent):
    """A task (or recurring template, or spawned instance) was created."""

    title: str
    tag_points: dict[str, int]
    parent_id: str | None = None


class TaskCompleted(DomainEvent):
    """A task reached the completed state."""

    total_points: int


class TaskCanceled(DomainEvent):
    """A task was canceled with a justification."""

    justification: str


class TaskSkipped(DomainEvent):
    """A task was skipped for now or for the day."""

    skip_type: Literal["for_now", "for_day"]
    justification: str | None = None


class TaskMovedToSprint(DomainEvent):
    sprint_id: str
    previous_sprint_id: str | None = None


class TaskMovedToBacklog(DomainEvent):
    previous_sprint_id: str | None = None


class SessionStarted(DomainEvent):
    """A focus session began on a task."""

    session_id: str
    planned_minutes: int | None = None


class SessionCompleted(DomainEvent):
    """A focus session ended normally (live or logged manually)."""

    session_id: str
    focus_level: str
    duration_seconds: int
    is_manual: bool = False


class SessionAbandoned(DomainEvent):
    session_id: str
