"""Repository interfaces for each aggregate.

Implementations are synchronous. Finders return None when nothing matches;
``save`` inserts or replaces by id.
"""

from datetime import date
from typing import Protocol

from checkmate.domain.routine.models import Routine
from checkmate.domain.sprint.models import Sprint
from checkmate.domain.tag.models import Tag
from checkmate.domain.task.models import Task
from checkmate.domain.types import BacklogLocation, SprintLocation


class TaskRepository(Protocol):
    """Interface for storing tasks."""

    def save(self, task: Task) -> None: ...

    def find_by_id(self, task_id: str) -> Task | None: ...

    def find_all(self) -> list[Task]: ...

    def delete(self, task_id: str) -> bool:
        """Remove a task. Returns False if it did not exist."""
        ...

    def find_by_location(self, location: BacklogLocation | SprintLocation) -> list[Task]: ...

    def find_templates(self) -> list[Task]:
        """Tasks carrying a recurrence rule."""
        ...

    def find_instances(self, parent_id: str) -> list[Task]:
        """Tasks spawned from the given template."""
        ...


class TagRepository(Protocol):
    """Interface for storing tags."""

    def save(self, tag: Tag) -> None: ...

    def find_by_id(self, tag_id: str) -> Tag | None: ...

    def find_all(self) -> list[Tag]: ...

    def delete(self, tag_id: str) -> bool: ...

    def find_by_name(self, name: str) -> Tag | None:
        """Case-insensitive lookup by display name."""
        ...


class SprintRepository(Protocol):
    """Interface for storing sprints."""

    def save(self, sprint: Sprint) -> None: ...

    def find_by_id(self, sprint_id: str) -> Sprint | None: ...

    def find_all(self) -> list[Sprint]: ...

    def delete(self, sprint_id: str) -> bool: ...

    def find_by_start_date(self, start_date: date) -> Sprint | None: ...

    def find_current(self, today: date) -> Sprint | None:
        """Sprint whose window contains ``today``."""
        ...

    def find_upcoming(self, today: date, limit: int) -> list[Sprint]:
        """Sprints starting after ``today``, soonest first."""
        ...


class RoutineRepository(Protocol):
    """Interface for storing routines. ``find_all`` keeps insertion order."""

    def save(self, routine: Routine) -> None: ...

    def find_by_id(self, routine_id: str) -> Routine | None: ...

    def find_all(self) -> list[Routine]: ...

    def delete(self, routine_id: str) -> bool: ...

    def find_by_name(self, name: str) -> Routine | None: ...
