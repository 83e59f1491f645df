"""Repository implementations for domain aggregates.

Each repository works over a backend (in memory or a JSON file) and adds
the aggregate-specific finders. Finders return None when nothing matches.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel

from checkmate.domain.routine.models import Routine
from checkmate.domain.sprint.models import Sprint
from checkmate.domain.tag.models import Tag
from checkmate.domain.task.models import Task
from checkmate.domain.types import BacklogLocation, SprintLocation
from checkmate.infrastructure.storage.backends import (
    Collection,
    InMemoryCollection,
    JsonFileCollection,
)
from checkmate.infrastructure.storage.json_storage import JsonStorage

M = TypeVar("M", bound=BaseModel)


class _Repository(Generic[M]):
    """save / find_by_id / find_all / delete over a backend."""

    def __init__(self, backend: Collection[M]) -> None:
        self._backend = backend

    def save(self, item: M) -> None:
        items = self._backend.load()
        items[item.id] = item
        self._backend.store(items)

    def save_many(self, items: list[M]) -> None:
        if not items:
            return
        current = self._backend.load()
        for item in items:
            current[item.id] = item
        self._backend.store(current)

    def find_by_id(self, item_id: str) -> M | None:
        return self._backend.load().get(item_id)

    def find_all(self) -> list[M]:
        return list(self._backend.load().values())

    def delete(self, item_id: str) -> bool:
        items = self._backend.load()
        if item_id not in items:
            return False
        del items[item_id]
        self._backend.store(items)
        return True

    def replace_all(self, items: list[M]) -> None:
        self._backend.store({item.id: item for item in items})


class TaskStore(_Repository[Task]):
    """Task repository."""

    def find_by_location(self, location: BacklogLocation | SprintLocation) -> list[Task]:
        return [t for t in self.find_all() if t.is_in(location)]

    def find_templates(self) -> list[Task]:
        return [t for t in self.find_all() if t.is_template]

    def find_instances(self, parent_id: str) -> list[Task]:
        return [t for t in self.find_all() if t.parent_id == parent_id]


class TagStore(_Repository[Tag]):
    """Tag repository."""

    def find_by_name(self, name: str) -> Tag | None:
        wanted = name.strip().casefold()
        return next((t for t in self.find_all() if t.name.casefold() == wanted), None)


class SprintStore(_Repository[Sprint]):
    """Sprint repository."""

    def find_by_start_date(self, start_date: date) -> Sprint | None:
        return next((s for s in self.find_all() if s.start_date == start_date), None)

    def find_current(self, today: date) -> Sprint | None:
        return next((s for s in self.find_all() if s.contains(today)), None)

    def find_upcoming(self, today: date, limit: int) -> list[Sprint]:
        upcoming = sorted(
            (s for s in self.find_all() if s.is_upcoming(today)),
            key=lambda s: s.start_date,
        )
        return upcoming[:limit]


class RoutineStore(_Repository[Routine]):
    """Routine repository. ``find_all`` keeps insertion order."""

    def find_by_name(self, name: str) -> Routine | None:
        wanted = name.strip().casefold()
        return next((r for r in self.find_all() if r.name.casefold() == wanted), None)


# =============================================================================
# Wiring
# =============================================================================


@dataclass(frozen=True)
class Repositories:
    """One repository per aggregate, sharing a backend kind."""

    tasks: TaskStore
    tags: TagStore
    sprints: SprintStore
    routines: RoutineStore


def in_memory_repositories() -> Repositories:
    return Repositories(
        tasks=TaskStore(InMemoryCollection()),
        tags=TagStore(InMemoryCollection()),
        sprints=SprintStore(InMemoryCollection()),
        routines=RoutineStore(InMemoryCollection()),
    )


def json_repositories(data_dir: Path, storage: JsonStorage | None = None) -> Repositories:
    """Repositories persisted as ``tasks.json``, ``tags.json``... under data_dir."""
    storage = storage or JsonStorage()
    return Repositories(
        tasks=TaskStore(JsonFileCollection(data_dir / "tasks.json", Task, storage)),
        tags=TagStore(JsonFileCollection(data_dir / "tags.json", Tag, storage)),
        sprints=SprintStore(JsonFileCollection(data_dir / "sprints.json", Sprint, storage)),
        routines=RoutineStore(JsonFileCollection(data_dir / "routines.json", Routine, storage)),
    )
