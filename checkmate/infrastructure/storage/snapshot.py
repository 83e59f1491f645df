"""Whole-workspace export and import.

A snapshot bundles every task, tag, sprint and routine into one JSON
document that can be moved between machines or kept as a backup.
"""

import logging
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from checkmate.domain.routine.models import Routine
from checkmate.domain.shared.result import Err, Ok, Result, is_ok
from checkmate.domain.sprint.models import Sprint
from checkmate.domain.tag.models import Tag
from checkmate.domain.task.models import Task
from checkmate.infrastructure.storage.json_storage import JsonStorage
from checkmate.infrastructure.storage.repositories import Repositories

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"


class Snapshot(BaseModel):
    version: str = SNAPSHOT_VERSION
    exported_at: datetime
    tasks: list[Task] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    sprints: list[Sprint] = Field(default_factory=list)
    routines: list[Routine] = Field(default_factory=list)


class ImportSummary(BaseModel):
    tasks: int = 0
    tags: int = 0
    sprints: int = 0
    routines: int = 0


def take_snapshot(repos: Repositories, now: datetime) -> Snapshot:
    return Snapshot(
        exported_at=now,
        tasks=repos.tasks.find_all(),
        tags=repos.tags.find_all(),
        sprints=repos.sprints.find_all(),
        routines=repos.routines.find_all(),
    )


def restore_snapshot(repos: Repositories, snapshot: Snapshot, merge: bool = False) -> ImportSummary:
    """Load a snapshot into the repositories.

    Without ``merge`` existing data is replaced. With ``merge`` imported
    aggregates overwrite existing ones that share an id and everything else
    is kept.
    """
    if merge:
        repos.tags.save_many(snapshot.tags)
        repos.sprints.save_many(snapshot.sprints)
        repos.routines.save_many(snapshot.routines)
        repos.tasks.save_many(snapshot.tasks)
    else:
        repos.tags.replace_all(snapshot.tags)
        repos.sprints.replace_all(snapshot.sprints)
        repos.routines.replace_all(snapshot.routines)
        repos.tasks.replace_all(snapshot.tasks)

    summary = ImportSummary(
        tasks=len(snapshot.tasks),
        tags=len(snapshot.tags),
        sprints=len(snapshot.sprints),
        routines=len(snapshot.routines),
    )
    logger.info(f"Imported snapshot from {snapshot.exported_at.isoformat()}: {summary}")
    return summary


def export_to_file(
    repos: Repositories,
    path: Path,
    now: datetime,
    storage: JsonStorage | None = None,
) -> Result[Snapshot, str]:
    snapshot = take_snapshot(repos, now)
    saved = (storage or JsonStorage()).save_json(path, snapshot.model_dump(mode="json"))
    return Ok(snapshot) if is_ok(saved) else saved


def import_from_file(
    repos: Repositories,
    path: Path,
    merge: bool = False,
    storage: JsonStorage | None = None,
) -> Result[ImportSummary, str]:
    """Read a snapshot file and restore it.

    Returns:
        Ok(ImportSummary), or Err(str) if the file is unreadable, has an
        unsupported version, or fails validation. Nothing is written on Err.
    """
    loaded = (storage or JsonStorage()).load_json(path)
    if isinstance(loaded, Err):
        return loaded

    version = str(loaded.value.get("version", ""))
    if not version.startswith("1."):
        return Err(f"Unsupported export version: {version or 'missing'}")

    try:
        snapshot = Snapshot.model_validate(loaded.value)
    except ValidationError as e:
        return Err(f"Invalid snapshot in {path}: {e.error_count()} problem(s); first: {e.errors()[0]['msg']}")

    return Ok(restore_snapshot(repos, snapshot, merge=merge))
