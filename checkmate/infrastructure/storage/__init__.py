"""Storage infrastructure for Checkmate.

Repository implementations over in-memory or JSON-file backends, plus
whole-workspace snapshots.
"""

from checkmate.infrastructure.storage.backends import (
    InMemoryCollection,
    JsonFileCollection,
)
from checkmate.infrastructure.storage.json_storage import JsonStorage, StorageError
from checkmate.infrastructure.storage.repositories import (
    Repositories,
    RoutineStore,
    SprintStore,
    TagStore,
    TaskStore,
    in_memory_repositories,
    json_repositories,
)
from checkmate.infrastructure.storage.snapshot import (
    ImportSummary,
    Snapshot,
    export_to_file,
    import_from_file,
    restore_snapshot,
    take_snapshot,
)

__all__ = [
    "JsonStorage",
    "StorageError",
    "InMemoryCollection",
    "JsonFileCollection",
    "Repositories",
    "TaskStore",
    "TagStore",
    "SprintStore",
    "RoutineStore",
    "in_memory_repositories",
    "json_repositories",
    "Snapshot",
    "ImportSummary",
    "take_snapshot",
    "restore_snapshot",
    "export_to_file",
    "import_from_file",
]
