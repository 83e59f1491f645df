"""Storage backends for repositories.

A collection loads and stores every aggregate of one kind as an ordered
``id -> model`` mapping. Repositories sit on top and add the finders.
Insertion order is preserved; saving an existing id replaces it in place.
"""

import logging
from pathlib import Path
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from checkmate.domain.shared.result import Err
from checkmate.infrastructure.storage.json_storage import JsonStorage, StorageError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

SCHEMA_VERSION = 1


class Collection(Protocol[M]):
    def load(self) -> dict[str, M]: ...

    def store(self, items: dict[str, M]) -> None: ...


class InMemoryCollection(Generic[M]):
    """Keeps aggregates in a dict; used by tests and throwaway sessions."""

    def __init__(self) -> None:
        self._items: dict[str, M] = {}

    def load(self) -> dict[str, M]:
        return dict(self._items)

    def store(self, items: dict[str, M]) -> None:
        self._items = dict(items)


class JsonFileCollection(Generic[M]):
    """Keeps aggregates in one JSON file: ``{"version": 1, "items": [...]}``.

    A missing file is an empty collection. Unreadable or invalid files raise
    StorageError rather than being silently replaced.
    """

    def __init__(self, path: Path, model: type[M], storage: JsonStorage | None = None) -> None:
        self._path = path
        self._model = model
        self._storage = storage or JsonStorage()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, M]:
        if not self._path.exists():
            return {}

        result = self._storage.load_json(self._path)
        if isinstance(result, Err):
            logger.error(result.error)
            raise StorageError(result.error)

        try:
            models = [self._model.model_validate(raw) for raw in result.value.get("items", [])]
        except ValidationError as e:
            logger.error(f"Invalid {self._model.__name__} data in {self._path}: {e}")
            raise StorageError(f"Invalid {self._model.__name__} data in {self._path}") from e

        return {m.id: m for m in models}

    def store(self, items: dict[str, M]) -> None:
        data = {
            "version": SCHEMA_VERSION,
            "items": [m.model_dump(mode="json") for m in items.values()],
        }
        result = self._storage.save_json(self._path, data)
        if isinstance(result, Err):
            logger.error(result.error)
            raise StorageError(result.error)
