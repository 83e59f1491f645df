"""Shared fixtures.

Everything runs against in-memory repositories and a fixed clock set to
Wednesday 2025-01-08 10:00 UTC, inside the sprint that starts Sunday
2025-01-05.
"""

from datetime import UTC, datetime, timedelta

import pytest

from checkmate.domain.task import Task
from checkmate.global_config import CheckmateConfig
from checkmate.infrastructure.engines import RRuleRecurrenceCalculator, SimpleEvalExpressionEvaluator
from checkmate.infrastructure.storage import in_memory_repositories
from checkmate.interfaces.services import build_services

NOW = datetime(2025, 1, 8, 10, 0, tzinfo=UTC)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> datetime:
        self._now += timedelta(**kwargs)
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def evaluator():
    return SimpleEvalExpressionEvaluator()


@pytest.fixture
def recurrence():
    return RRuleRecurrenceCalculator()


@pytest.fixture
def repos():
    return in_memory_repositories()


@pytest.fixture
def services(repos, clock):
    built = build_services(config=CheckmateConfig(timezone="UTC"), repos=repos, clock=clock)
    built.tags.ensure_untagged()
    return built


@pytest.fixture
def make_task(now):
    """Factory for valid active tasks."""

    def _make(title="Task", points=None, **kwargs):
        return Task.create(title, points or {"work": 3}, kwargs.pop("now", now), **kwargs).value

    return _make
