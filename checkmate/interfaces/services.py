"""Service wiring shared by the CLI and the API.

Builds every application service over one set of repositories, using the
global configuration for storage location and tuning values.
"""

from dataclasses import dataclass

from checkmate.application import (
    Clock,
    FocusService,
    RoutineService,
    SprintService,
    StatsService,
    SystemClock,
    TagService,
    TaskService,
)
from checkmate.global_config import CheckmateConfig, get_global_config
from checkmate.infrastructure.engines import RRuleRecurrenceCalculator, SimpleEvalExpressionEvaluator
from checkmate.infrastructure.storage import Repositories, json_repositories


@dataclass(frozen=True)
class Services:
    config: CheckmateConfig
    repos: Repositories
    clock: Clock
    tasks: TaskService
    focus: FocusService
    sprints: SprintService
    tags: TagService
    routines: RoutineService
    stats: StatsService


def build_services(
    config: CheckmateConfig | None = None,
    repos: Repositories | None = None,
    clock: Clock | None = None,
) -> Services:
    """Wire services together.

    Args:
        config: Defaults to the global configuration.
        repos: Defaults to JSON repositories under the configured data dir.
        clock: Defaults to the system clock.
    """
    config = config or get_global_config()
    repos = repos or json_repositories(config.resolve_data_dir())
    clock = clock or SystemClock()
    evaluator = SimpleEvalExpressionEvaluator()
    zone = config.zone()

    return Services(
        config=config,
        repos=repos,
        clock=clock,
        tasks=TaskService(
            repos.tasks,
            repos.sprints,
            recurrence=RRuleRecurrenceCalculator(),
            clock=clock,
            default_session_minutes=config.default_session_minutes,
        ),
        focus=FocusService(
            repos.tasks, repos.routines, repos.tags, evaluator, clock=clock, timezone=zone
        ),
        sprints=SprintService(
            repos.sprints,
            repos.tasks,
            repos.tags,
            clock=clock,
            thresholds=config.health,
            default_capacity=config.default_tag_capacity,
            upcoming_limit=config.upcoming_sprint_limit,
        ),
        tags=TagService(repos.tags, default_capacity=config.default_tag_capacity),
        routines=RoutineService(repos.routines, evaluator, clock=clock, timezone=zone),
        stats=StatsService(repos.tasks, clock=clock),
    )
