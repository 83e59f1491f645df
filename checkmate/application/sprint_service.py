"""Sprint application service."""

import logging
from datetime import date

from checkmate.application.clock import Clock, SystemClock
from checkmate.domain.sprint import HealthThresholds, Sprint, SprintHealthReport, calculate_sprint_health
from checkmate.domain.shared import DomainError, Err, Ok, Result, map_result, not_found, validation
from checkmate.domain.tag import UNTAGGED_CAPACITY
from checkmate.ports.repositories import SprintRepository, TagRepository, TaskRepository

logger = logging.getLogger(__name__)


class SprintService:
    """Sprint creation, lookup, capacity overrides and health."""

    def __init__(
        self,
        sprints: SprintRepository,
        tasks: TaskRepository,
        tags: TagRepository,
        clock: Clock | None = None,
        thresholds: HealthThresholds | None = None,
        default_capacity: int = UNTAGGED_CAPACITY,
        upcoming_limit: int = 4,
    ) -> None:
        self._sprints = sprints
        self._tasks = tasks
        self._tags = tags
        self._clock = clock or SystemClock()
        self._thresholds = thresholds or HealthThresholds()
        self._default_capacity = default_capacity
        self._upcoming_limit = upcoming_limit

    def today(self) -> date:
        return self._clock.now().date()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_sprint(self, sprint_id: str) -> Result[Sprint, DomainError]:
        sprint = self._sprints.find_by_id(sprint_id)
        if sprint is None:
            return Err(not_found(f"Sprint not found: {sprint_id}"))
        return Ok(sprint)

    def list_sprints(self) -> list[Sprint]:
        return sorted(self._sprints.find_all(), key=lambda s: s.start_date)

    def current_sprint(self) -> Sprint | None:
        return self._sprints.find_current(self.today())

    def ensure_current_sprint(self) -> Sprint:
        """Current sprint, created on first use of the week."""
        existing = self.current_sprint()
        if existing is not None:
            return existing
        sprint = Sprint.for_week_of(self.today())
        self._sprints.save(sprint)
        logger.info(f"Created sprint {sprint.id} for week of {sprint.start_date}")
        return sprint

    def upcoming_sprints(self) -> list[Sprint]:
        return self._sprints.find_upcoming(self.today(), self._upcoming_limit)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create_sprint(self, start_date: date | str) -> Result[Sprint, DomainError]:
        """Create a sprint starting on the given Sunday; one sprint per week."""
        created = Sprint.create(start_date)
        if isinstance(created, Err):
            return created

        sprint = created.value
        if self._sprints.find_by_start_date(sprint.start_date) is not None:
            return Err(validation(f"A sprint already starts on {sprint.start_date.isoformat()}"))

        self._sprints.save(sprint)
        logger.info(f"Created sprint {sprint.id} starting {sprint.start_date}")
        return Ok(sprint)

    def set_capacity_override(
        self, sprint_id: str, tag_id: str, capacity: int
    ) -> Result[Sprint, DomainError]:
        sprint = self.get_sprint(sprint_id)
        if isinstance(sprint, Err):
            return sprint
        updated = sprint.value.set_capacity_override(tag_id, capacity)
        if isinstance(updated, Err):
            return updated
        self._sprints.save(updated.value)
        logger.info(f"Sprint {sprint_id}: capacity for {tag_id} set to {capacity}")
        return updated

    def clear_capacity_override(self, sprint_id: str, tag_id: str) -> Result[Sprint, DomainError]:
        sprint = self.get_sprint(sprint_id)
        if isinstance(sprint, Err):
            return sprint
        updated = sprint.value.clear_capacity_override(tag_id)
        self._sprints.save(updated)
        return Ok(updated)

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def health(self, sprint_id: str | None = None) -> Result[SprintHealthReport, DomainError]:
        """Health report for a sprint, or the current sprint when no id is given."""
        if sprint_id is None:
            current = self.current_sprint()
            found = Ok(current) if current is not None else Err(not_found("No sprint covers today"))
        else:
            found = self.get_sprint(sprint_id)

        return map_result(
            found,
            lambda sprint: calculate_sprint_health(
                sprint,
                self._tasks.find_all(),
                self._tags.find_all(),
                thresholds=self._thresholds,
                default_capacity=self._default_capacity,
                today=self.today(),
            ),
        )
