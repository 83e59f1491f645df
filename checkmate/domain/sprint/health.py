"""Sprint health calculation.

Compares the points scheduled into a sprint against each tag's capacity.
All functions are pure - no I/O, no side effects.
"""

from collections.abc import Iterable
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from checkmate.domain.sprint.models import Sprint
from checkmate.domain.tag.models import UNTAGGED_CAPACITY, Tag
from checkmate.domain.task.models import Task, TaskStatus
from checkmate.domain.types import SprintLocation

# =============================================================================
# Thresholds
# =============================================================================

AT_RISK_RATIO = 0.85  # Above this share of capacity a tag is at risk
OFF_TRACK_RATIO = 1.0  # Above full capacity a tag is off track


class HealthThresholds(BaseModel):
    """Ratio boundaries between health verdicts.

    ``ratio <= at_risk`` is on track, ``ratio <= off_track`` is at risk,
    anything above is off track.
    """

    at_risk: float = AT_RISK_RATIO
    off_track: float = OFF_TRACK_RATIO

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _ordered(self) -> "HealthThresholds":
        if not 0 <= self.at_risk <= self.off_track:
            raise ValueError("Thresholds must satisfy 0 <= at_risk <= off_track")
        return self


# =============================================================================
# Value Objects
# =============================================================================


class HealthStatus(str, Enum):
    """Verdict for a tag or a whole sprint."""

    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OFF_TRACK = "off_track"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    HealthStatus.ON_TRACK: 0,
    HealthStatus.AT_RISK: 1,
    HealthStatus.OFF_TRACK: 2,
}


class TagHealth(BaseModel):
    """Scheduled load versus capacity for one tag.

    ``ratio`` is None when capacity is zero.
    """

    tag_id: str
    scheduled: int
    capacity: int
    ratio: float | None
    health: HealthStatus


class SprintHealthReport(BaseModel):
    """Per-tag health plus the worst verdict across tags.

    ``days_remaining`` counts today; it is None when no date was given.
    """

    sprint_id: str
    overall: HealthStatus
    by_tag: list[TagHealth] = Field(default_factory=list)
    days_remaining: int | None = None

    def for_tag(self, tag_id: str) -> TagHealth | None:
        return next((t for t in self.by_tag if t.tag_id == tag_id), None)


# =============================================================================
# Calculation
# =============================================================================


def classify_load(
    scheduled: int,
    capacity: int,
    thresholds: HealthThresholds = HealthThresholds(),
) -> tuple[float | None, HealthStatus]:
    """Return (ratio, verdict) for a scheduled load against a capacity."""
    if capacity <= 0:
        health = HealthStatus.OFF_TRACK if scheduled > 0 else HealthStatus.ON_TRACK
        return None, health

    ratio = scheduled / capacity
    if ratio <= thresholds.at_risk:
        return ratio, HealthStatus.ON_TRACK
    if ratio <= thresholds.off_track:
        return ratio, HealthStatus.AT_RISK
    return ratio, HealthStatus.OFF_TRACK


def worst_health(verdicts: Iterable[HealthStatus]) -> HealthStatus:
    """Most severe verdict, on track when there are none."""
    return max(verdicts, key=lambda h: h.severity, default=HealthStatus.ON_TRACK)


def scheduled_points(sprint: Sprint, tasks: Iterable[Task]) -> dict[str, int]:
    """Points per tag for tasks located in the sprint and not canceled.

    Tags appear in the order they are first seen.
    """
    location = SprintLocation(sprint_id=sprint.id)
    totals: dict[str, int] = {}
    for task in tasks:
        if task.status is TaskStatus.CANCELED or not task.is_in(location):
            continue
        for tag_id, points in task.tag_points.items():
            totals[tag_id] = totals.get(tag_id, 0) + points
    return totals


def calculate_sprint_health(
    sprint: Sprint,
    tasks: Iterable[Task],
    tags: Iterable[Tag],
    thresholds: HealthThresholds = HealthThresholds(),
    default_capacity: int = UNTAGGED_CAPACITY,
    today: date | None = None,
) -> SprintHealthReport:
    """Build the health report for one sprint.

    Args:
        sprint: The sprint to evaluate (supplies capacity overrides).
        tasks: Any tasks; filtered to those in the sprint and not canceled.
        tags: Tag catalogue providing default capacities.
        thresholds: Ratio boundaries between verdicts.
        default_capacity: Capacity for tags missing from the catalogue.
        today: When given, the report carries the days left in the sprint.

    Returns:
        SprintHealthReport with one entry per scheduled tag.
    """
    defaults = {tag.id: tag.default_capacity for tag in tags}

    by_tag: list[TagHealth] = []
    for tag_id, scheduled in scheduled_points(sprint, tasks).items():
        capacity = sprint.capacity_for(tag_id, defaults.get(tag_id, default_capacity))
        ratio, health = classify_load(scheduled, capacity, thresholds)
        by_tag.append(
            TagHealth(
                tag_id=tag_id,
                scheduled=scheduled,
                capacity=capacity,
                ratio=ratio,
                health=health,
            )
        )

    return SprintHealthReport(
        sprint_id=sprint.id,
        overall=worst_health(t.health for t in by_tag),
        by_tag=by_tag,
        days_remaining=sprint.days_remaining(today) if today is not None else None,
    )
