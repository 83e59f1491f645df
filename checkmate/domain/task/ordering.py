"""Focus ordering: which task to show next.

All functions in this module are pure - they take tasks in and return
new values out. Callers persist any changed tasks themselves.

Ordering rules:
    1. visible-normal: no skip state, or skipped for the day and returned
    2. visible-skipped-for-now: skipped for now
    3. hidden: skipped for the day and not yet returned

Buckets 1 and 2 keep manual order (``order``, then ``created_at``). The
focus task is the head of 1 + 2, "up next" is the rest, hidden tasks are
only counted.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import assert_never

from pydantic import BaseModel, Field

from checkmate.domain.task.models import SkipForDay, SkipForNow, Task
from checkmate.domain.types import BacklogLocation, SprintLocation


class FocusBuckets(BaseModel):
    """Candidate tasks split by visibility."""

    normal: list[Task] = Field(default_factory=list)
    skipped_for_now: list[Task] = Field(default_factory=list)
    hidden: list[Task] = Field(default_factory=list)


class FocusQueue(BaseModel):
    """Result of running the ordering engine over a set of tasks."""

    focus_task: Task | None = None
    up_next: list[Task] = Field(default_factory=list)
    hidden_count: int = 0

    @property
    def visible(self) -> list[Task]:
        if self.focus_task is None:
            return []
        return [self.focus_task, *self.up_next]


# =============================================================================
# Predicates
# =============================================================================


def is_focus_candidate(
    task: Task,
    location: BacklogLocation | SprintLocation | None = None,
) -> bool:
    """Active, non-template tasks (optionally in one location) take part."""
    if not task.is_active or task.is_template:
        return False
    return location is None or task.is_in(location)


def _manual_order_key(task: Task) -> tuple[int, datetime]:
    return (task.order, task.created_at)


# =============================================================================
# Ordering
# =============================================================================


def partition_for_focus(tasks: Iterable[Task]) -> FocusBuckets:
    """Split tasks into the three visibility buckets, each in manual order."""
    buckets = FocusBuckets()
    for task in sorted(tasks, key=_manual_order_key):
        skip = task.skip_state
        if skip is None:
            buckets.normal.append(task)
        elif isinstance(skip, SkipForNow):
            buckets.skipped_for_now.append(task)
        elif isinstance(skip, SkipForDay):
            if skip.returned:
                buckets.normal.append(task)
            else:
                buckets.hidden.append(task)
        else:
            assert_never(skip)
    return buckets


def sort_for_focus(tasks: Iterable[Task]) -> list[Task]:
    """Visible tasks in the order they should be worked on."""
    buckets = partition_for_focus(tasks)
    return [*buckets.normal, *buckets.skipped_for_now]


def build_focus_queue(
    tasks: Iterable[Task],
    location: BacklogLocation | SprintLocation | None = None,
) -> FocusQueue:
    """Compute the focus task, the up-next queue and the hidden count.

    Args:
        tasks: Any tasks; inactive tasks and templates are ignored.
        location: Restrict to one sprint or the backlog when given.

    Returns:
        FocusQueue for the candidate tasks.
    """
    candidates = [t for t in tasks if is_focus_candidate(t, location)]
    buckets = partition_for_focus(candidates)
    ordered = [*buckets.normal, *buckets.skipped_for_now]

    if not ordered:
        return FocusQueue(hidden_count=len(buckets.hidden))

    return FocusQueue(
        focus_task=ordered[0],
        up_next=ordered[1:],
        hidden_count=len(buckets.hidden),
    )


# =============================================================================
# Cycle maintenance
# =============================================================================


def clear_skipped_for_now(tasks: Iterable[Task]) -> list[Task]:
    """Release transient skips when a new ordering cycle starts.

    Returns only the tasks that changed.
    """
    return [t.clear_skip_state() for t in tasks if isinstance(t.skip_state, SkipForNow)]


def refresh_skip_returns(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Mark day-skips whose return time has passed as returned.

    Returns only the tasks that changed.
    """
    returned: list[Task] = []
    for task in tasks:
        skip = task.skip_state
        if isinstance(skip, SkipForDay) and skip.is_due(now):
            returned.append(task.model_copy(update={"skip_state": skip.mark_returned()}))
    return returned
