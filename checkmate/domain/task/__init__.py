"""Task domain package.

The Task aggregate with its sessions and comments, plus the pure services
that work over collections of tasks.

Key Types:
    Task - aggregate root
    TaskStatus - active / completed / canceled
    SkipForNow, SkipForDay - skip state variants
    Session, SessionStatus, FocusLevel - focus sessions
    Comment - free text or skip/cancel justification
    FocusQueue - output of the ordering engine

Functions:
    build_focus_queue - focus task, up next, hidden count
    spawn_due_instances - instances owed by recurring templates
    weekly_stats, daily_stats, focus_quality, current_streak - statistics
"""

from checkmate.domain.task.comment import Comment
from checkmate.domain.task.events import (
    SessionAbandoned,
    SessionCompleted,
    SessionStarted,
    TaskCanceled,
    TaskCompleted,
    TaskCreated,
    TaskMovedToBacklog,
    TaskMovedToSprint,
    TaskSkipped,
)
from checkmate.domain.task.models import SkipForDay, SkipForNow, SkipState, Task, TaskStatus
from checkmate.domain.task.ordering import (
    FocusBuckets,
    FocusQueue,
    build_focus_queue,
    clear_skipped_for_now,
    is_focus_candidate,
    partition_for_focus,
    refresh_skip_returns,
    sort_for_focus,
)
from checkmate.domain.task.session import FocusLevel, Session, SessionStatus, parse_focus_level
from checkmate.domain.task.spawning import count_instances, spawn_due_instances
from checkmate.domain.task.stats import (
    DailyStats,
    FocusQualityStats,
    WeeklyStats,
    current_streak,
    daily_stats,
    day_start,
    focus_quality,
    weekly_stats,
)

__all__ = [
    # Aggregate
    "Task",
    "TaskStatus",
    "SkipForNow",
    "SkipForDay",
    "SkipState",
    "Comment",
    "Session",
    "SessionStatus",
    "FocusLevel",
    "parse_focus_level",
    # Events
    "TaskCreated",
    "TaskCompleted",
    "TaskCanceled",
    "TaskSkipped",
    "TaskMovedToSprint",
    "TaskMovedToBacklog",
    "SessionStarted",
    "SessionCompleted",
    "SessionAbandoned",
    # Ordering
    "FocusBuckets",
    "FocusQueue",
    "build_focus_queue",
    "clear_skipped_for_now",
    "is_focus_candidate",
    "partition_for_focus",
    "refresh_skip_returns",
    "sort_for_focus",
    # Spawning
    "count_instances",
    "spawn_due_instances",
    # Stats
    "DailyStats",
    "WeeklyStats",
    "FocusQualityStats",
    "daily_stats",
    "weekly_stats",
    "focus_quality",
    "current_streak",
    "day_start",
]
