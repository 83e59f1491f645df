"""Productivity statistics.

Pure calculations over tasks and their sessions. Days are UTC calendar days;
weeks start on Monday.
"""

from collections.abc import Iterable
from datetime import UTC, date, datetime, time, timedelta

from pydantic import BaseModel, Field

from checkmate.domain.task.models import Task, TaskStatus
from checkmate.domain.task.session import FocusLevel, Session, SessionStatus

STREAK_LIMIT_DAYS = 365


class DailyStats(BaseModel):
    day: date
    tasks_completed: int = 0
    points_completed: int = 0
    focus_seconds: int = 0
    sessions_count: int = 0


class WeeklyStats(BaseModel):
    week_start: date
    tasks_completed: int = 0
    points_completed: int = 0
    focus_seconds: int = 0
    sessions_count: int = 0
    points_by_tag: dict[str, int] = Field(default_factory=dict)
    daily: list[DailyStats] = Field(default_factory=list)


class FocusQualityStats(BaseModel):
    """Distribution of focus levels across completed sessions."""

    total: int = 0
    focused: int = 0
    neutral: int = 0
    distracted: int = 0
    focused_percent: int = 0
    avg_duration_seconds: int = 0


# =============================================================================
# Helpers
# =============================================================================


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


def monday_of(day: date) -> date:
    return day - timedelta(days=day.weekday())


def completed_between(tasks: Iterable[Task], start: datetime, end: datetime) -> list[Task]:
    """Tasks completed in [start, end). Canceled tasks are not counted."""
    return [
        t
        for t in tasks
        if t.status is TaskStatus.COMPLETED
        and t.completed_at is not None
        and start <= t.completed_at < end
    ]


def sessions_between(tasks: Iterable[Task], start: datetime, end: datetime) -> list[Session]:
    """Completed sessions that ended in [start, end)."""
    return [
        s
        for t in tasks
        for s in t.sessions
        if s.status is SessionStatus.COMPLETED
        and s.ended_at is not None
        and start <= s.ended_at < end
    ]


# =============================================================================
# Calculations
# =============================================================================


def daily_stats(tasks: list[Task], day: date) -> DailyStats:
    start = day_start(day)
    end = start + timedelta(days=1)
    completed = completed_between(tasks, start, end)
    sessions = sessions_between(tasks, start, end)
    return DailyStats(
        day=day,
        tasks_completed=len(completed),
        points_completed=sum(t.total_points for t in completed),
        focus_seconds=sum(s.duration_seconds for s in sessions),
        sessions_count=len(sessions),
    )


def weekly_stats(tasks: list[Task], day: date) -> WeeklyStats:
    """Stats for the Monday-based week containing ``day``."""
    monday = monday_of(day)
    start = day_start(monday)
    end = start + timedelta(days=7)
    completed = completed_between(tasks, start, end)
    sessions = sessions_between(tasks, start, end)

    points_by_tag: dict[str, int] = {}
    for task in completed:
        for tag_id, points in task.tag_points.items():
            points_by_tag[tag_id] = points_by_tag.get(tag_id, 0) + points

    return WeeklyStats(
        week_start=monday,
        tasks_completed=len(completed),
        points_completed=sum(t.total_points for t in completed),
        focus_seconds=sum(s.duration_seconds for s in sessions),
        sessions_count=len(sessions),
        points_by_tag=points_by_tag,
        daily=[daily_stats(tasks, monday + timedelta(days=i)) for i in range(7)],
    )


def focus_quality(tasks: list[Task], start: datetime, end: datetime) -> FocusQualityStats:
    sessions = sessions_between(tasks, start, end)
    total = len(sessions)
    if total == 0:
        return FocusQualityStats()

    levels = [s.focus_level for s in sessions]
    focused = levels.count(FocusLevel.FOCUSED)
    return FocusQualityStats(
        total=total,
        focused=focused,
        neutral=levels.count(FocusLevel.NEUTRAL),
        distracted=levels.count(FocusLevel.DISTRACTED),
        focused_percent=round(focused / total * 100),
        avg_duration_seconds=round(sum(s.duration_seconds for s in sessions) / total),
    )


def current_streak(tasks: list[Task], today: date) -> int:
    """Consecutive days with at least one completion.

    A day without completions yet does not break the streak; counting then
    starts from yesterday.
    """
    day = today
    if daily_stats(tasks, day).tasks_completed == 0:
        day -= timedelta(days=1)

    streak = 0
    while streak < STREAK_LIMIT_DAYS and daily_stats(tasks, day).tasks_completed > 0:
        streak += 1
        day -= timedelta(days=1)
    return streak
