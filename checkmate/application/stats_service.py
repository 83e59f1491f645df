"""Statistics application service."""

from datetime import date, timedelta

from pydantic import BaseModel

from checkmate.application.clock import Clock, SystemClock
from checkmate.domain.task import (
    DailyStats,
    FocusQualityStats,
    WeeklyStats,
    current_streak,
    daily_stats,
    day_start,
    focus_quality,
    weekly_stats,
)
from checkmate.ports.repositories import TaskRepository


class StatsSummary(BaseModel):
    """Everything the stats view shows at once."""

    today: DailyStats
    week: WeeklyStats
    focus: FocusQualityStats
    streak_days: int


class StatsService:
    def __init__(self, tasks: TaskRepository, clock: Clock | None = None) -> None:
        self._tasks = tasks
        self._clock = clock or SystemClock()

    def daily(self, day: date | None = None) -> DailyStats:
        return daily_stats(self._tasks.find_all(), day or self._clock.now().date())

    def weekly(self, day: date | None = None) -> WeeklyStats:
        return weekly_stats(self._tasks.find_all(), day or self._clock.now().date())

    def focus_quality(self, days: int = 7) -> FocusQualityStats:
        """Focus levels of sessions that ended in the last ``days`` days, today included."""
        end = day_start(self._clock.now().date() + timedelta(days=1))
        return focus_quality(self._tasks.find_all(), end - timedelta(days=days), end)

    def streak(self) -> int:
        return current_streak(self._tasks.find_all(), self._clock.now().date())

    def summary(self) -> StatsSummary:
        return StatsSummary(
            today=self.daily(),
            week=self.weekly(),
            focus=self.focus_quality(),
            streak_days=self.streak(),
        )
