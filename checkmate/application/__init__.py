"""Application service layer for Checkmate.

Services load aggregates from repositories, apply one domain operation,
persist the result and return ``Result`` values (with the domain event
where one applies).

Services:
    TaskService - task lifecycle, comments, sessions, recurring instances
    FocusService - focus queue, narrowed by the active routine
    SprintService - sprints, capacity overrides, health
    TagService - tag catalogue
    RoutineService - routines and active routine
    StatsService - productivity statistics
"""

from checkmate.application.clock import Clock, SystemClock
from checkmate.application.focus_service import FocusService, FocusView
from checkmate.application.routine_service import RoutineService
from checkmate.application.sprint_service import SprintService
from checkmate.application.stats_service import StatsService, StatsSummary
from checkmate.application.tag_service import TagService
from checkmate.application.task_service import TaskService

__all__ = [
    "Clock",
    "SystemClock",
    "TaskService",
    "FocusService",
    "FocusView",
    "SprintService",
    "TagService",
    "RoutineService",
    "StatsService",
    "StatsSummary",
]
