"""Routine domain package.

Routines are time-activated views over tasks.

Key Types:
    Routine - named view with activation and task filter expressions
    RoutineContext - time-derived variables for activation expressions

Functions:
    build_routine_context - derive the context from a datetime
    determine_active_routine - pick the live routine with the highest priority
    task_filter_context - variables a task filter expression sees
"""

from checkmate.domain.routine.activation import (
    DAY_NAMES,
    RoutineContext,
    build_routine_context,
    determine_active_routine,
    is_routine_active,
)
from checkmate.domain.routine.models import (
    MAX_PRIORITY,
    MIN_PRIORITY,
    Routine,
    task_filter_context,
)

__all__ = [
    "Routine",
    "MIN_PRIORITY",
    "MAX_PRIORITY",
    "task_filter_context",
    "DAY_NAMES",
    "RoutineContext",
    "build_routine_context",
    "determine_active_routine",
    "is_routine_active",
]
