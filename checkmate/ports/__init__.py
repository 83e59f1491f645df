"""Ports - interfaces/protocols for engines and persistence."""

from .expression_evaluator import CompiledFilter, ExpressionError, ExpressionEvaluator, ValidationResult
from .recurrence import RecurrenceCalculator
from .repositories import RoutineRepository, SprintRepository, TagRepository, TaskRepository

__all__ = [
    "CompiledFilter",
    "ExpressionError",
    "ExpressionEvaluator",
    "ValidationResult",
    "RecurrenceCalculator",
    "TaskRepository",
    "TagRepository",
    "SprintRepository",
    "RoutineRepository",
]
