"""Routine domain models.

A routine is a named, time-activated view over tasks. Its activation
expression decides when it is live; its task filter expression decides which
tasks it shows. Both are opaque strings interpreted by an ExpressionEvaluator.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from checkmate.domain.shared import DomainError, Err, ExpressionError, Ok, Result, validation
from checkmate.domain.task.models import Task
from checkmate.domain.types import RoutineId, new_id

if TYPE_CHECKING:
    from checkmate.ports.expression_evaluator import ExpressionEvaluator

logger = logging.getLogger(__name__)

MIN_PRIORITY = 1
MAX_PRIORITY = 10


def _priority_problem(priority: int) -> DomainError | None:
    if isinstance(priority, bool) or not isinstance(priority, int):
        return validation("Priority must be a whole number")
    if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        return validation(f"Priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}")
    return None


def task_filter_context(task: Task, tag_names: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Context a task filter expression is evaluated against.

    ``tags`` holds every tag id of the task plus its display name when one
    is known, so ``hasTag("work")`` matches either.
    """
    names = tag_names or {}
    tags: list[str] = []
    for tag_id in task.tag_points.tag_ids():
        tags.append(tag_id)
        name = names.get(tag_id)
        if name and name not in tags:
            tags.append(name)
    return {
        "tags": tags,
        "title": task.title,
        "points": task.total_points,
        "status": task.status.value,
        "location": task.location.type,
        "is_skipped": task.skip_state is not None,
    }


class Routine(BaseModel):
    """A time-activated task filter.

    Example:
        routine = Routine.create(
            "Deep work",
            priority=5,
            task_filter_expression='hasTag("work")',
            activation_expression="is_weekday and hour >= 9 and hour < 12",
        ).value
    """

    id: RoutineId
    name: str
    icon: str = ""
    color: str = "#3b82f6"
    priority: int = Field(ge=MIN_PRIORITY, le=MAX_PRIORITY)
    task_filter_expression: str = ""
    activation_expression: str = ""

    model_config = {"frozen": True}

    @classmethod
    def create(
        cls,
        name: str,
        priority: int,
        task_filter_expression: str = "",
        activation_expression: str = "",
        icon: str = "",
        color: str = "#3b82f6",
    ) -> Result["Routine", DomainError]:
        trimmed = name.strip()
        if not trimmed:
            return Err(validation("Routine name cannot be empty"))
        problem = _priority_problem(priority)
        if problem:
            return Err(problem)
        return Ok(
            cls(
                id=new_id("routine"),
                name=trimmed,
                icon=icon,
                color=color,
                priority=priority,
                task_filter_expression=task_filter_expression.strip(),
                activation_expression=activation_expression.strip(),
            )
        )

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def rename(self, name: str) -> Result["Routine", DomainError]:
        trimmed = name.strip()
        if not trimmed:
            return Err(validation("Routine name cannot be empty"))
        return Ok(self.model_copy(update={"name": trimmed}))

    def restyle(self, icon: str | None = None, color: str | None = None) -> "Routine":
        update = {}
        if icon is not None:
            update["icon"] = icon
        if color is not None:
            update["color"] = color
        return self.model_copy(update=update)

    def update_priority(self, priority: int) -> Result["Routine", DomainError]:
        problem = _priority_problem(priority)
        if problem:
            return Err(problem)
        return Ok(self.model_copy(update={"priority": priority}))

    def update_task_filter(self, expression: str) -> "Routine":
        return self.model_copy(update={"task_filter_expression": expression.strip()})

    def update_activation(self, expression: str) -> "Routine":
        return self.model_copy(update={"activation_expression": expression.strip()})

    # -------------------------------------------------------------------------
    # Task filtering
    # -------------------------------------------------------------------------

    @property
    def filters_tasks(self) -> bool:
        return bool(self.task_filter_expression)

    def matches(
        self,
        task: Task,
        evaluator: "ExpressionEvaluator",
        tag_names: Mapping[str, str] | None = None,
    ) -> bool:
        """Whether a task belongs to this routine's view.

        A blank filter shows every task. A filter that fails to evaluate
        shows nothing and is logged.
        """
        if not self.filters_tasks:
            return True
        try:
            return evaluator.evaluate(self.task_filter_expression, task_filter_context(task, tag_names))
        except ExpressionError as e:
            logger.warning(f"Task filter of routine {self.name!r} failed: {e}")
            return False
