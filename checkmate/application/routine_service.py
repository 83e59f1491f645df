"""Routine application service."""

import logging
from datetime import tzinfo

from checkmate.application.clock import Clock, SystemClock
from checkmate.domain.routine import Routine, build_routine_context, determine_active_routine
from checkmate.domain.shared import DomainError, Err, Ok, Result, not_found, validation
from checkmate.ports.expression_evaluator import ExpressionEvaluator
from checkmate.ports.repositories import RoutineRepository

logger = logging.getLogger(__name__)


class RoutineService:
    """Routine management and active routine lookup."""

    def __init__(
        self,
        routines: RoutineRepository,
        evaluator: ExpressionEvaluator,
        clock: Clock | None = None,
        timezone: tzinfo | None = None,
    ) -> None:
        """Routines are evaluated in ``timezone``, the system zone when None."""
        self._routines = routines
        self._evaluator = evaluator
        self._clock = clock or SystemClock()
        self._timezone = timezone

    def _check_expression(self, label: str, expression: str) -> DomainError | None:
        if not expression.strip():
            return None
        check = self._evaluator.validate(expression)
        if check.valid:
            return None
        return validation(f"Invalid {label} expression: {check.error}")

    def list_routines(self) -> list[Routine]:
        return self._routines.find_all()

    def get_routine(self, routine_id: str) -> Result[Routine, DomainError]:
        routine = self._routines.find_by_id(routine_id) or self._routines.find_by_name(routine_id)
        if routine is None:
            return Err(not_found(f"Routine not found: {routine_id}"))
        return Ok(routine)

    def create_routine(
        self,
        name: str,
        priority: int,
        task_filter_expression: str = "",
        activation_expression: str = "",
        icon: str = "",
        color: str = "#3b82f6",
    ) -> Result[Routine, DomainError]:
        """Create a routine after validating both expressions with the evaluator."""
        for label, expression in (
            ("task filter", task_filter_expression),
            ("activation", activation_expression),
        ):
            problem = self._check_expression(label, expression)
            if problem:
                return Err(problem)

        if self._routines.find_by_name(name) is not None:
            return Err(validation(f"A routine named '{name.strip()}' already exists"))

        created = Routine.create(
            name,
            priority,
            task_filter_expression=task_filter_expression,
            activation_expression=activation_expression,
            icon=icon,
            color=color,
        )
        if isinstance(created, Err):
            return created

        self._routines.save(created.value)
        logger.info(f"Created routine {created.value.id} '{created.value.name}'")
        return created

    def update_routine(
        self,
        routine_id: str,
        name: str | None = None,
        priority: int | None = None,
        task_filter_expression: str | None = None,
        activation_expression: str | None = None,
        icon: str | None = None,
        color: str | None = None,
    ) -> Result[Routine, DomainError]:
        found = self.get_routine(routine_id)
        if isinstance(found, Err):
            return found

        routine = found.value
        if name is not None:
            clash = self._routines.find_by_name(name)
            if clash is not None and clash.id != routine.id:
                return Err(validation(f"A routine named '{name.strip()}' already exists"))
            renamed = routine.rename(name)
            if isinstance(renamed, Err):
                return renamed
            routine = renamed.value
        if priority is not None:
            reprioritized = routine.update_priority(priority)
            if isinstance(reprioritized, Err):
                return reprioritized
            routine = reprioritized.value
        if task_filter_expression is not None:
            problem = self._check_expression("task filter", task_filter_expression)
            if problem:
                return Err(problem)
            routine = routine.update_task_filter(task_filter_expression)
        if activation_expression is not None:
            problem = self._check_expression("activation", activation_expression)
            if problem:
                return Err(problem)
            routine = routine.update_activation(activation_expression)
        if icon is not None or color is not None:
            routine = routine.restyle(icon=icon, color=color)

        self._routines.save(routine)
        return Ok(routine)

    def delete_routine(self, routine_id: str) -> Result[None, DomainError]:
        found = self.get_routine(routine_id)
        if isinstance(found, Err):
            return found
        self._routines.delete(found.value.id)
        logger.info(f"Deleted routine {found.value.id}")
        return Ok(None)

    def active_routine(self, override_id: str | None = None) -> Result[Routine | None, DomainError]:
        return determine_active_routine(
            self._routines.find_all(),
            build_routine_context(self._clock.now().astimezone(self._timezone)),
            self._evaluator,
            override_id=override_id,
        )
