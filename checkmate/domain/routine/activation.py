"""Active routine determination.

Evaluates each routine's activation expression against a context derived
from the current time and picks the live routine with the highest priority.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from checkmate.domain.routine.models import Routine
from checkmate.domain.shared import DomainError, Err, ExpressionError, Ok, Result, not_found

if TYPE_CHECKING:
    from checkmate.ports.expression_evaluator import ExpressionEvaluator

logger = logging.getLogger(__name__)

# Indexed by date.weekday(): Monday is 0
DAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
_FULL_DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class RoutineContext(BaseModel):
    """Time-derived facts an activation expression can refer to."""

    now: datetime
    day_of_week: str
    hour: int
    minute: int
    is_weekday: bool
    is_weekend: bool

    model_config = {"frozen": True}

    @property
    def time(self) -> int:
        """Minutes since midnight, for range checks like ``time >= 540``."""
        return self.hour * 60 + self.minute

    def to_variables(self) -> dict[str, Any]:
        """Flat names exposed to expressions.

        Includes ``time`` and one boolean per weekday (``is_monday`` ...).
        """
        variables: dict[str, Any] = {
            "day_of_week": self.day_of_week,
            "hour": self.hour,
            "minute": self.minute,
            "time": self.time,
            "is_weekday": self.is_weekday,
            "is_weekend": self.is_weekend,
        }
        for short, full in zip(DAY_NAMES, _FULL_DAY_NAMES):
            variables[f"is_{full}"] = self.day_of_week == short
        return variables


def build_routine_context(now: datetime) -> RoutineContext:
    """Derive the activation context from a moment in time.

    Uses the wall-clock fields of ``now`` as given; convert to local time
    before calling if routines are written in local hours.
    """
    weekday = now.weekday()
    is_weekend = weekday >= 5
    return RoutineContext(
        now=now,
        day_of_week=DAY_NAMES[weekday],
        hour=now.hour,
        minute=now.minute,
        is_weekday=not is_weekend,
        is_weekend=is_weekend,
    )


def is_routine_active(
    routine: Routine,
    context: RoutineContext,
    evaluator: "ExpressionEvaluator",
) -> bool:
    """Evaluate one routine's activation expression.

    A blank expression is never active. An expression that fails to evaluate
    counts as inactive and is logged.
    """
    expression = routine.activation_expression
    if not expression.strip():
        return False
    try:
        return evaluator.evaluate(expression, context.to_variables())
    except ExpressionError as e:
        logger.warning(f"Activation expression of routine {routine.name!r} failed: {e}")
        return False


def determine_active_routine(
    routines: list[Routine],
    context: RoutineContext,
    evaluator: "ExpressionEvaluator",
    override_id: str | None = None,
) -> Result[Routine | None, DomainError]:
    """Select the routine that is live right now.

    Among routines whose activation expression is true, the highest priority
    wins. Ties keep the order in which routines were given (repository
    order). An explicit ``override_id`` bypasses evaluation entirely.

    Args:
        routines: All routines, in repository order.
        context: Output of build_routine_context.
        evaluator: Expression engine.
        override_id: Routine to force, regardless of its expression.

    Returns:
        Ok(routine) or Ok(None) when nothing is live; Err(not_found) for an
        unknown override id.
    """
    if override_id is not None:
        chosen = next((r for r in routines if r.id == override_id), None)
        if chosen is None:
            return Err(not_found(f"Routine not found: {override_id}"))
        logger.debug(f"Routine override in effect: {chosen.name}")
        return Ok(chosen)

    best: Routine | None = None
    for routine in routines:
        if not is_routine_active(routine, context, evaluator):
            continue
        # Strictly greater keeps the earliest routine on ties
        if best is None or routine.priority > best.priority:
            best = routine

    return Ok(best)
