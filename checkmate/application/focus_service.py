"""Focus application service.

Answers "what should I work on right now?" for a location, optionally
narrowed to the tasks of the active routine.
"""

import logging
from datetime import tzinfo

from pydantic import BaseModel

from checkmate.application.clock import Clock, SystemClock
from checkmate.domain.routine import Routine, build_routine_context, determine_active_routine
from checkmate.domain.shared import DomainError, Err, Ok, Result
from checkmate.domain.task import FocusQueue, build_focus_queue, is_focus_candidate, refresh_skip_returns
from checkmate.domain.types import BacklogLocation, SprintLocation
from checkmate.ports.expression_evaluator import ExpressionEvaluator
from checkmate.ports.repositories import RoutineRepository, TagRepository, TaskRepository

logger = logging.getLogger(__name__)


class FocusView(BaseModel):
    """Focus queue plus the routine that shaped it, if any."""

    queue: FocusQueue
    routine: Routine | None = None
    filtered_out: int = 0


class FocusService:
    """Computes the focus queue from repository state."""

    def __init__(
        self,
        tasks: TaskRepository,
        routines: RoutineRepository,
        tags: TagRepository,
        evaluator: ExpressionEvaluator,
        clock: Clock | None = None,
        timezone: tzinfo | None = None,
    ) -> None:
        self._tasks = tasks
        self._routines = routines
        self._tags = tags
        self._evaluator = evaluator
        self._clock = clock or SystemClock()
        self._timezone = timezone

    def refresh_returns(self) -> int:
        """Surface tasks whose skip-for-day has expired. Returns the count."""
        returned = refresh_skip_returns(self._tasks.find_all(), self._clock.now())
        for task in returned:
            self._tasks.save(task)
        if returned:
            logger.info(f"{len(returned)} skipped task(s) returned to focus")
        return len(returned)

    def get_focus(
        self,
        location: BacklogLocation | SprintLocation | None = None,
        use_routine: bool = True,
        routine_id: str | None = None,
    ) -> Result[FocusView, DomainError]:
        """Build the focus view.

        Args:
            location: Restrict to one sprint or the backlog; all tasks if None.
            use_routine: Narrow the queue to the active routine's tasks.
            routine_id: Force a routine instead of evaluating activation.

        Returns:
            Ok(FocusView), or Err(not_found) for an unknown routine id.
        """
        self.refresh_returns()
        candidates = [t for t in self._tasks.find_all() if is_focus_candidate(t, location)]

        routine: Routine | None = None
        if use_routine or routine_id is not None:
            chosen = determine_active_routine(
                self._routines.find_all(),
                build_routine_context(self._clock.now().astimezone(self._timezone)),
                self._evaluator,
                override_id=routine_id,
            )
            if isinstance(chosen, Err):
                return chosen
            routine = chosen.value

        filtered_out = 0
        if routine is not None and routine.filters_tasks:
            tag_names = {tag.id: tag.name for tag in self._tags.find_all()}
            matching = [t for t in candidates if routine.matches(t, self._evaluator, tag_names)]
            filtered_out = len(candidates) - len(matching)
            candidates = matching

        return Ok(
            FocusView(
                queue=build_focus_queue(candidates),
                routine=routine,
                filtered_out=filtered_out,
            )
        )
