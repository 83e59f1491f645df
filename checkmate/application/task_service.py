"""Task application service.

Loads a task, applies one domain operation, persists the result and returns
it together with the domain event describing the change.
"""

import logging
from datetime import datetime

from checkmate.application.clock import Clock, SystemClock
from checkmate.domain.shared import (
    DomainError,
    Err,
    Ok,
    Result,
    flat_map,
    invalid_transition,
    is_err,
    not_found,
    validation,
)
from checkmate.domain.task import (
    Comment,
    FocusLevel,
    SessionAbandoned,
    SessionCompleted,
    SessionStarted,
    Task,
    TaskCanceled,
    TaskCompleted,
    TaskCreated,
    TaskMovedToBacklog,
    TaskMovedToSprint,
    TaskSkipped,
    clear_skipped_for_now,
    spawn_due_instances,
)
from checkmate.domain.types import BACKLOG, BacklogLocation, SprintLocation
from checkmate.ports.recurrence import RecurrenceCalculator
from checkmate.ports.repositories import SprintRepository, TaskRepository

logger = logging.getLogger(__name__)


class TaskService:
    """Use cases over single tasks.

    Example:
        service = TaskService(repos.tasks, repos.sprints)
        result = service.create_task("Write report", {"work": 3})
        if isinstance(result, Ok):
            task, event = result.value
    """

    def __init__(
        self,
        tasks: TaskRepository,
        sprints: SprintRepository,
        recurrence: RecurrenceCalculator | None = None,
        clock: Clock | None = None,
        default_session_minutes: int | None = None,
    ) -> None:
        self._tasks = tasks
        self._sprints = sprints
        self._recurrence = recurrence
        self._clock = clock or SystemClock()
        self._default_session_minutes = default_session_minutes

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_task(self, task_id: str) -> Result[Task, DomainError]:
        task = self._tasks.find_by_id(task_id)
        if task is None:
            return Err(not_found(f"Task not found: {task_id}"))
        return Ok(task)

    def list_tasks(
        self,
        location: BacklogLocation | SprintLocation | None = None,
        include_closed: bool = False,
    ) -> list[Task]:
        """Tasks in manual order, optionally for one location."""
        tasks = self._tasks.find_all() if location is None else self._tasks.find_by_location(location)
        if not include_closed:
            tasks = [t for t in tasks if t.is_active]
        return sorted(tasks, key=lambda t: (t.order, t.created_at))

    def list_templates(self) -> list[Task]:
        return self._tasks.find_templates()

    def sessions_in_progress(self) -> list[Task]:
        """Tasks that currently have a running session."""
        return [t for t in self._tasks.find_all() if t.active_session is not None]

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_task(
        self,
        title: str,
        tag_points: dict[str, int],
        description: str = "",
        sprint_id: str | None = None,
        recurrence: str | None = None,
    ) -> Result[tuple[Task, TaskCreated], DomainError]:
        """Create a task at the end of its location's order.

        Args:
            title: Task title.
            tag_points: Tag id -> Fibonacci points.
            description: Optional free text.
            sprint_id: Place the task in this sprint instead of the backlog.
            recurrence: RRULE making the task a recurring template.

        Returns:
            Ok((task, TaskCreated)), or Err for a missing sprint, an invalid
            rule, or any task validation failure.
        """
        location: BacklogLocation | SprintLocation = BACKLOG
        if sprint_id is not None:
            if self._sprints.find_by_id(sprint_id) is None:
                return Err(not_found(f"Sprint not found: {sprint_id}"))
            location = SprintLocation(sprint_id=sprint_id)

        if recurrence and recurrence.strip() and self._recurrence is not None:
            check = self._recurrence.validate(recurrence)
            if not check.valid:
                return Err(validation(check.error or "Invalid recurrence rule"))

        now = self._clock.now()
        result = Task.create(
            title,
            tag_points,
            now,
            description=description,
            location=location,
            recurrence=recurrence,
            order=self._next_order(location),
        )
        if isinstance(result, Err):
            return result

        task = result.value
        self._tasks.save(task)
        logger.info(f"Created task {task.id} '{task.title}' in {task.location}")
        return Ok((task, self._created_event(task, now)))

    def spawn_instance(self, template_id: str) -> Result[tuple[Task, TaskCreated], DomainError]:
        template = self.get_task(template_id)
        if isinstance(template, Err):
            return template

        now = self._clock.now()
        spawned = template.value.spawn_instance(now)
        if isinstance(spawned, Err):
            return spawned

        instance = spawned.value.model_copy(update={"order": self._next_order(BACKLOG)})
        self._tasks.save(instance)
        logger.info(f"Spawned {instance.id} from template {template_id}")
        return Ok((instance, self._created_event(instance, now)))

    def spawn_due_instances(self, start: datetime, end: datetime) -> Result[list[Task], DomainError]:
        """Spawn every instance owed by the templates for [start, end]."""
        if self._recurrence is None:
            return Err(validation("No recurrence calculator configured"))

        spawned = spawn_due_instances(
            self._tasks.find_templates(),
            [t for t in self._tasks.find_all() if t.parent_id is not None],
            start,
            end,
            self._recurrence,
            self._clock.now(),
        )
        order = self._next_order(BACKLOG)
        placed = [t.model_copy(update={"order": order + i}) for i, t in enumerate(spawned)]
        for task in placed:
            self._tasks.save(task)
        return Ok(placed)

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def complete_task(self, task_id: str) -> Result[tuple[Task, TaskCompleted], DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task

        now = self._clock.now()
        completed = task.value.complete(now)
        if isinstance(completed, Err):
            return completed

        self._tasks.save(completed.value)
        self._reset_cycle(completed.value)
        logger.info(f"Completed task {task_id}")
        event = TaskCompleted(
            aggregate_id=task_id,
            occurred_at=now,
            total_points=completed.value.total_points,
        )
        return Ok((completed.value, event))

    def cancel_task(
        self, task_id: str, justification: str
    ) -> Result[tuple[Task, TaskCanceled], DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task

        now = self._clock.now()
        canceled = task.value.cancel(justification, now)
        if isinstance(canceled, Err):
            return canceled

        self._tasks.save(canceled.value)
        self._reset_cycle(canceled.value)
        logger.info(f"Canceled task {task_id}")
        event = TaskCanceled(aggregate_id=task_id, occurred_at=now, justification=justification.strip())
        return Ok((canceled.value, event))

    def skip_task(
        self,
        task_id: str,
        for_day: bool = False,
        justification: str | None = None,
    ) -> Result[tuple[Task, TaskSkipped], DomainError]:
        """Skip for now, or for the rest of the day with a justification."""
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task

        now = self._clock.now()
        if for_day:
            skipped = task.value.skip_for_day(justification or "", now)
        else:
            skipped = task.value.skip_for_now(now)
        if isinstance(skipped, Err):
            return skipped

        self._tasks.save(skipped.value)
        skip_type = "for_day" if for_day else "for_now"
        logger.info(f"Skipped task {task_id} {skip_type.replace('_', ' ')}")
        event = TaskSkipped(
            aggregate_id=task_id,
            occurred_at=now,
            skip_type=skip_type,
            justification=justification.strip() if for_day and justification else None,
        )
        return Ok((skipped.value, event))

    def clear_skip(self, task_id: str) -> Result[Task, DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task
        cleared = task.value.clear_skip_state()
        self._tasks.save(cleared)
        return Ok(cleared)

    # -------------------------------------------------------------------------
    # Location
    # -------------------------------------------------------------------------

    def move_to_sprint(
        self, task_id: str, sprint_id: str
    ) -> Result[tuple[Task, TaskMovedToSprint], DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task
        if self._sprints.find_by_id(sprint_id) is None:
            return Err(not_found(f"Sprint not found: {sprint_id}"))

        previous = task.value.location.sprint_id
        moved = task.value.move_to_sprint(sprint_id)
        if isinstance(moved, Err):
            return moved

        placed = self._place_last(moved.value, previous != sprint_id)
        self._tasks.save(placed)
        logger.info(f"Moved task {task_id} to sprint {sprint_id}")
        event = TaskMovedToSprint(
            aggregate_id=task_id,
            occurred_at=self._clock.now(),
            sprint_id=sprint_id,
            previous_sprint_id=previous,
        )
        return Ok((placed, event))

    def move_to_backlog(self, task_id: str) -> Result[tuple[Task, TaskMovedToBacklog], DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task

        previous = task.value.location.sprint_id
        moved = task.value.move_to_backlog()
        if isinstance(moved, Err):
            return moved

        placed = self._place_last(moved.value, previous is not None)
        self._tasks.save(placed)
        logger.info(f"Moved task {task_id} to backlog")
        event = TaskMovedToBacklog(
            aggregate_id=task_id,
            occurred_at=self._clock.now(),
            previous_sprint_id=previous,
        )
        return Ok((placed, event))

    def reorder(self, task_id: str, order: int) -> Result[Task, DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task
        reordered = task.value.reorder(order)
        if isinstance(reordered, Err):
            return reordered
        self._tasks.save(reordered.value)
        return reordered

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def update_task(
        self,
        task_id: str,
        title: str | None = None,
        description: str | None = None,
        tag_points: dict[str, int] | None = None,
    ) -> Result[Task, DomainError]:
        """Apply any combination of field updates; all or nothing."""
        updated = self.get_task(task_id)
        if title is not None:
            updated = flat_map(updated, lambda t: t.update_title(title))
        if description is not None:
            updated = flat_map(updated, lambda t: t.update_description(description))
        if tag_points is not None:
            updated = flat_map(updated, lambda t: t.update_tag_points(tag_points))
        if is_err(updated):
            return updated

        self._tasks.save(updated.value)
        return updated

    def add_comment(self, task_id: str, content: str) -> Result[tuple[Task, Comment], DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task
        added = task.value.add_comment(content, self._clock.now())
        if isinstance(added, Err):
            return added
        self._tasks.save(added.value[0])
        return added

    def update_comment(self, task_id: str, comment_id: str, content: str) -> Result[Task, DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task
        updated = task.value.update_comment(comment_id, content, self._clock.now())
        if isinstance(updated, Err):
            return updated
        self._tasks.save(updated.value)
        return updated

    def delete_comment(self, task_id: str, comment_id: str) -> Result[Task, DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task
        removed = task.value.remove_comment(comment_id)
        if isinstance(removed, Err):
            return removed
        self._tasks.save(removed.value)
        return removed

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def start_session(
        self, task_id: str, minutes: int | None = None
    ) -> Result[tuple[Task, SessionStarted], DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task

        planned = minutes if minutes is not None else self._default_session_minutes
        now = self._clock.now()
        started = task.value.start_session(planned, now)
        if isinstance(started, Err):
            return started

        updated, session_id = started.value
        self._tasks.save(updated)
        logger.info(f"Started session {session_id} on task {task_id}")
        event = SessionStarted(
            aggregate_id=task_id,
            occurred_at=now,
            session_id=session_id,
            planned_minutes=planned,
        )
        return Ok((updated, event))

    def end_session(
        self,
        task_id: str,
        focus_level: str | FocusLevel,
        session_id: str | None = None,
        note: str | None = None,
    ) -> Result[tuple[Task, SessionCompleted], DomainError]:
        """End a session; defaults to the one in progress."""
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task

        target = self._session_id_or_active(task.value, session_id)
        if isinstance(target, Err):
            return target

        now = self._clock.now()
        ended = task.value.end_session(target.value, focus_level, now)
        if isinstance(ended, Err):
            return ended

        updated = ended.value
        if note and note.strip():
            updated = self._with_session_note(updated, target.value, note.strip())

        self._tasks.save(updated)
        session = updated.find_session(target.value)
        logger.info(f"Ended session {target.value} on task {task_id}")
        event = SessionCompleted(
            aggregate_id=task_id,
            occurred_at=now,
            session_id=target.value,
            focus_level=session.focus_level.value,
            duration_seconds=session.duration_seconds,
        )
        return Ok((updated, event))

    def abandon_session(
        self, task_id: str, session_id: str | None = None
    ) -> Result[tuple[Task, SessionAbandoned], DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task

        target = self._session_id_or_active(task.value, session_id)
        if isinstance(target, Err):
            return target

        now = self._clock.now()
        abandoned = task.value.abandon_session(target.value, now)
        if isinstance(abandoned, Err):
            return abandoned

        self._tasks.save(abandoned.value)
        logger.info(f"Abandoned session {target.value} on task {task_id}")
        event = SessionAbandoned(aggregate_id=task_id, occurred_at=now, session_id=target.value)
        return Ok((abandoned.value, event))

    def add_manual_session(
        self,
        task_id: str,
        started_at: datetime,
        ended_at: datetime,
        focus_level: str | FocusLevel,
        note: str | None = None,
    ) -> Result[tuple[Task, SessionCompleted], DomainError]:
        task = self.get_task(task_id)
        if isinstance(task, Err):
            return task

        logged = task.value.add_manual_session(started_at, ended_at, focus_level, note)
        if isinstance(logged, Err):
            return logged

        updated = logged.value
        self._tasks.save(updated)
        session = updated.sessions[-1]
        event = SessionCompleted(
            aggregate_id=task_id,
            occurred_at=self._clock.now(),
            session_id=session.id,
            focus_level=session.focus_level.value,
            duration_seconds=session.duration_seconds,
            is_manual=True,
        )
        return Ok((updated, event))

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _next_order(self, location: BacklogLocation | SprintLocation) -> int:
        orders = [t.order for t in self._tasks.find_by_location(location)]
        return max(orders, default=-1) + 1

    def _place_last(self, task: Task, relocated: bool) -> Task:
        if not relocated:
            return task
        siblings = [t.order for t in self._tasks.find_by_location(task.location) if t.id != task.id]
        return task.model_copy(update={"order": max(siblings, default=-1) + 1})

    def _reset_cycle(self, closed: Task) -> None:
        """Closing a task starts a new ordering cycle in its location."""
        released = clear_skipped_for_now(self._tasks.find_by_location(closed.location))
        for task in released:
            self._tasks.save(task)
        if released:
            logger.debug(f"Released {len(released)} skipped-for-now task(s)")

    @staticmethod
    def _session_id_or_active(task: Task, session_id: str | None) -> Result[str, DomainError]:
        if session_id is not None:
            return Ok(session_id)
        active = task.active_session
        if active is None:
            return Err(invalid_transition("Task has no session in progress"))
        return Ok(active.id)

    @staticmethod
    def _with_session_note(task: Task, session_id: str, note: str) -> Task:
        sessions = tuple(s.with_note(note) if s.id == session_id else s for s in task.sessions)
        return task.model_copy(update={"sessions": sessions})

    @staticmethod
    def _created_event(task: Task, now: datetime) -> TaskCreated:
        return TaskCreated(
            aggregate_id=task.id,
            occurred_at=now,
            title=task.title,
            tag_points=task.tag_points.to_dict(),
            parent_id=task.parent_id,
        )
