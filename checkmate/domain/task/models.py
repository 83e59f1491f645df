"""Task domain models.

The Task aggregate owns its sessions, comments, location and skip state,
and enforces every task-level rule. Operations never mutate: each returns
``Ok(new_task)`` or ``Err(DomainError)``.

Lifecycle: active -> completed | canceled (both terminal).
"""

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Annotated, Literal, Union, assert_never

from pydantic import BaseModel, Field

from checkmate.domain.shared import (
    DomainError,
    Err,
    Ok,
    Result,
    forbidden,
    invalid_transition,
    not_found,
    validation,
)
from checkmate.domain.task.comment import Comment
from checkmate.domain.task.session import FocusLevel, Session, parse_focus_level
from checkmate.domain.types import (
    BACKLOG,
    BacklogLocation,
    CommentId,
    SprintLocation,
    TagPoints,
    TaskId,
    TaskLocation,
    new_id,
    sprint_location,
)


class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self is not TaskStatus.ACTIVE

    def can_transition_to(self, target: "TaskStatus") -> bool:
        """Only active tasks move, and only into a terminal state."""
        if self.is_terminal:
            return False
        return target.is_terminal


# =============================================================================
# Skip State
# =============================================================================


class SkipForNow(BaseModel):
    """Deprioritized once: sinks below normal tasks but stays visible."""

    type: Literal["for_now"] = "for_now"
    skipped_at: datetime

    model_config = {"frozen": True}


class SkipForDay(BaseModel):
    """Hidden from the focus queue until it returns.

    Always backed by a skip-justification comment on the task.
    """

    type: Literal["for_day"] = "for_day"
    skipped_at: datetime
    return_at: datetime
    justification_comment_id: CommentId
    returned: bool = False

    model_config = {"frozen": True}

    def is_due(self, now: datetime) -> bool:
        return not self.returned and now >= self.return_at

    def mark_returned(self) -> "SkipForDay":
        return self.model_copy(update={"returned": True})


SkipState = Annotated[Union[SkipForNow, SkipForDay], Field(discriminator="type")]


def _next_utc_midnight(now: datetime) -> datetime:
    day = now.astimezone(UTC).date() + timedelta(days=1)
    return datetime(day.year, day.month, day.day, tzinfo=UTC)


# =============================================================================
# Task Aggregate
# =============================================================================


class Task(BaseModel):
    """Aggregate root for a unit of work.

    A task with a recurrence rule is a template: it stays in the backlog,
    never holds a session, and only spawns instances.
    """

    id: TaskId
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.ACTIVE
    tag_points: TagPoints
    location: TaskLocation = BACKLOG
    created_at: datetime
    completed_at: datetime | None = None
    canceled_at: datetime | None = None
    skip_state: SkipState | None = None
    recurrence: str | None = None
    parent_id: TaskId | None = None
    comments: tuple[Comment, ...] = ()
    sessions: tuple[Session, ...] = ()
    sprint_history: tuple[str, ...] = ()
    order: int = 0

    model_config = {"frozen": True}

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        title: str,
        tag_points: dict[str, int],
        now: datetime,
        description: str = "",
        location: BacklogLocation | SprintLocation = BACKLOG,
        recurrence: str | None = None,
        order: int = 0,
    ) -> Result["Task", DomainError]:
        """Create a new active task.

        Args:
            title: Non-empty title (trimmed).
            tag_points: Tag id -> Fibonacci points.
            now: Creation instant.
            description: Optional free text.
            location: Backlog by default.
            recurrence: Recurrence rule; makes the task a template.
            order: Position within its location.

        Returns:
            Ok(Task), or Err when the title, points or location are invalid.
        """
        trimmed = title.strip()
        if not trimmed:
            return Err(validation("Task title cannot be empty"))

        points = TagPoints.create(tag_points)
        if isinstance(points, Err):
            return points

        rule = (recurrence or "").strip() or None
        if rule is not None and isinstance(location, SprintLocation):
            return Err(forbidden("Recurring templates cannot be placed in a sprint"))

        return Ok(
            cls(
                id=new_id("task"),
                title=trimmed,
                description=description.strip(),
                tag_points=points.value,
                location=location,
                created_at=now,
                recurrence=rule,
                order=order,
            )
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status is TaskStatus.ACTIVE

    @property
    def is_template(self) -> bool:
        return self.recurrence is not None

    @property
    def total_points(self) -> int:
        return self.tag_points.total

    @property
    def active_session(self) -> Session | None:
        for session in self.sessions:
            if session.is_in_progress:
                return session
        return None

    @property
    def is_hidden(self) -> bool:
        """Skipped for the day and not yet returned."""
        return isinstance(self.skip_state, SkipForDay) and not self.skip_state.returned

    def is_in(self, location: BacklogLocation | SprintLocation) -> bool:
        return self.location == location

    def find_comment(self, comment_id: str) -> Comment | None:
        return next((c for c in self.comments if c.id == comment_id), None)

    def find_session(self, session_id: str) -> Session | None:
        return next((s for s in self.sessions if s.id == session_id), None)

    def age_days(self, now: datetime) -> int:
        return (now - self.created_at).days

    # -------------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------------

    def complete(self, now: datetime) -> Result["Task", DomainError]:
        if not self.status.can_transition_to(TaskStatus.COMPLETED):
            return Err(self._terminal_error("complete"))
        return Ok(
            self.model_copy(
                update={"status": TaskStatus.COMPLETED, "completed_at": now, "skip_state": None}
            )
        )

    def cancel(self, justification: str, now: datetime) -> Result["Task", DomainError]:
        """Cancel with a mandatory justification, recorded as a flagged comment."""
        if not self.status.can_transition_to(TaskStatus.CANCELED):
            return Err(self._terminal_error("cancel"))
        if not justification.strip():
            return Err(validation("Cancellation justification is required"))

        comment = Comment.cancel_justification(justification, now)
        if isinstance(comment, Err):
            return comment

        return Ok(
            self.model_copy(
                update={
                    "status": TaskStatus.CANCELED,
                    "canceled_at": now,
                    "skip_state": None,
                    "comments": (*self.comments, comment.value),
                }
            )
        )

    # -------------------------------------------------------------------------
    # Skip state
    # -------------------------------------------------------------------------

    def skip_for_now(self, now: datetime) -> Result["Task", DomainError]:
        if not self.is_active:
            return Err(self._terminal_error("skip"))
        if isinstance(self.skip_state, SkipForNow):
            return Ok(self)
        return Ok(self.model_copy(update={"skip_state": SkipForNow(skipped_at=now)}))

    def skip_for_day(self, justification: str, now: datetime) -> Result["Task", DomainError]:
        """Hide the task until the next UTC midnight.

        The justification becomes a flagged comment linked from the skip state.
        """
        if not justification.strip():
            return Err(validation("Justification is required to skip for the day"))
        if not self.is_active:
            return Err(self._terminal_error("skip"))

        comment = Comment.skip_justification(justification, now)
        if isinstance(comment, Err):
            return comment

        skip = SkipForDay(
            skipped_at=now,
            return_at=_next_utc_midnight(now),
            justification_comment_id=comment.value.id,
        )
        return Ok(
            self.model_copy(
                update={"skip_state": skip, "comments": (*self.comments, comment.value)}
            )
        )

    def clear_skip_state(self) -> "Task":
        """Drop any skip state; always allowed."""
        if self.skip_state is None:
            return self
        return self.model_copy(update={"skip_state": None})

    def mark_skip_returned(self) -> Result["Task", DomainError]:
        """Surface a task that was skipped for the day."""
        if not isinstance(self.skip_state, SkipForDay):
            return Err(invalid_transition("Only a task skipped for the day can return"))
        return Ok(self.model_copy(update={"skip_state": self.skip_state.mark_returned()}))

    # -------------------------------------------------------------------------
    # Location
    # -------------------------------------------------------------------------

    def move_to_sprint(self, sprint_id: str) -> Result["Task", DomainError]:
        problem = self._movable_problem()
        if problem:
            return Err(problem)
        target = sprint_location(sprint_id)
        if isinstance(target, Err):
            return target
        return Ok(self._relocated(target.value))

    def move_to_backlog(self) -> Result["Task", DomainError]:
        problem = self._movable_problem()
        if problem:
            return Err(problem)
        return Ok(self._relocated(BACKLOG))

    def reorder(self, order: int) -> Result["Task", DomainError]:
        if not self.is_active:
            return Err(self._terminal_error("reorder"))
        return Ok(self.model_copy(update={"order": order}))

    def _movable_problem(self) -> DomainError | None:
        if not self.is_active:
            return self._terminal_error("move")
        if self.is_template:
            return forbidden("Recurring templates cannot be moved")
        return None

    def _relocated(self, target: BacklogLocation | SprintLocation) -> "Task":
        history = self.sprint_history
        current = self.location
        if isinstance(current, SprintLocation):
            if current != target:
                history = (*history, current.sprint_id)
        elif isinstance(current, BacklogLocation):
            pass
        else:
            assert_never(current)
        return self.model_copy(
            update={"location": target, "sprint_history": history, "skip_state": None}
        )

    # -------------------------------------------------------------------------
    # Field updates
    # -------------------------------------------------------------------------

    def update_title(self, title: str) -> Result["Task", DomainError]:
        if not self.is_active:
            return Err(self._terminal_error("update"))
        trimmed = title.strip()
        if not trimmed:
            return Err(validation("Task title cannot be empty"))
        return Ok(self.model_copy(update={"title": trimmed}))

    def update_description(self, description: str) -> Result["Task", DomainError]:
        if not self.is_active:
            return Err(self._terminal_error("update"))
        return Ok(self.model_copy(update={"description": description.strip()}))

    def update_tag_points(self, tag_points: dict[str, int]) -> Result["Task", DomainError]:
        """Replace the whole tag point mapping."""
        if not self.is_active:
            return Err(self._terminal_error("update"))
        points = TagPoints.create(tag_points)
        if isinstance(points, Err):
            return points
        return Ok(self.model_copy(update={"tag_points": points.value}))

    def add_tag(self, tag_id: str, points: int) -> Result["Task", DomainError]:
        if not self.is_active:
            return Err(self._terminal_error("update"))
        updated = self.tag_points.with_tag(tag_id, points)
        if isinstance(updated, Err):
            return updated
        return Ok(self.model_copy(update={"tag_points": updated.value}))

    def remove_tag(self, tag_id: str) -> Result["Task", DomainError]:
        if not self.is_active:
            return Err(self._terminal_error("update"))
        if not self.tag_points.has_tag(tag_id):
            return Err(not_found(f"Task has no tag {tag_id}"))
        updated = self.tag_points.without_tag(tag_id)
        if isinstance(updated, Err):
            return updated
        return Ok(self.model_copy(update={"tag_points": updated.value}))

    # -------------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------------

    def add_comment(
        self, content: str, now: datetime
    ) -> Result[tuple["Task", Comment], DomainError]:
        """Append a comment; allowed in every status so history stays editable."""
        comment = Comment.create(content, now)
        if isinstance(comment, Err):
            return comment
        task = self.model_copy(update={"comments": (*self.comments, comment.value)})
        return Ok((task, comment.value))

    def update_comment(
        self, comment_id: str, content: str, now: datetime
    ) -> Result["Task", DomainError]:
        existing = self.find_comment(comment_id)
        if existing is None:
            return Err(not_found(f"Comment not found: {comment_id}"))
        updated = existing.update_content(content, now)
        if isinstance(updated, Err):
            return updated
        comments = tuple(updated.value if c.id == comment_id else c for c in self.comments)
        return Ok(self.model_copy(update={"comments": comments}))

    def remove_comment(self, comment_id: str) -> Result["Task", DomainError]:
        existing = self.find_comment(comment_id)
        if existing is None:
            return Err(not_found(f"Comment not found: {comment_id}"))
        if existing.is_system:
            return Err(forbidden("Skip and cancel justifications cannot be deleted"))
        comments = tuple(c for c in self.comments if c.id != comment_id)
        return Ok(self.model_copy(update={"comments": comments}))

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def start_session(
        self, duration_minutes: int | None, now: datetime
    ) -> Result[tuple["Task", str], DomainError]:
        """Open a focus session; at most one may be in progress.

        Returns:
            Ok((task, session_id)) on success.
        """
        if not self.is_active:
            return Err(self._terminal_error("start a session on"))
        if self.is_template:
            return Err(forbidden("Recurring templates cannot hold sessions"))
        if self.active_session is not None:
            return Err(invalid_transition("Task already has a session in progress"))

        session = Session.start(self.id, now, planned_minutes=duration_minutes)
        if isinstance(session, Err):
            return session

        task = self.model_copy(update={"sessions": (*self.sessions, session.value)})
        return Ok((task, session.value.id))

    def end_session(
        self, session_id: str, focus_level: str | FocusLevel, now: datetime
    ) -> Result["Task", DomainError]:
        level = parse_focus_level(focus_level)
        if isinstance(level, Err):
            return level
        return self._change_session(session_id, lambda s: s.complete(level.value, now))

    def abandon_session(self, session_id: str, now: datetime) -> Result["Task", DomainError]:
        return self._change_session(session_id, lambda s: s.abandon(now))

    def add_manual_session(
        self,
        started_at: datetime,
        ended_at: datetime,
        focus_level: str | FocusLevel,
        note: str | None = None,
    ) -> Result["Task", DomainError]:
        if not self.is_active:
            return Err(self._terminal_error("log a session on"))
        if self.is_template:
            return Err(forbidden("Recurring templates cannot hold sessions"))
        level = parse_focus_level(focus_level)
        if isinstance(level, Err):
            return level
        session = Session.manual(self.id, started_at, ended_at, level.value, note)
        if isinstance(session, Err):
            return session
        return Ok(self.model_copy(update={"sessions": (*self.sessions, session.value)}))

    def _change_session(self, session_id, change) -> Result["Task", DomainError]:
        existing = self.find_session(session_id)
        if existing is None:
            return Err(not_found(f"Session not found: {session_id}"))
        updated = change(existing)
        if isinstance(updated, Err):
            return updated
        sessions = tuple(updated.value if s.id == session_id else s for s in self.sessions)
        return Ok(self.model_copy(update={"sessions": sessions}))

    # -------------------------------------------------------------------------
    # Recurrence
    # -------------------------------------------------------------------------

    def spawn_instance(self, now: datetime) -> Result["Task", DomainError]:
        """Create a fresh backlog task from this recurring template."""
        if not self.is_template:
            return Err(validation("Can only spawn instances from recurring templates"))
        return Ok(
            Task(
                id=new_id("task"),
                title=self.title,
                description=self.description,
                tag_points=self.tag_points,
                location=BACKLOG,
                created_at=now,
                parent_id=self.id,
            )
        )

    def _terminal_error(self, action: str) -> DomainError:
        return invalid_transition(f"Cannot {action} a task that is {self.status.value}")
