"""Focus sessions.

A session is a timed focus interval on a task. Lifecycle:
in_progress -> completed | abandoned. Manual sessions are logged after the
fact and are created already completed.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, computed_field

from checkmate.domain.shared import DomainError, Err, Ok, Result, invalid_transition, validation
from checkmate.domain.types import SessionId, TaskId, new_id


class SessionStatus(str, Enum):
    """Status of a focus session."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.IN_PROGRESS


class FocusLevel(str, Enum):
    """Self-reported focus quality, recorded when a session completes."""

    DISTRACTED = "distracted"
    NEUTRAL = "neutral"
    FOCUSED = "focused"


def parse_focus_level(value: str | FocusLevel) -> Result[FocusLevel, DomainError]:
    """Convert user input to a FocusLevel, rejecting unknown values."""
    try:
        return Ok(FocusLevel(value))
    except ValueError:
        allowed = ", ".join(level.value for level in FocusLevel)
        return Err(validation(f"Invalid focus level: {value}. Must be one of: {allowed}"))


class Session(BaseModel):
    """A timed focus interval attached to a task."""

    id: SessionId
    task_id: TaskId
    status: SessionStatus
    started_at: datetime
    ended_at: datetime | None = None
    focus_level: FocusLevel | None = None
    note: str | None = None
    is_manual: bool = False
    planned_minutes: int | None = None

    model_config = {"frozen": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration_seconds(self) -> int:
        """Whole seconds between start and end, 0 while still running."""
        if self.ended_at is None:
            return 0
        return int((self.ended_at - self.started_at).total_seconds())

    @property
    def is_in_progress(self) -> bool:
        return self.status is SessionStatus.IN_PROGRESS

    @classmethod
    def start(
        cls,
        task_id: str,
        now: datetime,
        planned_minutes: int | None = None,
    ) -> Result["Session", DomainError]:
        """Open a new in-progress session."""
        if planned_minutes is not None and planned_minutes <= 0:
            return Err(validation("Session duration must be a positive number of minutes"))
        return Ok(
            cls(
                id=new_id("session"),
                task_id=task_id,
                status=SessionStatus.IN_PROGRESS,
                started_at=now,
                planned_minutes=planned_minutes,
            )
        )

    @classmethod
    def manual(
        cls,
        task_id: str,
        started_at: datetime,
        ended_at: datetime,
        focus_level: FocusLevel,
        note: str | None = None,
    ) -> Result["Session", DomainError]:
        """Log a backdated, already completed session.

        Fails with a validation error unless ended_at is after started_at.
        """
        if ended_at <= started_at:
            return Err(validation("End time must be after start time"))
        return Ok(
            cls(
                id=new_id("session"),
                task_id=task_id,
                status=SessionStatus.COMPLETED,
                started_at=started_at,
                ended_at=ended_at,
                focus_level=FocusLevel(focus_level),
                note=(note or "").strip() or None,
                is_manual=True,
            )
        )

    def complete(self, focus_level: FocusLevel, now: datetime) -> Result["Session", DomainError]:
        if not self.is_in_progress:
            return Err(
                invalid_transition(
                    f"Can only end an in-progress session (session is {self.status.value})"
                )
            )
        return Ok(
            self.model_copy(
                update={
                    "status": SessionStatus.COMPLETED,
                    "ended_at": now,
                    "focus_level": FocusLevel(focus_level),
                }
            )
        )

    def abandon(self, now: datetime) -> Result["Session", DomainError]:
        if not self.is_in_progress:
            return Err(
                invalid_transition(
                    f"Can only abandon an in-progress session (session is {self.status.value})"
                )
            )
        return Ok(self.model_copy(update={"status": SessionStatus.ABANDONED, "ended_at": now}))

    def with_note(self, note: str) -> "Session":
        return self.model_copy(update={"note": note.strip() or None})
