"""Request/Response schemas for the Checkmate API.

These Pydantic models define the API contract for request and response
bodies. Domain models (Task, Sprint, Routine) are returned as they are.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from checkmate.domain.routine import Routine
from checkmate.domain.task import FocusLevel, Task


# =============================================================================
# Task Schemas
# =============================================================================


class CreateTaskRequest(BaseModel):
    """Request to create a task or recurring template."""

    title: str
    tag_points: dict[str, int]
    description: str = ""
    sprint_id: Optional[str] = None
    recurrence: Optional[str] = None


class CancelTaskRequest(BaseModel):
    justification: str


class SkipTaskRequest(BaseModel):
    """Skip for now, or for the day with a justification."""

    for_day: bool = False
    justification: Optional[str] = None


class MoveTaskRequest(BaseModel):
    """Move to a sprint, or to the backlog when ``sprint_id`` is omitted."""

    sprint_id: Optional[str] = None


class StartSessionRequest(BaseModel):
    minutes: Optional[int] = Field(default=None, gt=0)


class EndSessionRequest(BaseModel):
    focus_level: FocusLevel
    note: Optional[str] = None


class CommentRequest(BaseModel):
    content: str


# =============================================================================
# Focus Schemas
# =============================================================================


class FocusResponse(BaseModel):
    """Focus task, up-next list and counts for one location."""

    focus_task: Optional[Task] = None
    up_next: list[Task] = Field(default_factory=list)
    hidden_count: int = 0
    routine: Optional[Routine] = None
    filtered_out: int = 0


class ActiveRoutineResponse(BaseModel):
    routine: Optional[Routine] = None


# =============================================================================
# Errors
# =============================================================================


class ErrorResponse(BaseModel):
    kind: Literal["not_found", "validation", "invalid_transition", "forbidden"]
    message: str
