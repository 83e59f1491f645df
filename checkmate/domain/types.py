"""Domain value objects for Checkmate.

Immutable identities and values shared by every aggregate. Validation rules
live here once and are reused everywhere a value is built or deserialized.
"""

import time
from collections.abc import Iterator, Mapping
from typing import Annotated, Literal, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, RootModel, StringConstraints, field_validator

from checkmate.domain.shared import DomainError, Err, Ok, Result, validation

# =============================================================================
# Identities
# =============================================================================

_Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

TaskId = _Identifier
SprintId = _Identifier
TagId = _Identifier
SessionId = _Identifier
CommentId = _Identifier
RoutineId = _Identifier


def new_id(kind: str) -> str:
    """Generate an identifier like ``task_1a2b3c4d_1736121600000``.

    Args:
        kind: Aggregate kind used as prefix ("task", "sprint", ...).

    Returns:
        A unique, roughly time-sortable identifier.
    """
    return f"{kind}_{uuid4().hex[:8]}_{int(time.time() * 1000)}"


# =============================================================================
# Points
# =============================================================================

# Listed in error messages; the accepted set continues indefinitely.
FIBONACCI_POINTS: tuple[int, ...] = (1, 2, 3, 5, 8, 13, 21, 34, 55, 89)


def is_fibonacci_point(value: object) -> bool:
    """Check that a value belongs to 1, 2, 3, 5, 8, 13, ...

    Booleans and non-integers are never valid point values.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return False
    a, b = 1, 2
    while a < value:
        a, b = b, a + b
    return a == value


def _tag_points_problem(points: Mapping[str, object]) -> str | None:
    if not points:
        return "Task must have at least one tag with points"
    for tag_id, value in points.items():
        if not isinstance(tag_id, str) or not tag_id.strip():
            return "Tag id cannot be empty"
        if not is_fibonacci_point(value):
            allowed = ", ".join(str(p) for p in FIBONACCI_POINTS)
            return (
                f"Points must be a Fibonacci number ({allowed}, ...). "
                f"Got: {value!r} for tag {tag_id}"
            )
    return None


class TagPoints(RootModel[dict[str, int]]):
    """Points allocated to each tag of a task.

    Every value is a Fibonacci number and at least one tag is present.
    Replaced wholesale on update; the ``with_*`` helpers return new instances.

    Example:
        points = TagPoints.create({"work": 5, "admin": 1}).value
        points.total  # 6
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root", mode="before")
    @classmethod
    def _validate_points(cls, value: object) -> object:
        if isinstance(value, Mapping):
            problem = _tag_points_problem(value)
            if problem:
                raise ValueError(problem)
        return value

    @classmethod
    def create(cls, points: Mapping[str, int]) -> Result["TagPoints", DomainError]:
        """Build TagPoints, returning a validation error instead of raising."""
        problem = _tag_points_problem(points)
        if problem:
            return Err(validation(problem))
        return Ok(cls({tag_id.strip(): value for tag_id, value in points.items()}))

    def get(self, tag_id: str) -> int:
        """Points for a tag, 0 if the tag is not present."""
        return self.root.get(tag_id, 0)

    def has_tag(self, tag_id: str) -> bool:
        return tag_id in self.root

    def tag_ids(self) -> list[str]:
        return list(self.root)

    def items(self) -> Iterator[tuple[str, int]]:
        return iter(self.root.items())

    @property
    def total(self) -> int:
        return sum(self.root.values())

    def to_dict(self) -> dict[str, int]:
        return dict(self.root)

    def with_tag(self, tag_id: str, points: int) -> Result["TagPoints", DomainError]:
        """Return new TagPoints with a tag added or its points replaced."""
        return TagPoints.create({**self.root, tag_id: points})

    def without_tag(self, tag_id: str) -> Result["TagPoints", DomainError]:
        """Return new TagPoints without a tag; the last tag cannot be removed."""
        remaining = {k: v for k, v in self.root.items() if k != tag_id}
        return TagPoints.create(remaining)


# =============================================================================
# Task Location
# =============================================================================


class BacklogLocation(BaseModel):
    """The unscheduled default location of a task."""

    type: Literal["backlog"] = "backlog"

    model_config = {"frozen": True}

    @property
    def sprint_id(self) -> None:
        return None

    def __str__(self) -> str:
        return "backlog"


class SprintLocation(BaseModel):
    """A task scheduled into a specific sprint."""

    type: Literal["sprint"] = "sprint"
    sprint_id: SprintId

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"sprint:{self.sprint_id}"


TaskLocation = Annotated[Union[BacklogLocation, SprintLocation], Field(discriminator="type")]

BACKLOG = BacklogLocation()


def sprint_location(sprint_id: str) -> Result[SprintLocation, DomainError]:
    """Build a sprint location, rejecting an empty sprint id."""
    if not sprint_id or not sprint_id.strip():
        return Err(validation("Sprint ID cannot be empty"))
    return Ok(SprintLocation(sprint_id=sprint_id.strip()))
