"""Base domain event infrastructure.

Domain events are immutable records of something that happened to an
aggregate. Application services return them next to the updated aggregate
so callers can log, audit or broadcast state changes.

Example usage:
    >>> class TaskCompleted(DomainEvent):
    ...     task_id: str
    ...
    >>> event = TaskCompleted(aggregate_id="task_1", task_id="task_1", occurred_at=now)
"""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all domain events.

    Attributes:
        event_id: Unique identifier for this event instance.
        aggregate_id: Identifier of the aggregate the event concerns.
        occurred_at: When the event happened (supplied by the caller's clock).
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    aggregate_id: str
    occurred_at: datetime

    model_config = {"frozen": True}

    @property
    def event_type(self) -> str:
        """Name of the event, e.g. ``TaskCompleted``."""
        return type(self).__name__
