"""Comments attached to tasks.

A comment is either freeform or a system-generated justification for a
skip or a cancellation. Justification comments are flagged and cannot be
deleted directly.
"""

from datetime import datetime

from pydantic import BaseModel, model_validator

from checkmate.domain.shared import DomainError, Err, Ok, Result, validation
from checkmate.domain.types import CommentId, new_id


class Comment(BaseModel):
    """A note on a task."""

    id: CommentId
    content: str
    created_at: datetime
    updated_at: datetime | None = None
    is_skip_justification: bool = False
    is_cancel_justification: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _flags_are_exclusive(self) -> "Comment":
        if self.is_skip_justification and self.is_cancel_justification:
            raise ValueError("A comment cannot justify both a skip and a cancellation")
        return self

    @property
    def is_system(self) -> bool:
        """True for skip or cancel justifications."""
        return self.is_skip_justification or self.is_cancel_justification

    @classmethod
    def create(cls, content: str, now: datetime) -> Result["Comment", DomainError]:
        return cls._build(content, now)

    @classmethod
    def skip_justification(cls, content: str, now: datetime) -> Result["Comment", DomainError]:
        return cls._build(content, now, is_skip_justification=True)

    @classmethod
    def cancel_justification(cls, content: str, now: datetime) -> Result["Comment", DomainError]:
        return cls._build(content, now, is_cancel_justification=True)

    def update_content(self, content: str, now: datetime) -> Result["Comment", DomainError]:
        trimmed = content.strip()
        if not trimmed:
            return Err(validation("Comment content cannot be empty"))
        return Ok(self.model_copy(update={"content": trimmed, "updated_at": now}))

    @classmethod
    def _build(
        cls,
        content: str,
        now: datetime,
        is_skip_justification: bool = False,
        is_cancel_justification: bool = False,
    ) -> Result["Comment", DomainError]:
        trimmed = content.strip()
        if not trimmed:
            return Err(validation("Comment content cannot be empty"))
        return Ok(
            cls(
                id=new_id("comment"),
                content=trimmed,
                created_at=now,
                is_skip_justification=is_skip_justification,
                is_cancel_justification=is_cancel_justification,
            )
        )
