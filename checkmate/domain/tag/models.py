"""Tag domain models.

Tags categorize tasks and carry a default weekly point capacity. The
special ``untagged`` tag always exists and cannot be modified.
"""

from pydantic import BaseModel

from checkmate.domain.shared import DomainError, Err, Ok, Result, forbidden, validation
from checkmate.domain.types import TagId, new_id

UNTAGGED_ID = "untagged"
UNTAGGED_CAPACITY = 10


class Tag(BaseModel):
    """A task category with a default sprint capacity."""

    id: TagId
    name: str
    icon: str = ""
    color: str = "#6b7280"
    default_capacity: int

    model_config = {"frozen": True}

    @classmethod
    def create(
        cls,
        name: str,
        default_capacity: int,
        icon: str = "",
        color: str = "#6b7280",
    ) -> Result["Tag", DomainError]:
        trimmed = name.strip()
        if not trimmed:
            return Err(validation("Tag name cannot be empty"))
        if default_capacity <= 0:
            return Err(validation("Default capacity must be greater than 0"))
        return Ok(
            cls(
                id=new_id("tag"),
                name=trimmed,
                icon=icon,
                color=color,
                default_capacity=default_capacity,
            )
        )

    @classmethod
    def untagged(cls) -> "Tag":
        return cls(
            id=UNTAGGED_ID,
            name="Untagged",
            icon="📦",
            color="#6b7280",
            default_capacity=UNTAGGED_CAPACITY,
        )

    @property
    def is_untagged(self) -> bool:
        return self.id == UNTAGGED_ID

    def rename(self, name: str) -> Result["Tag", DomainError]:
        if self.is_untagged:
            return Err(forbidden("The Untagged tag cannot be modified"))
        trimmed = name.strip()
        if not trimmed:
            return Err(validation("Tag name cannot be empty"))
        return Ok(self.model_copy(update={"name": trimmed}))

    def restyle(self, icon: str | None = None, color: str | None = None) -> Result["Tag", DomainError]:
        if self.is_untagged:
            return Err(forbidden("The Untagged tag cannot be modified"))
        update = {}
        if icon is not None:
            update["icon"] = icon
        if color is not None:
            update["color"] = color
        return Ok(self.model_copy(update=update))

    def update_default_capacity(self, capacity: int) -> Result["Tag", DomainError]:
        if self.is_untagged:
            return Err(forbidden("The Untagged tag cannot be modified"))
        if capacity <= 0:
            return Err(validation("Default capacity must be greater than 0"))
        return Ok(self.model_copy(update={"default_capacity": capacity}))
