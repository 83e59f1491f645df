"""Tag application service."""

import logging

from checkmate.domain.shared import DomainError, Err, Ok, Result, forbidden, not_found, validation
from checkmate.domain.tag import UNTAGGED_CAPACITY, UNTAGGED_ID, Tag
from checkmate.ports.repositories import TagRepository

logger = logging.getLogger(__name__)


class TagService:
    """Tag catalogue management. The untagged tag always exists."""

    def __init__(self, tags: TagRepository, default_capacity: int = UNTAGGED_CAPACITY) -> None:
        self._tags = tags
        self._default_capacity = default_capacity

    def ensure_untagged(self) -> Tag:
        existing = self._tags.find_by_id(UNTAGGED_ID)
        if existing is not None:
            return existing
        tag = Tag.untagged()
        self._tags.save(tag)
        return tag

    def list_tags(self) -> list[Tag]:
        self.ensure_untagged()
        return self._tags.find_all()

    def get_tag(self, tag_id: str) -> Result[Tag, DomainError]:
        tag = self._tags.find_by_id(tag_id)
        if tag is None:
            return Err(not_found(f"Tag not found: {tag_id}"))
        return Ok(tag)

    def resolve(self, name_or_id: str) -> Tag | None:
        """Find a tag by id first, then by name."""
        return self._tags.find_by_id(name_or_id) or self._tags.find_by_name(name_or_id)

    def create_tag(
        self,
        name: str,
        default_capacity: int | None = None,
        icon: str = "",
        color: str = "#6b7280",
    ) -> Result[Tag, DomainError]:
        if self._tags.find_by_name(name) is not None:
            return Err(validation(f"A tag named '{name.strip()}' already exists"))

        capacity = default_capacity if default_capacity is not None else self._default_capacity
        created = Tag.create(name, capacity, icon=icon, color=color)
        if isinstance(created, Err):
            return created

        self._tags.save(created.value)
        logger.info(f"Created tag {created.value.id} '{created.value.name}'")
        return created

    def update_default_capacity(self, tag_id: str, capacity: int) -> Result[Tag, DomainError]:
        tag = self.get_tag(tag_id)
        if isinstance(tag, Err):
            return tag
        updated = tag.value.update_default_capacity(capacity)
        if isinstance(updated, Err):
            return updated
        self._tags.save(updated.value)
        return updated

    def rename_tag(self, tag_id: str, name: str) -> Result[Tag, DomainError]:
        tag = self.get_tag(tag_id)
        if isinstance(tag, Err):
            return tag
        clash = self._tags.find_by_name(name)
        if clash is not None and clash.id != tag_id:
            return Err(validation(f"A tag named '{name.strip()}' already exists"))
        updated = tag.value.rename(name)
        if isinstance(updated, Err):
            return updated
        self._tags.save(updated.value)
        return updated

    def restyle_tag(
        self, tag_id: str, icon: str | None = None, color: str | None = None
    ) -> Result[Tag, DomainError]:
        tag = self.get_tag(tag_id)
        if isinstance(tag, Err):
            return tag
        updated = tag.value.restyle(icon=icon, color=color)
        if isinstance(updated, Err):
            return updated
        self._tags.save(updated.value)
        return updated

    def delete_tag(self, tag_id: str) -> Result[None, DomainError]:
        if tag_id == UNTAGGED_ID:
            return Err(forbidden("The Untagged tag cannot be deleted"))
        if not self._tags.delete(tag_id):
            return Err(not_found(f"Tag not found: {tag_id}"))
        logger.info(f"Deleted tag {tag_id}")
        return Ok(None)
