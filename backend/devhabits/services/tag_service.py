"""Tag Service — CRUD for tags with case-insensitive unique names.

Invariants:
    - Tag names are unique ignoring case; duplicates raise DuplicateResourceError (409)
    - Deleting a tag removes its habit links, never the habits
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from devhabits.core.domain_types import TagId
from devhabits.core.errors import (
    DuplicateResourceError, ErrorContext, ResourceNotFoundError,
)
from devhabits.core.repository_protocols import TagRepository
from devhabits.core.tag import Tag
from devhabits.infrastructure.clock import Clock, utc_now
from devhabits.infrastructure.repositories import SqlTagRepository
from devhabits.schemas.tag import TagCreate, TagUpdate

logger = logging.getLogger(__name__)


class TagService:
    """Tag CRUD."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.tags: TagRepository = SqlTagRepository(db)

    async def get_tag_or_404(self, tag_id: TagId) -> Tag:
        tag = await self.tags.get(tag_id)
        if tag is None:
            raise ResourceNotFoundError(
                "Tag", str(tag_id), ErrorContext(tag_id=str(tag_id)),
            )
        return tag

    async def list_tags(self) -> list[Tag]:
        return await self.tags.list_all()

    async def create_tag(self, body: TagCreate) -> Tag:
        await self._ensure_name_available(body.name)
        tag = Tag(
            name=body.name, description=body.description, created_at_utc=self.clock(),
        )
        await self.tags.add(tag)
        await self.db.commit()
        logger.info(f"Created tag '{tag.name}'", extra={"tag_id": tag.id})
        return tag

    async def update_tag(self, tag_id: TagId, body: TagUpdate) -> Tag:
        tag = await self.get_tag_or_404(tag_id)
        if body.name.lower() != tag.name.lower():
            await self._ensure_name_available(body.name)
        tag.name = body.name
        tag.description = body.description
        tag.touch(self.clock())
        await self.tags.update(tag)
        await self.db.commit()
        logger.info("Updated tag", extra={"tag_id": tag.id})
        return tag

    async def delete_tag(self, tag_id: TagId) -> None:
        await self.get_tag_or_404(tag_id)
        await self.tags.delete(tag_id)
        await self.db.commit()
        logger.info("Deleted tag", extra={"tag_id": tag_id})

    async def _ensure_name_available(self, name: str) -> None:
        if await self.tags.get_by_name(name) is not None:
            raise DuplicateResourceError("Tag", name)
