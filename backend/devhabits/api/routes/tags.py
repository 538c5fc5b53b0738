"""Tag Routes — CRUD for tags.

Invariants:
    - Duplicate names rejected with 409 by TagService
    - Deleting a tag unlinks it from every habit
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from devhabits.core.domain_types import TagId
from devhabits.infrastructure.clock import Clock, get_clock
from devhabits.infrastructure.database import get_db
from devhabits.schemas.tag import (
    TagCreate, TagResponse, TagsCollectionResponse, TagUpdate,
)
from devhabits.services.tag_service import TagService

router = APIRouter(prefix="/api/v1/tags", tags=["tags"])


def get_tag_service(
    db: AsyncSession = Depends(get_db), clock: Clock = Depends(get_clock),
) -> TagService:
    return TagService(db, clock)


@router.get("", response_model=TagsCollectionResponse)
async def list_tags(service: TagService = Depends(get_tag_service)):
    tags = await service.list_tags()
    return TagsCollectionResponse(items=[TagResponse.from_domain(t) for t in tags])


@router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(tag_id: UUID, service: TagService = Depends(get_tag_service)):
    return TagResponse.from_domain(await service.get_tag_or_404(TagId(tag_id)))


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(body: TagCreate, service: TagService = Depends(get_tag_service)):
    return TagResponse.from_domain(await service.create_tag(body))


@router.put("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_tag(
    tag_id: UUID, body: TagUpdate, service: TagService = Depends(get_tag_service),
):
    await service.update_tag(TagId(tag_id), body)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: UUID, service: TagService = Depends(get_tag_service)):
    await service.delete_tag(TagId(tag_id))
