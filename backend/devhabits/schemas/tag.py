"""Tag Schemas — Pydantic models for tag API boundaries.

Invariants:
    - Tag name: 1-50 chars, stripped, non-empty
    - Collections wrapped in an `items` envelope
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from devhabits.core.tag import MAX_TAG_NAME_LENGTH, Tag


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=MAX_TAG_NAME_LENGTH)
    description: str | None = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class TagUpdate(TagCreate):
    pass


class TagResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    created_at_utc: datetime
    updated_at_utc: datetime | None = None

    @classmethod
    def from_domain(cls, tag: Tag) -> "TagResponse":
        return cls(
            id=tag.id,
            name=tag.name,
            description=tag.description,
            created_at_utc=tag.created_at_utc,
            updated_at_utc=tag.updated_at_utc,
        )


class TagsCollectionResponse(BaseModel):
    items: list[TagResponse]
