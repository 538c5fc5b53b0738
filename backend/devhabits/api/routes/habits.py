"""Habit Routes — CRUD, tag links, progress logging and progress snapshots.

Invariants:
    - Routes never contain business logic: every decision is made by HabitService / core
    - Rejected business rules surface as DevHabitsError and are rendered by the global handlers
    - Collections returned in an `items` envelope, no pagination

Design Decisions:
    - HabitService built per request from get_db + get_clock: tests override either dependency
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from devhabits.core.domain_types import HabitId, TagId
from devhabits.infrastructure.clock import Clock, get_clock
from devhabits.infrastructure.database import get_db
from devhabits.schemas.habit import (
    HabitCreate, HabitLogCreate, HabitLogResponse, HabitLogsCollectionResponse,
    HabitProgressResponse, HabitResponse, HabitsCollectionResponse,
    HabitUpdate, HabitWithTagsResponse, UpsertHabitTags,
)
from devhabits.services.habit_service import HabitService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/habits", tags=["habits"])


def get_habit_service(
    db: AsyncSession = Depends(get_db), clock: Clock = Depends(get_clock),
) -> HabitService:
    return HabitService(db, clock)


@router.get("", response_model=HabitsCollectionResponse)
async def list_habits(service: HabitService = Depends(get_habit_service)):
    """List all habits, oldest first."""
    habits = await service.list_habits()
    return HabitsCollectionResponse(
        items=[HabitResponse.from_domain(h) for h in habits],
    )


@router.get("/{habit_id}", response_model=HabitWithTagsResponse)
async def get_habit(
    habit_id: UUID, service: HabitService = Depends(get_habit_service),
):
    """Get one habit with the names of its tags."""
    habit, tags = await service.get_habit_with_tags(HabitId(habit_id))
    return HabitWithTagsResponse.from_domain(habit, tags=[t.name for t in tags])


@router.post(
    "", response_model=HabitResponse, status_code=status.HTTP_201_CREATED,
)
async def create_habit(
    body: HabitCreate, service: HabitService = Depends(get_habit_service),
):
    """Create a habit. Configuration rules checked by the core (400 on violation)."""
    habit = await service.create_habit(body)
    return HabitResponse.from_domain(habit)


@router.put("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_habit(
    habit_id: UUID,
    body: HabitUpdate,
    service: HabitService = Depends(get_habit_service),
):
    """Replace a habit's configuration and optionally its status."""
    await service.update_habit(HabitId(habit_id), body)


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_habit(
    habit_id: UUID, service: HabitService = Depends(get_habit_service),
):
    """Delete a habit, its logs and tag links. Completed habits with history are kept (409)."""
    await service.delete_habit(HabitId(habit_id))


@router.put("/{habit_id}/tags", status_code=status.HTTP_204_NO_CONTENT)
async def upsert_habit_tags(
    habit_id: UUID,
    body: UpsertHabitTags,
    service: HabitService = Depends(get_habit_service),
):
    """Replace every tag link of the habit."""
    await service.replace_tags(
        HabitId(habit_id), [TagId(t) for t in body.tag_ids],
    )


@router.post(
    "/{habit_id}/logs",
    response_model=HabitLogResponse,
    status_code=status.HTTP_201_CREATED,
)
async def log_progress(
    habit_id: UUID,
    body: HabitLogCreate,
    service: HabitService = Depends(get_habit_service),
):
    """Append a progress entry and advance milestones."""
    entry = await service.log_progress(HabitId(habit_id), body)
    return HabitLogResponse.from_domain(entry)


@router.get("/{habit_id}/logs", response_model=HabitLogsCollectionResponse)
async def list_logs(
    habit_id: UUID, service: HabitService = Depends(get_habit_service),
):
    """All log entries of the habit, newest first."""
    entries = await service.list_logs(HabitId(habit_id))
    return HabitLogsCollectionResponse(
        items=[HabitLogResponse.from_domain(e) for e in entries],
    )


@router.get("/{habit_id}/progress", response_model=HabitProgressResponse)
async def get_progress(
    habit_id: UUID, service: HabitService = Depends(get_habit_service),
):
    """Progress snapshot at the current time."""
    progress = await service.get_progress(HabitId(habit_id))
    return HabitProgressResponse.from_domain(habit_id, progress)
