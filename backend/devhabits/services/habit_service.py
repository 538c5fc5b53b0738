"""Habit Service — imperative shell around the habit core.

Invariants:
    - Every mutation consults core/business_rules.py first; a False result raises before any write
    - `now` is read once per operation from the injected clock and passed into the core
    - Commits happen here, once per operation; repositories only flush
    - Log entries are append-only: no update or delete path exists
    - Log timestamps may be back-dated but never later than the clock's `now`

Design Decisions:
    - Impureim sandwich: load (repositories) -> decide (core) -> persist (repositories)
    - Milestone progress carried over by name on update, then re-derived against the new target
    - last_completed_at_utc advanced only when a new log completes its day
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from devhabits.core.business_rules import (
    can_change_type, can_delete, can_log_progress, configuration_errors,
)
from devhabits.core.domain_types import HabitId, TagId
from devhabits.core.errors import (
    BusinessRuleViolationError, ErrorContext, HabitValidationError,
    ResourceNotFoundError,
)
from devhabits.core.habit import Habit, HabitLogEntry
from devhabits.core.progress import HabitProgress, calculate_progress, is_completed_on_day
from devhabits.core.repository_protocols import (
    HabitLogRepository, HabitRepository, TagRepository,
)
from devhabits.core.tag import Tag
from devhabits.core.value_objects import Milestone
from devhabits.infrastructure.clock import Clock, utc_now
from devhabits.infrastructure.repositories import (
    SqlHabitLogRepository, SqlHabitRepository, SqlTagRepository,
)
from devhabits.schemas.habit import HabitCreate, HabitLogCreate, HabitUpdate

logger = logging.getLogger(__name__)


def _carry_over_milestones(
    previous: list[Milestone], new: list[Milestone], now: datetime,
) -> list[Milestone]:
    """Keep progress of milestones that survive an update (matched by name)."""
    by_name = {m.name: m for m in previous}
    for milestone in new:
        old = by_name.get(milestone.name)
        if old is None:
            continue
        milestone.is_completed = old.is_completed
        milestone.completed_at_utc = old.completed_at_utc
        milestone.update_progress(old.current, now)
    return new


def _normalize_timestamp(value: datetime | None, default: datetime) -> datetime:
    """Client timestamps without tzinfo are taken as UTC."""
    if value is None:
        return default
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class HabitService:
    """Habit CRUD, progress logging and progress snapshots."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.habits: HabitRepository = SqlHabitRepository(db)
        self.logs: HabitLogRepository = SqlHabitLogRepository(db)
        self.tags: TagRepository = SqlTagRepository(db)

    async def get_habit_or_404(self, habit_id: HabitId) -> Habit:
        habit = await self.habits.get(habit_id)
        if habit is None:
            raise ResourceNotFoundError(
                "Habit", str(habit_id), ErrorContext(habit_id=str(habit_id)),
            )
        return habit

    async def list_habits(self) -> list[Habit]:
        return await self.habits.list_all()

    async def get_habit_with_tags(self, habit_id: HabitId) -> tuple[Habit, list[Tag]]:
        habit = await self.get_habit_or_404(habit_id)
        return habit, await self.tags.get_for_habit(habit_id)

    async def create_habit(self, body: HabitCreate) -> Habit:
        now = self.clock()
        habit = Habit.create(
            body.name,
            body.type,
            body.frequency.to_frequency(),
            now,
            description=body.description,
            target=body.target.to_target() if body.target else None,
            milestones=[m.to_milestone() for m in body.milestones],
            end_date=body.end_date,
        )
        self._ensure_valid(habit)
        await self.habits.add(habit)
        await self.db.commit()
        logger.info(f"Created habit '{habit.name}'", extra={"habit_id": habit.id})
        return habit

    async def update_habit(self, habit_id: HabitId, body: HabitUpdate) -> Habit:
        habit = await self.get_habit_or_404(habit_id)
        now = self.clock()

        if body.type != habit.type:
            log_count = await self.logs.count_by_habit(habit_id)
            if not can_change_type(habit, log_count):
                raise BusinessRuleViolationError(
                    "TYPE_CHANGE_NOT_ALLOWED",
                    "Habit type cannot change once progress has been logged.",
                    ErrorContext(habit_id=str(habit_id)),
                )

        habit.name = body.name
        habit.description = body.description
        habit.type = body.type
        habit.frequency = body.frequency.to_frequency()
        habit.target = body.target.to_target() if body.target else None
        habit.milestones = _carry_over_milestones(
            habit.milestones, [m.to_milestone() for m in body.milestones], now,
        )
        habit.end_date = body.end_date
        if body.status is not None:
            habit.status = body.status
        habit.touch(now)

        self._ensure_valid(habit)
        await self.habits.update(habit)
        await self.db.commit()
        logger.info("Updated habit", extra={"habit_id": habit.id})
        return habit

    async def delete_habit(self, habit_id: HabitId) -> None:
        habit = await self.get_habit_or_404(habit_id)
        log_count = await self.logs.count_by_habit(habit_id)
        if not can_delete(habit, log_count):
            raise BusinessRuleViolationError(
                "DELETE_NOT_ALLOWED",
                "Completed habits with logged progress cannot be deleted.",
                ErrorContext(habit_id=str(habit_id)),
            )
        await self.habits.delete(habit_id)
        await self.db.commit()
        logger.info("Deleted habit", extra={"habit_id": habit_id})

    async def log_progress(self, habit_id: HabitId, body: HabitLogCreate) -> HabitLogEntry:
        habit = await self.get_habit_or_404(habit_id)
        if not can_log_progress(habit, body.value, body.unit):
            raise BusinessRuleViolationError(
                "LOG_NOT_ALLOWED",
                "Progress cannot be logged for this habit with the given value or unit.",
                ErrorContext(habit_id=str(habit_id)),
            )

        now = self.clock()
        logged_at = _normalize_timestamp(body.logged_at_utc, now)
        if logged_at > now:
            raise BusinessRuleViolationError(
                "LOG_IN_FUTURE",
                "Progress cannot be logged for a time later than now.",
                ErrorContext(habit_id=str(habit_id)),
            )
        entry = HabitLogEntry(
            habit_id=habit_id, value=Decimal(body.value), logged_at_utc=logged_at,
        )
        history = await self.logs.get_by_habit(habit_id)
        await self.logs.add(entry)

        habit.advance_milestones(entry.value, now)
        day_logs = [e for e in history if e.logged_on == entry.logged_on] + [entry]
        if is_completed_on_day(habit, day_logs) and (
            habit.last_completed_at_utc is None
            or logged_at > habit.last_completed_at_utc
        ):
            habit.last_completed_at_utc = logged_at
        habit.touch(now)

        await self.habits.update(habit)
        await self.db.commit()
        logger.info(f"Logged {entry.value} for habit", extra={"habit_id": habit_id})
        return entry

    async def list_logs(self, habit_id: HabitId) -> list[HabitLogEntry]:
        await self.get_habit_or_404(habit_id)
        return await self.logs.get_by_habit(habit_id)

    async def get_progress(self, habit_id: HabitId) -> HabitProgress:
        habit = await self.get_habit_or_404(habit_id)
        entries = await self.logs.get_by_habit(habit_id)
        return calculate_progress(habit, entries, self.clock())

    async def replace_tags(self, habit_id: HabitId, tag_ids: list[TagId]) -> None:
        await self.get_habit_or_404(habit_id)
        for tag_id in tag_ids:
            if await self.tags.get(tag_id) is None:
                raise ResourceNotFoundError(
                    "Tag", str(tag_id),
                    ErrorContext(habit_id=str(habit_id), tag_id=str(tag_id)),
                )
        await self.tags.replace_for_habit(habit_id, tag_ids, self.clock())
        await self.db.commit()
        logger.info(
            f"Replaced tags ({len(tag_ids)})", extra={"habit_id": habit_id},
        )

    def _ensure_valid(self, habit: Habit) -> None:
        violations = configuration_errors(habit)
        if violations:
            logger.warning(
                f"Rejected habit configuration: {violations}",
                extra={"habit_id": habit.id, "error_code": "VALIDATION_ERROR"},
            )
            raise HabitValidationError(
                violations, ErrorContext(habit_id=str(habit.id)),
            )
