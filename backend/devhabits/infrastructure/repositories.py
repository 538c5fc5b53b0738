"""SQLAlchemy Repositories — shell implementations of core/repository_protocols.py.

Invariants:
    - Repositories return core domain objects, never ORM rows
    - Writes flush but never commit: the service owns the transaction
    - update() of a row deleted meanwhile raises ResourceNotFoundError (404), never a silent no-op
    - Timestamps read back are timezone-aware UTC (SQLite drops tzinfo)
    - Milestone decimals stored as strings in JSON (no float round-trip)

Design Decisions:
    - Mapping functions at module level: one place to change when a column changes
    - Explicit DELETE statements for children: no reliance on ORM cascades or DB FK support
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from devhabits.core.domain_types import (
    FrequencyPeriod, HabitId, HabitLogId, HabitStatus, HabitType, TagId,
)
from devhabits.core.errors import ErrorContext, ResourceNotFoundError
from devhabits.core.habit import Habit, HabitLogEntry
from devhabits.core.tag import Tag
from devhabits.core.value_objects import Frequency, Milestone, Target
from devhabits.models.habit import Habit as HabitRow
from devhabits.models.habit_log import HabitLog as HabitLogRow
from devhabits.models.tag import HabitTag as HabitTagRow
from devhabits.models.tag import Tag as TagRow


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ─── Milestone JSON ──────────────────────────────────────────────

def milestone_to_json(milestone: Milestone) -> dict:
    return {
        "name": milestone.name,
        "target": str(milestone.target),
        "current": str(milestone.current),
        "is_completed": milestone.is_completed,
        "completed_at_utc": (
            milestone.completed_at_utc.isoformat()
            if milestone.completed_at_utc else None
        ),
    }


def milestone_from_json(data: dict) -> Milestone:
    completed_at = data.get("completed_at_utc")
    return Milestone(
        name=data["name"],
        target=Decimal(data["target"]),
        current=Decimal(data.get("current", "0")),
        is_completed=bool(data.get("is_completed", False)),
        completed_at_utc=(
            _as_utc(datetime.fromisoformat(completed_at)) if completed_at else None
        ),
    )


# ─── Habit mapping ───────────────────────────────────────────────

def habit_to_domain(row: HabitRow) -> Habit:
    target = None
    if row.target_value is not None and row.target_unit is not None:
        target = Target(value=Decimal(row.target_value), unit=row.target_unit)
    return Habit(
        id=HabitId(row.id),
        name=row.name,
        description=row.description,
        type=HabitType(row.type),
        status=HabitStatus(row.status),
        frequency=Frequency(
            period=FrequencyPeriod(row.frequency_period),
            times=row.frequency_times,
        ),
        target=target,
        milestones=[milestone_from_json(m) for m in row.milestones or []],
        end_date=row.end_date,
        created_at_utc=_as_utc(row.created_at_utc),
        updated_at_utc=_as_utc(row.updated_at_utc),
        last_completed_at_utc=_as_utc(row.last_completed_at_utc),
    )


def apply_habit_to_row(habit: Habit, row: HabitRow) -> None:
    row.name = habit.name
    row.description = habit.description
    row.type = habit.type.value
    row.status = habit.status.value
    row.frequency_period = habit.frequency.period.value
    row.frequency_times = habit.frequency.times
    row.target_value = habit.target.value if habit.target else None
    row.target_unit = habit.target.unit if habit.target else None
    row.milestones = [milestone_to_json(m) for m in habit.milestones]
    row.end_date = habit.end_date
    row.created_at_utc = habit.created_at_utc
    row.updated_at_utc = habit.updated_at_utc
    row.last_completed_at_utc = habit.last_completed_at_utc


def log_to_domain(row: HabitLogRow) -> HabitLogEntry:
    return HabitLogEntry(
        id=HabitLogId(row.id),
        habit_id=HabitId(row.habit_id),
        value=Decimal(row.value),
        logged_at_utc=_as_utc(row.logged_at_utc),
    )


def tag_to_domain(row: TagRow) -> Tag:
    return Tag(
        id=TagId(row.id),
        name=row.name,
        description=row.description,
        created_at_utc=_as_utc(row.created_at_utc),
        updated_at_utc=_as_utc(row.updated_at_utc),
    )


# ─── Repositories ────────────────────────────────────────────────

class SqlHabitRepository:
    """HabitRepository over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, habit_id: HabitId) -> Habit | None:
        row = await self.db.get(HabitRow, habit_id)
        return habit_to_domain(row) if row else None

    async def list_all(self) -> list[Habit]:
        result = await self.db.execute(
            select(HabitRow).order_by(HabitRow.created_at_utc),
        )
        return [habit_to_domain(r) for r in result.scalars().all()]

    async def add(self, habit: Habit) -> None:
        row = HabitRow(id=habit.id)
        apply_habit_to_row(habit, row)
        self.db.add(row)
        await self.db.flush()

    async def update(self, habit: Habit) -> None:
        row = await self.db.get(HabitRow, habit.id)
        if row is None:
            raise ResourceNotFoundError(
                "Habit", str(habit.id), ErrorContext(habit_id=str(habit.id)),
            )
        apply_habit_to_row(habit, row)
        await self.db.flush()

    async def delete(self, habit_id: HabitId) -> None:
        await self.db.execute(
            delete(HabitTagRow).where(HabitTagRow.habit_id == habit_id),
        )
        await self.db.execute(
            delete(HabitLogRow).where(HabitLogRow.habit_id == habit_id),
        )
        await self.db.execute(delete(HabitRow).where(HabitRow.id == habit_id))
        await self.db.flush()


class SqlHabitLogRepository:
    """HabitLogRepository over an AsyncSession. Append-only."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, entry: HabitLogEntry) -> None:
        self.db.add(HabitLogRow(
            id=entry.id,
            habit_id=entry.habit_id,
            value=entry.value,
            logged_at_utc=entry.logged_at_utc,
        ))
        await self.db.flush()

    async def get_by_habit(
        self, habit_id: HabitId, since: datetime | None = None,
    ) -> list[HabitLogEntry]:
        query = select(HabitLogRow).where(HabitLogRow.habit_id == habit_id)
        if since is not None:
            query = query.where(HabitLogRow.logged_at_utc >= since)
        query = query.order_by(HabitLogRow.logged_at_utc.desc())
        result = await self.db.execute(query)
        return [log_to_domain(r) for r in result.scalars().all()]

    async def count_by_habit(self, habit_id: HabitId) -> int:
        result = await self.db.execute(
            select(func.count(HabitLogRow.id))
            .where(HabitLogRow.habit_id == habit_id),
        )
        return result.scalar_one()


class SqlTagRepository:
    """TagRepository over an AsyncSession, including habit-tag links."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, tag_id: TagId) -> Tag | None:
        row = await self.db.get(TagRow, tag_id)
        return tag_to_domain(row) if row else None

    async def get_by_name(self, name: str) -> Tag | None:
        result = await self.db.execute(
            select(TagRow).where(func.lower(TagRow.name) == name.lower()),
        )
        row = result.scalar_one_or_none()
        return tag_to_domain(row) if row else None

    async def list_all(self) -> list[Tag]:
        result = await self.db.execute(select(TagRow).order_by(TagRow.name))
        return [tag_to_domain(r) for r in result.scalars().all()]

    async def add(self, tag: Tag) -> None:
        self.db.add(TagRow(
            id=tag.id,
            name=tag.name,
            description=tag.description,
            created_at_utc=tag.created_at_utc,
        ))
        await self.db.flush()

    async def update(self, tag: Tag) -> None:
        row = await self.db.get(TagRow, tag.id)
        if row is None:
            raise ResourceNotFoundError(
                "Tag", str(tag.id), ErrorContext(tag_id=str(tag.id)),
            )
        row.name = tag.name
        row.description = tag.description
        row.updated_at_utc = tag.updated_at_utc
        await self.db.flush()

    async def delete(self, tag_id: TagId) -> None:
        await self.db.execute(
            delete(HabitTagRow).where(HabitTagRow.tag_id == tag_id),
        )
        await self.db.execute(delete(TagRow).where(TagRow.id == tag_id))
        await self.db.flush()

    async def get_for_habit(self, habit_id: HabitId) -> list[Tag]:
        result = await self.db.execute(
            select(TagRow)
            .join(HabitTagRow, HabitTagRow.tag_id == TagRow.id)
            .where(HabitTagRow.habit_id == habit_id)
            .order_by(TagRow.name),
        )
        return [tag_to_domain(r) for r in result.scalars().all()]

    async def replace_for_habit(
        self, habit_id: HabitId, tag_ids: list[TagId], now: datetime,
    ) -> None:
        await self.db.execute(
            delete(HabitTagRow).where(HabitTagRow.habit_id == habit_id),
        )
        for tag_id in dict.fromkeys(tag_ids):
            self.db.add(HabitTagRow(
                habit_id=habit_id, tag_id=tag_id, created_at_utc=now,
            ))
        await self.db.flush()
