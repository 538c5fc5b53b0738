"""Habit Schemas — Pydantic models for habit, log and progress API boundaries.

Invariants:
    - HabitCreate.name: 3-100 chars, stripped, non-empty
    - Frequency.times bounded 1-10 at the boundary; the DAILY cap is a core rule
    - Quantities accepted as Decimal with at most 18 digits, 6 after the point; returned as float
    - Response models built only through from_domain() — never from ORM rows

Design Decisions:
    - to_*() converters on request models: routes and services never hand-assemble value objects
    - Log value sign and range left to can_log_progress (409, not 400); only precision checked here
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from devhabits.core.domain_types import (
    QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS,
    FrequencyPeriod, HabitStatus, HabitType,
)
from devhabits.core.habit import Habit, HabitLogEntry
from devhabits.core.progress import HabitProgress
from devhabits.core.value_objects import Frequency, Milestone, Target


# --- Value objects -------------------------------------------------------------

# Quantities beyond the column precision fail with 400 instead of being rounded on write
Quantity = Annotated[
    Decimal,
    Field(max_digits=QUANTITY_MAX_DIGITS, decimal_places=QUANTITY_DECIMAL_PLACES),
]


class FrequencySchema(BaseModel):
    """How often a habit should be done."""
    period: FrequencyPeriod
    times: int = Field(ge=1, le=10)

    def to_frequency(self) -> Frequency:
        return Frequency(period=self.period, times=self.times)


class TargetSchema(BaseModel):
    """Quantity and unit a habit aims for."""
    value: Quantity = Field(gt=0)
    unit: str = Field(min_length=1, max_length=20)

    @field_validator("unit")
    @classmethod
    def normalize_unit(cls, v: str) -> str:
        return v.strip().lower()

    def to_target(self) -> Target:
        return Target(value=self.value, unit=self.unit)


class MilestoneCreate(BaseModel):
    """Milestone definition — progress always starts at zero."""
    name: str = Field(min_length=1, max_length=100)
    target: Quantity = Field(gt=0)

    def to_milestone(self) -> Milestone:
        return Milestone(name=self.name.strip(), target=self.target)


class MilestoneResponse(BaseModel):
    name: str
    target: float
    current: float
    is_completed: bool
    completed_at_utc: datetime | None = None
    progress_percentage: float

    @classmethod
    def from_domain(cls, milestone: Milestone) -> "MilestoneResponse":
        return cls(
            name=milestone.name,
            target=float(milestone.target),
            current=float(milestone.current),
            is_completed=milestone.is_completed,
            completed_at_utc=milestone.completed_at_utc,
            progress_percentage=milestone.progress_percentage(),
        )


# --- Habits ----------------------------------------------------------------------

class HabitCreate(BaseModel):
    """Habit creation — shape validation only; configuration rules run in the core."""
    name: str = Field(min_length=3, max_length=100)
    description: str | None = Field(None, max_length=500)
    type: HabitType
    frequency: FrequencySchema
    target: TargetSchema | None = None
    milestones: list[MilestoneCreate] = []
    end_date: date | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class HabitUpdate(HabitCreate):
    """Full replacement of a habit's configuration. Status kept when omitted."""
    status: HabitStatus | None = None


class FrequencyResponse(BaseModel):
    period: FrequencyPeriod
    times: int


class TargetResponse(BaseModel):
    value: float
    unit: str


class HabitResponse(BaseModel):
    """Public-facing habit data."""
    id: UUID
    name: str
    description: str | None = None
    type: HabitType
    status: HabitStatus
    frequency: FrequencyResponse
    target: TargetResponse | None = None
    milestones: list[MilestoneResponse] = []
    end_date: date | None = None
    created_at_utc: datetime
    updated_at_utc: datetime | None = None
    last_completed_at_utc: datetime | None = None

    @classmethod
    def from_domain(cls, habit: Habit, **extra) -> "HabitResponse":
        return cls(
            id=habit.id,
            name=habit.name,
            description=habit.description,
            type=habit.type,
            status=habit.status,
            frequency=FrequencyResponse(
                period=habit.frequency.period, times=habit.frequency.times,
            ),
            target=(
                TargetResponse(value=float(habit.target.value), unit=habit.target.unit)
                if habit.target else None
            ),
            milestones=[MilestoneResponse.from_domain(m) for m in habit.milestones],
            end_date=habit.end_date,
            created_at_utc=habit.created_at_utc,
            updated_at_utc=habit.updated_at_utc,
            last_completed_at_utc=habit.last_completed_at_utc,
            **extra,
        )


class HabitWithTagsResponse(HabitResponse):
    tags: list[str] = []


class HabitsCollectionResponse(BaseModel):
    items: list[HabitResponse]


class UpsertHabitTags(BaseModel):
    """Replaces every tag link of a habit. Empty list removes all."""
    tag_ids: list[UUID] = []


# --- Logs --------------------------------------------------------------------------

class HabitLogCreate(BaseModel):
    """Progress entry. logged_at_utc defaults to now and may not lie in the future."""
    value: Quantity
    unit: str | None = Field(None, max_length=20)
    logged_at_utc: datetime | None = None


class HabitLogResponse(BaseModel):
    id: UUID
    habit_id: UUID
    value: float
    logged_at_utc: datetime

    @classmethod
    def from_domain(cls, entry: HabitLogEntry) -> "HabitLogResponse":
        return cls(
            id=entry.id,
            habit_id=entry.habit_id,
            value=float(entry.value),
            logged_at_utc=entry.logged_at_utc,
        )


class HabitLogsCollectionResponse(BaseModel):
    items: list[HabitLogResponse]


# --- Progress ------------------------------------------------------------------------

class HabitProgressResponse(BaseModel):
    """Progress snapshot for one habit at the request's `now`."""
    habit_id: UUID
    today_progress: float
    week_progress: float
    month_progress: float
    current_streak: int
    completion_rate: float
    is_completed_today: bool
    next_milestone: MilestoneResponse | None = None

    @classmethod
    def from_domain(
        cls, habit_id: UUID, progress: HabitProgress,
    ) -> "HabitProgressResponse":
        return cls(
            habit_id=habit_id,
            today_progress=progress.today_progress,
            week_progress=progress.week_progress,
            month_progress=progress.month_progress,
            current_streak=progress.current_streak,
            completion_rate=progress.completion_rate,
            is_completed_today=progress.is_completed_today,
            next_milestone=(
                MilestoneResponse.from_domain(progress.next_milestone)
                if progress.next_milestone else None
            ),
        )
