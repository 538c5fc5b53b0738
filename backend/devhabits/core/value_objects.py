"""Value Objects — Frequency, Target, Milestone owned by a Habit.

Invariants:
    - Frequency.times in 1–10; DAILY additionally capped at 5 (checked by is_valid, not on construction)
    - Target unit must belong to the unit set of the owning HabitType
    - Milestone.is_completed tracks current >= target; completed_at_utc set on crossing, cleared on regression
    - No value object has identity or lifecycle of its own

Design Decisions:
    - Frequency and Target are frozen dataclasses: replaced, never mutated
    - Milestone is a plain dataclass: update_progress is its only mutation
    - Decimal for quantities: summing a day's logs to exactly the target must compare equal
    - Invalid values are representable; validators report them (ADR: no exceptions for domain invalidity)
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from devhabits.core.domain_types import (
    BINARY_UNITS, MEASURABLE_UNITS, FrequencyPeriod, HabitType, Percentage,
)


MIN_TIMES_PER_PERIOD: int = 1
MAX_TIMES_PER_PERIOD: int = 10
MAX_TIMES_PER_DAY: int = 5

# Base-unit conversion factors
_BASE_UNITS: dict[str, tuple[str, Decimal]] = {
    "hours": ("minutes", Decimal(60)),
    "miles": ("km", Decimal("1.60934")),
}


@dataclass(frozen=True)
class Frequency:
    """How many times per period a habit should be done."""
    period: FrequencyPeriod
    times: int

    def target_per_day(self) -> int:
        """Approximate daily target. Rounds to zero for low weekly/monthly counts."""
        if self.period == FrequencyPeriod.DAILY:
            return self.times
        if self.period == FrequencyPeriod.WEEKLY:
            return self.times // 7
        return self.times // 30

    def is_valid(self) -> bool:
        if self.times < MIN_TIMES_PER_PERIOD or self.times > MAX_TIMES_PER_PERIOD:
            return False
        if self.period == FrequencyPeriod.DAILY and self.times > MAX_TIMES_PER_DAY:
            return False
        return True


@dataclass(frozen=True)
class Target:
    """Quantity a habit aims for, in a unit allowed by its HabitType."""
    value: Decimal
    unit: str

    def is_valid_for_type(self, habit_type: HabitType) -> bool:
        if habit_type == HabitType.BINARY:
            return self.unit in BINARY_UNITS
        if habit_type == HabitType.MEASURABLE:
            return self.unit in MEASURABLE_UNITS
        return False

    def convert_to_base_unit(self) -> "Target":
        """hours -> minutes, miles -> km; every other unit passes through."""
        conversion = _BASE_UNITS.get(self.unit)
        if conversion is None:
            return self
        base_unit, factor = conversion
        return Target(value=self.value * factor, unit=base_unit)


@dataclass
class Milestone:
    """Named progress checkpoint with its own target, independent of Habit.target."""
    name: str
    target: Decimal
    current: Decimal = Decimal(0)
    is_completed: bool = False
    completed_at_utc: datetime | None = None

    def update_progress(self, new_current: Decimal, now: datetime) -> None:
        """Set current (clamped at 0) and re-derive completion. Not a ratchet."""
        self.current = max(Decimal(0), new_current)
        if not self.is_completed and self.current >= self.target:
            self.is_completed = True
            self.completed_at_utc = now
        elif self.is_completed and self.current < self.target:
            self.is_completed = False
            self.completed_at_utc = None

    def progress_percentage(self) -> Percentage:
        if self.target <= 0:
            return Percentage(0.0)
        return Percentage(min(100.0, float(self.current / self.target * 100)))
