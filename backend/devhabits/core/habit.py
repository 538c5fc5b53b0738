"""Habit Aggregate — the Habit entity, its log entries, and per-type completion rules.

Invariants:
    - A Habit owns its Frequency, Target and Milestones (no independent lifecycle)
    - Status starts ONGOING and only changes through an explicit update
    - HabitLogEntry is read-only to the core — entries are never mutated or deleted here
    - Every HabitType has exactly one rules object in HABIT_TYPE_RULES

Design Decisions:
    - Tagged variant over scattered `if type ==` checks: per-type behaviour lives in
      BinaryRules / MeasurableRules, looked up through rules_for()
    - Composition over inheritance: Habit holds value objects, rules objects are stateless
    - Mutating methods take `now` explicitly — no global clock in the core
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol, Sequence
from uuid import uuid4

from devhabits.core.domain_types import (
    BINARY_UNITS, MEASURABLE_UNITS,
    HabitId, HabitLogId, HabitStatus, HabitType, Percentage,
)
from devhabits.core.value_objects import Frequency, Milestone, Target


@dataclass(frozen=True)
class HabitLogEntry:
    """One logged progress value. Aggregated by UTC calendar day."""
    habit_id: HabitId
    value: Decimal
    logged_at_utc: datetime
    id: HabitLogId = field(default_factory=lambda: HabitLogId(uuid4()))

    @property
    def logged_on(self) -> date:
        return self.logged_at_utc.date()


def sum_values(entries: Sequence[HabitLogEntry]) -> Decimal:
    return sum((e.value for e in entries), Decimal(0))


# ─── Per-type rules (tagged variant) ─────────────────────────────

class HabitTypeRules(Protocol):
    """Behaviour that differs between binary and measurable habits."""
    allowed_units: frozenset[str]
    requires_target: bool

    def accepts_log_value(self, value: Decimal) -> bool: ...

    def is_completed_on_day(
        self, target: Target | None, day_logs: Sequence[HabitLogEntry],
    ) -> bool: ...

    def day_progress(
        self, target: Target | None, day_logs: Sequence[HabitLogEntry],
    ) -> Percentage: ...


@dataclass(frozen=True)
class BinaryRules:
    """Yes/no habits: any log on a day completes it."""
    allowed_units: frozenset[str] = BINARY_UNITS
    requires_target: bool = False

    def accepts_log_value(self, value: Decimal) -> bool:
        return value == 1

    def is_completed_on_day(
        self, target: Target | None, day_logs: Sequence[HabitLogEntry],
    ) -> bool:
        return len(day_logs) > 0

    def day_progress(
        self, target: Target | None, day_logs: Sequence[HabitLogEntry],
    ) -> Percentage:
        return Percentage(100.0 if day_logs else 0.0)


@dataclass(frozen=True)
class MeasurableRules:
    """Quantity habits: a day completes once its logs sum to the target value."""
    allowed_units: frozenset[str] = MEASURABLE_UNITS
    requires_target: bool = True

    def accepts_log_value(self, value: Decimal) -> bool:
        return value > 0

    def is_completed_on_day(
        self, target: Target | None, day_logs: Sequence[HabitLogEntry],
    ) -> bool:
        # A day without logs is never complete, even for a degenerate target
        if target is None or not day_logs:
            return False
        return sum_values(day_logs) >= target.value

    def day_progress(
        self, target: Target | None, day_logs: Sequence[HabitLogEntry],
    ) -> Percentage:
        if target is None or target.value <= 0:
            return Percentage(0.0)
        ratio = sum_values(day_logs) / target.value * 100
        return Percentage(min(100.0, float(ratio)))


HABIT_TYPE_RULES: dict[HabitType, HabitTypeRules] = {
    HabitType.BINARY: BinaryRules(),
    HabitType.MEASURABLE: MeasurableRules(),
}


def rules_for(habit_type: HabitType) -> HabitTypeRules:
    return HABIT_TYPE_RULES[habit_type]


# ─── Habit entity ────────────────────────────────────────────────

@dataclass
class Habit:
    """Habit aggregate root — owns its value objects."""
    name: str
    type: HabitType
    frequency: Frequency
    created_at_utc: datetime
    id: HabitId = field(default_factory=lambda: HabitId(uuid4()))
    description: str | None = None
    status: HabitStatus = HabitStatus.ONGOING
    target: Target | None = None
    milestones: list[Milestone] = field(default_factory=list)
    end_date: date | None = None
    updated_at_utc: datetime | None = None
    last_completed_at_utc: datetime | None = None

    @classmethod
    def create(
        cls,
        name: str,
        habit_type: HabitType,
        frequency: Frequency,
        now: datetime,
        *,
        description: str | None = None,
        target: Target | None = None,
        milestones: Sequence[Milestone] = (),
        end_date: date | None = None,
    ) -> "Habit":
        """New habits always start ONGOING."""
        return cls(
            name=name,
            type=habit_type,
            frequency=frequency,
            created_at_utc=now,
            description=description,
            target=target,
            milestones=list(milestones),
            end_date=end_date,
        )

    @property
    def rules(self) -> HabitTypeRules:
        return rules_for(self.type)

    @property
    def is_archived(self) -> bool:
        return self.status == HabitStatus.ARCHIVED

    def advance_milestones(self, amount: Decimal, now: datetime) -> None:
        """Add a logged amount to every milestone's current value."""
        for milestone in self.milestones:
            milestone.update_progress(milestone.current + amount, now)

    def next_milestone(self) -> Milestone | None:
        """First incomplete milestone, lowest target first."""
        pending = [m for m in self.milestones if not m.is_completed]
        if not pending:
            return None
        return min(pending, key=lambda m: m.target)

    def touch(self, now: datetime) -> None:
        self.updated_at_utc = now
