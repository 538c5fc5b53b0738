"""Business Rule Validator — stateless predicates gating habit mutations.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Predicates return bool; configuration_errors returns rule codes — nothing here raises
    - The shell decides what a False result means for the caller (ADR: core never throws)

Design Decisions:
    - Log counts passed in, not log lists: the rules only need "has history?"
    - configuration_errors chains every configuration check and reports all violations,
      not just the first — one round-trip to fix a habit form
"""

from decimal import Decimal
from typing import Sequence

from devhabits.core.domain_types import HabitStatus
from devhabits.core.habit import Habit
from devhabits.core.value_objects import Frequency, Milestone


MIN_NAME_LENGTH: int = 3
MAX_NAME_LENGTH: int = 100


def can_log_progress(habit: Habit, value: Decimal, unit: str | None) -> bool:
    """Archived habits, out-of-range values and mismatched units are rejected."""
    if habit.is_archived:
        return False
    if not habit.rules.accepts_log_value(value):
        return False
    if habit.target is not None and unit and unit.lower() != habit.target.unit.lower():
        return False
    return True


def can_change_type(habit: Habit, log_count: int) -> bool:
    """Type changes only on habits without history."""
    return log_count == 0


def can_delete(habit: Habit, log_count: int) -> bool:
    """Completed habits with history are protected."""
    return not (habit.status == HabitStatus.COMPLETED and log_count > 0)


def is_valid_frequency(frequency: Frequency) -> bool:
    return frequency.is_valid()


def is_valid_milestone_progression(milestones: Sequence[Milestone]) -> bool:
    """Sorted targets must be strictly ascending; duplicates rejected."""
    if len(milestones) <= 1:
        return True
    targets = sorted(m.target for m in milestones)
    return all(prev < nxt for prev, nxt in zip(targets, targets[1:]))


def configuration_errors(habit: Habit) -> list[str]:
    """Every violated configuration rule code. Empty list means the habit is valid."""
    errors: list[str] = []
    name = habit.name.strip()
    if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        errors.append("INVALID_NAME")
    if not is_valid_frequency(habit.frequency):
        errors.append("INVALID_FREQUENCY")

    target = habit.target
    if target is None:
        if habit.rules.requires_target:
            errors.append("TARGET_REQUIRED")
    else:
        if target.value <= 0:
            errors.append("INVALID_TARGET_VALUE")
        if not target.is_valid_for_type(habit.type):
            errors.append("INVALID_TARGET_UNIT")

    if any(m.target <= 0 for m in habit.milestones):
        errors.append("INVALID_MILESTONE_TARGET")
    if not is_valid_milestone_progression(habit.milestones):
        errors.append("INVALID_MILESTONE_PROGRESSION")
    return errors
