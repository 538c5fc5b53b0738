"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - HabitId, HabitLogId, TagId wrap UUIDs — never use bare UUID in domain logic
    - Percentage is bounded 0.0–100.0
    - All valid states encoded as Enums — no raw string matching
    - Unit sets are frozen: the allowed units per HabitType live here only

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders, map 1:1 to DB string columns
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

HabitId = NewType("HabitId", UUID)
HabitLogId = NewType("HabitLogId", UUID)
TagId = NewType("TagId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

Percentage = NewType("Percentage", float)   # 0.0–100.0


# ─── Enums ───────────────────────────────────────────────────────

class HabitType(str, Enum):
    """How progress is tracked — yes/no or quantity against a target."""
    BINARY = "binary"
    MEASURABLE = "measurable"


class HabitStatus(str, Enum):
    """Habit lifecycle states — maps to DB `status` column."""
    ONGOING = "ongoing"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class FrequencyPeriod(str, Enum):
    """Period over which Frequency.times is counted."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# ─── Units ───────────────────────────────────────────────────────

BINARY_UNITS: frozenset[str] = frozenset({"sessions", "tasks"})
MEASURABLE_UNITS: frozenset[str] = frozenset({
    "minutes", "hours", "steps", "km", "miles", "cal", "pages", "books",
})


# ─── Quantities ──────────────────────────────────────────────────

# Storage precision for target, log and milestone values (NUMERIC(18, 6))
QUANTITY_MAX_DIGITS: int = 18
QUANTITY_DECIMAL_PLACES: int = 6
