"""Domain Types — verifies rich type definitions, enum values and unit sets.

Tests:
    - NewType wrappers exist and are callable
    - Enums have expected members and serialize to their DB strings
    - Binary and measurable unit sets are disjoint
"""

from uuid import uuid4

from devhabits.core.domain_types import (
    BINARY_UNITS, MEASURABLE_UNITS,
    FrequencyPeriod, HabitId, HabitLogId, HabitStatus, HabitType, Percentage, TagId,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert HabitId(uid) == uid
    assert HabitLogId(uid) == uid
    assert TagId(uid) == uid


def test_percentage_wraps_float():
    assert Percentage(42.5) == 42.5


def test_habit_type_has_two_variants():
    assert {t.value for t in HabitType} == {"binary", "measurable"}


def test_habit_status_has_three_states():
    assert set(HabitStatus) == {
        HabitStatus.ONGOING,
        HabitStatus.COMPLETED,
        HabitStatus.ARCHIVED,
    }


def test_frequency_period_values():
    assert [p.value for p in FrequencyPeriod] == ["daily", "weekly", "monthly"]


def test_enums_compare_to_db_strings():
    assert HabitStatus("ongoing") is HabitStatus.ONGOING
    assert HabitType.MEASURABLE == "measurable"


def test_unit_sets_are_disjoint():
    assert BINARY_UNITS == {"sessions", "tasks"}
    assert len(MEASURABLE_UNITS) == 8
    assert not BINARY_UNITS & MEASURABLE_UNITS
