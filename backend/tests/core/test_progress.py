"""Progress Calculator — today/week/month progress, streaks and completion rate.

Tests cover:
    - Today progress for binary and measurable habits
    - Streak walk-back: consecutive days, gaps, today missing, history floor
    - Week window (ISO Mon..Sun) and month window (calendar month)
    - Period mismatch falls back to target_per_day (0 → 0%)
    - Completion rate over the trailing 30 days
    - calculate_progress snapshot fields
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from devhabits.core.domain_types import FrequencyPeriod, HabitId, HabitType
from devhabits.core.habit import Habit, HabitLogEntry
from devhabits.core.progress import (
    calculate_completion_rate, calculate_month_progress, calculate_progress,
    calculate_streak, calculate_today_progress, calculate_week_progress,
    group_by_day,
)
from devhabits.core.value_objects import Frequency, Milestone, Target


NOW = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)
HABIT_ID = HabitId("00000000-0000-0000-0000-000000000001")


def _log(day: datetime, value: str = "1") -> HabitLogEntry:
    return HabitLogEntry(habit_id=HABIT_ID, value=Decimal(value), logged_at_utc=day)


def _binary(period=FrequencyPeriod.DAILY, times=1, created=NOW) -> Habit:
    return Habit.create("Meditate", HabitType.BINARY, Frequency(period, times), created)


def _measurable(target="30", created=NOW) -> Habit:
    return Habit.create(
        "Read",
        HabitType.MEASURABLE,
        Frequency(FrequencyPeriod.DAILY, 1),
        created,
        target=Target(Decimal(target), "minutes"),
    )


def _days_back(now: datetime, *offsets: int) -> list[HabitLogEntry]:
    return [_log(now - timedelta(days=n)) for n in offsets]


# ─── Today ───────────────────────────────────────────────────────

def test_binary_today_progress_full_when_logged():
    habit = _binary(created=NOW - timedelta(days=1))
    logs = _days_back(NOW, 0, 1)
    assert calculate_today_progress(habit, logs, NOW) == 100.0


def test_binary_today_progress_zero_without_log():
    habit = _binary()
    assert calculate_today_progress(habit, _days_back(NOW, 1), NOW) == 0.0


def test_measurable_today_progress_is_sum_over_target():
    habit = _measurable()
    logs = [_log(NOW, "10"), _log(NOW, "5"), _log(NOW - timedelta(days=1), "30")]
    assert calculate_today_progress(habit, logs, NOW) == 50.0


def test_measurable_today_progress_caps_at_100():
    habit = _measurable()
    assert calculate_today_progress(habit, [_log(NOW, "45")], NOW) == 100.0


def test_group_by_day_buckets_by_utc_date():
    late = datetime(2025, 1, 1, 23, 59, tzinfo=timezone.utc)
    early = datetime(2025, 1, 2, 0, 1, tzinfo=timezone.utc)
    grouped = group_by_day([_log(late), _log(early), _log(NOW)])
    assert sorted(len(v) for v in grouped.values()) == [1, 2]


# ─── Streak ──────────────────────────────────────────────────────

def test_streak_counts_consecutive_days_ending_today():
    habit = _binary(created=NOW - timedelta(days=1))
    assert calculate_streak(habit, _days_back(NOW, 0, 1), NOW) == 2


def test_streak_stops_at_gap():
    habit = _binary(created=NOW - timedelta(days=10))
    logs = _days_back(NOW, 0, 1, 2, 4, 5)
    assert calculate_streak(habit, logs, NOW) == 3


def test_streak_zero_when_today_missing():
    habit = _binary(created=NOW - timedelta(days=10))
    assert calculate_streak(habit, _days_back(NOW, 1, 2, 3), NOW) == 0


def test_streak_zero_without_logs():
    assert calculate_streak(_binary(), [], NOW) == 0


def test_streak_includes_backfilled_logs_before_creation():
    habit = _binary(created=NOW)
    assert calculate_streak(habit, _days_back(NOW, 0, 1, 2), NOW) == 3


def test_streak_measurable_requires_target_each_day():
    habit = _measurable(created=NOW - timedelta(days=5))
    logs = [
        _log(NOW, "30"),
        _log(NOW - timedelta(days=1), "20"),
        _log(NOW - timedelta(days=1), "10"),
        _log(NOW - timedelta(days=2), "29.99"),
    ]
    assert calculate_streak(habit, logs, NOW) == 2


# ─── Week / month ────────────────────────────────────────────────

def test_week_progress_counts_days_in_iso_week():
    # 2025-01-06 is a Monday
    now = datetime(2025, 1, 8, 9, 0, tzinfo=timezone.utc)
    habit = _binary(FrequencyPeriod.WEEKLY, 3, created=datetime(2025, 1, 1, tzinfo=timezone.utc))
    logs = [
        _log(datetime(2025, 1, 5, 10, tzinfo=timezone.utc)),   # previous week
        _log(datetime(2025, 1, 6, 10, tzinfo=timezone.utc)),
        _log(datetime(2025, 1, 7, 10, tzinfo=timezone.utc)),
    ]
    assert calculate_week_progress(habit, logs, now) == pytest.approx(66.6667, rel=1e-4)


def test_week_progress_counts_a_day_once():
    now = datetime(2025, 1, 8, 9, 0, tzinfo=timezone.utc)
    habit = _binary(FrequencyPeriod.WEEKLY, 2)
    day = datetime(2025, 1, 7, 10, tzinfo=timezone.utc)
    logs = [_log(day), _log(day + timedelta(hours=1))]
    assert calculate_week_progress(habit, logs, now) == 50.0


def test_week_progress_daily_habit_uses_seven_days():
    now = datetime(2025, 1, 8, 9, 0, tzinfo=timezone.utc)
    habit = _binary(FrequencyPeriod.DAILY, 1)
    logs = _days_back(now, 0, 1)
    assert calculate_week_progress(habit, logs, now) == pytest.approx(200 / 7)


def test_week_progress_caps_at_100():
    now = datetime(2025, 1, 8, 9, 0, tzinfo=timezone.utc)
    habit = _binary(FrequencyPeriod.WEEKLY, 1)
    assert calculate_week_progress(habit, _days_back(now, 0, 1), now) == 100.0


def test_month_progress_weekly_habit_rounds_to_zero():
    habit = _binary(FrequencyPeriod.WEEKLY, 3)
    assert calculate_month_progress(habit, _days_back(NOW, 0, 1), NOW) == 0.0


def test_month_progress_monthly_habit_uses_times():
    habit = _binary(FrequencyPeriod.MONTHLY, 4)
    assert calculate_month_progress(habit, _days_back(NOW, 0, 1), NOW) == 50.0


def test_month_progress_daily_habit_uses_days_in_month():
    now = datetime(2025, 2, 10, 12, tzinfo=timezone.utc)
    habit = _binary(FrequencyPeriod.DAILY, 1)
    logs = _days_back(now, *range(7))
    assert calculate_month_progress(habit, logs, now) == 25.0


def test_month_progress_ignores_previous_month():
    habit = _binary(FrequencyPeriod.MONTHLY, 2)
    logs = [_log(datetime(2024, 12, 31, 8, tzinfo=timezone.utc)), _log(NOW)]
    assert calculate_month_progress(habit, logs, NOW) == 50.0


# ─── Completion rate ─────────────────────────────────────────────

def test_completion_rate_half_of_window():
    habit = _binary(created=NOW - timedelta(days=40))
    logs = _days_back(NOW, *range(0, 30, 2))
    assert calculate_completion_rate(habit, logs, NOW) == 50.0


def test_completion_rate_excludes_days_outside_window():
    habit = _binary(created=NOW - timedelta(days=40))
    logs = _days_back(NOW, 29, 30, 31)
    assert calculate_completion_rate(habit, logs, NOW) == pytest.approx(100 / 30)


def test_completion_rate_zero_without_logs():
    assert calculate_completion_rate(_binary(), [], NOW) == 0.0


# ─── Snapshot ────────────────────────────────────────────────────

def test_calculate_progress_snapshot():
    habit = Habit.create(
        "Read",
        HabitType.MEASURABLE,
        Frequency(FrequencyPeriod.DAILY, 1),
        NOW - timedelta(days=1),
        target=Target(Decimal(30), "minutes"),
        milestones=[Milestone("Fifty", Decimal(50)), Milestone("Ten", Decimal(10))],
    )
    logs = [_log(NOW, "30"), _log(NOW - timedelta(days=1), "30")]

    progress = calculate_progress(habit, logs, NOW)

    assert progress.today_progress == 100.0
    assert progress.is_completed_today is True
    assert progress.current_streak == 2
    assert progress.completion_rate == pytest.approx(200 / 30)
    assert progress.next_milestone.name == "Ten"


def test_calculate_progress_empty_history():
    progress = calculate_progress(_measurable(), [], NOW)
    assert progress.today_progress == 0.0
    assert progress.week_progress == 0.0
    assert progress.month_progress == 0.0
    assert progress.current_streak == 0
    assert progress.completion_rate == 0.0
    assert progress.is_completed_today is False
    assert progress.next_milestone is None
