"""Progress Calculator — pure progress, streak and completion-rate computation.

Invariants:
    - All functions are PURE: inputs are a Habit, its log entries and an explicit `now`
    - Days are UTC calendar days (entry.logged_at_utc.date())
    - Percentages are clamped to 100 on the upper bound only
    - Degenerate denominators (<= 0) yield 0, never a division error
    - Streak walk-back stops at min(habit creation date, earliest log date)

Design Decisions:
    - Logs grouped once per call into {date: entries}: every metric reads the same grouping
    - Completed days counted over logged days only — unlogged days can never complete
    - Week = ISO week (Mon..Sun) containing today; month = calendar month containing today
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Sequence

from devhabits.core.domain_types import FrequencyPeriod, Percentage
from devhabits.core.habit import Habit, HabitLogEntry
from devhabits.core.value_objects import Milestone


COMPLETION_RATE_WINDOW_DAYS: int = 30
DAYS_PER_WEEK: int = 7


@dataclass(frozen=True)
class HabitProgress:
    """Progress snapshot returned to the shell."""
    today_progress: Percentage
    week_progress: Percentage
    month_progress: Percentage
    current_streak: int
    completion_rate: Percentage
    is_completed_today: bool
    next_milestone: Milestone | None


def group_by_day(entries: Iterable[HabitLogEntry]) -> dict[date, list[HabitLogEntry]]:
    by_day: dict[date, list[HabitLogEntry]] = {}
    for entry in entries:
        by_day.setdefault(entry.logged_on, []).append(entry)
    return by_day


def is_completed_on_day(habit: Habit, day_logs: Sequence[HabitLogEntry]) -> bool:
    """Atomic building block for streaks and rates."""
    return habit.rules.is_completed_on_day(habit.target, day_logs)


def calculate_today_progress(
    habit: Habit, entries: Iterable[HabitLogEntry], now: datetime,
) -> Percentage:
    today = now.date()
    today_logs = [e for e in entries if e.logged_on == today]
    return habit.rules.day_progress(habit.target, today_logs)


def calculate_streak(
    habit: Habit, entries: Iterable[HabitLogEntry], now: datetime,
) -> int:
    """Consecutive completed days ending today. 0 when today is not complete."""
    by_day = group_by_day(entries)
    if not by_day:
        return 0
    floor = min(habit.created_at_utc.date(), min(by_day))
    day = now.date()
    streak = 0
    while day >= floor and is_completed_on_day(habit, by_day.get(day, [])):
        streak += 1
        day -= timedelta(days=1)
    return streak


def count_completed_days(
    habit: Habit,
    by_day: dict[date, list[HabitLogEntry]],
    start: date,
    end: date,
) -> int:
    """Completed days in the inclusive window [start, end]."""
    return sum(
        1 for day, logs in by_day.items()
        if start <= day <= end and is_completed_on_day(habit, logs)
    )


def _period_progress(
    habit: Habit,
    completed_days: int,
    window_period: FrequencyPeriod,
    window_days: int,
) -> Percentage:
    frequency = habit.frequency
    if frequency.period == window_period:
        denominator = frequency.times
    else:
        denominator = frequency.target_per_day() * window_days
    if denominator <= 0:
        return Percentage(0.0)
    return Percentage(min(100.0, completed_days / denominator * 100))


def calculate_week_progress(
    habit: Habit, entries: Iterable[HabitLogEntry], now: datetime,
) -> Percentage:
    today = now.date()
    start = today - timedelta(days=today.weekday())
    end = start + timedelta(days=DAYS_PER_WEEK - 1)
    completed = count_completed_days(habit, group_by_day(entries), start, end)
    return _period_progress(habit, completed, FrequencyPeriod.WEEKLY, DAYS_PER_WEEK)


def calculate_month_progress(
    habit: Habit, entries: Iterable[HabitLogEntry], now: datetime,
) -> Percentage:
    today = now.date()
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    start = today.replace(day=1)
    end = today.replace(day=days_in_month)
    completed = count_completed_days(habit, group_by_day(entries), start, end)
    return _period_progress(habit, completed, FrequencyPeriod.MONTHLY, days_in_month)


def calculate_completion_rate(
    habit: Habit, entries: Iterable[HabitLogEntry], now: datetime,
) -> Percentage:
    """Share of the trailing 30 days (today included) that were completed."""
    today = now.date()
    start = today - timedelta(days=COMPLETION_RATE_WINDOW_DAYS - 1)
    completed = count_completed_days(habit, group_by_day(entries), start, today)
    return Percentage(completed / COMPLETION_RATE_WINDOW_DAYS * 100)


def calculate_progress(
    habit: Habit, entries: Sequence[HabitLogEntry], now: datetime,
) -> HabitProgress:
    """Full snapshot. `entries` may be the full history or a window covering the month."""
    today_logs = [e for e in entries if e.logged_on == now.date()]
    return HabitProgress(
        today_progress=calculate_today_progress(habit, entries, now),
        week_progress=calculate_week_progress(habit, entries, now),
        month_progress=calculate_month_progress(habit, entries, now),
        current_streak=calculate_streak(habit, entries, now),
        completion_rate=calculate_completion_rate(habit, entries, now),
        is_completed_today=is_completed_on_day(habit, today_logs),
        next_milestone=habit.next_milestone(),
    )
