"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Repositories speak domain objects (Habit, HabitLogEntry, Tag), never ORM rows
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE the loaded data are never async themselves —
      the shell orchestrates the async calls around the pure logic
"""

from datetime import datetime
from typing import Protocol

from devhabits.core.domain_types import HabitId, TagId
from devhabits.core.habit import Habit, HabitLogEntry
from devhabits.core.tag import Tag


class HabitRepository(Protocol):
    """Contract for habit persistence — implemented by shell."""
    async def get(self, habit_id: HabitId) -> Habit | None: ...
    async def list_all(self) -> list[Habit]: ...
    async def add(self, habit: Habit) -> None: ...
    async def update(self, habit: Habit) -> None: ...
    async def delete(self, habit_id: HabitId) -> None: ...


class HabitLogRepository(Protocol):
    """Contract for append-only log persistence — implemented by shell."""
    async def add(self, entry: HabitLogEntry) -> None: ...
    async def get_by_habit(
        self, habit_id: HabitId, since: datetime | None = None,
    ) -> list[HabitLogEntry]: ...
    async def count_by_habit(self, habit_id: HabitId) -> int: ...


class TagRepository(Protocol):
    """Contract for tag persistence and habit-tag links — implemented by shell."""
    async def get(self, tag_id: TagId) -> Tag | None: ...
    async def get_by_name(self, name: str) -> Tag | None: ...
    async def list_all(self) -> list[Tag]: ...
    async def add(self, tag: Tag) -> None: ...
    async def update(self, tag: Tag) -> None: ...
    async def delete(self, tag_id: TagId) -> None: ...
    async def get_for_habit(self, habit_id: HabitId) -> list[Tag]: ...
    async def replace_for_habit(
        self, habit_id: HabitId, tag_ids: list[TagId], now: datetime,
    ) -> None: ...
