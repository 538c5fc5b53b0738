"""HabitLog ORM — append-only progress entries for a habit.

Invariants:
    - Always belongs to a Habit (habit_id FK, cascade on delete)
    - value > 0 (binary habits log exactly 1); enforced by business rules before insert
    - Rows are never updated

Design Decisions:
    - Composite index (habit_id, logged_at_utc): progress queries read one habit's
      history in time order
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Numeric, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from devhabits.core.domain_types import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS
from devhabits.db.base import Base


class HabitLog(Base):
    """HabitLog entity — one logged value."""
    __tablename__ = "habit_logs"
    __table_args__ = (
        Index("ix_habit_logs_habit_id_logged_at_utc", "habit_id", "logged_at_utc"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    habit_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("habits.id", ondelete="CASCADE"),
        nullable=False,
    )
    value: Mapped[Decimal] = mapped_column(
        Numeric(QUANTITY_MAX_DIGITS, QUANTITY_DECIMAL_PLACES), nullable=False,
    )
    logged_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
