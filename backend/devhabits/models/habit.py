"""Habit ORM — persists the Habit aggregate with its embedded value objects.

Invariants:
    - id is UUID primary key
    - frequency_period/frequency_times always present; target_value/target_unit both set or both null
    - milestones stored as JSON list, in configured order
    - type and status hold core.domain_types enum values

Design Decisions:
    - Value objects embedded as columns/JSON, not tables: they have no identity or lifecycle
    - Numeric(18, 6) for quantities: round-trips to Decimal for the core; schemas reject
      input beyond that precision so nothing is rounded on write
    - No ORM relationships to logs/tags: repositories issue explicit queries and deletes,
      keeping async lazy-loading out of the picture
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Integer, Numeric, Date, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from devhabits.core.domain_types import QUANTITY_DECIMAL_PLACES, QUANTITY_MAX_DIGITS
from devhabits.db.base import Base


class Habit(Base):
    """Habit row — aggregate root for logs and tag links."""
    __tablename__ = "habits"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="ongoing",
    )
    frequency_period: Mapped[str] = mapped_column(String(20), nullable=False)
    frequency_times: Mapped[int] = mapped_column(Integer, nullable=False)
    target_value: Mapped[Decimal | None] = mapped_column(
        Numeric(QUANTITY_MAX_DIGITS, QUANTITY_DECIMAL_PLACES), nullable=True,
    )
    target_unit: Mapped[str | None] = mapped_column(String(20), nullable=True)
    milestones: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at_utc: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at_utc: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    last_completed_at_utc: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
