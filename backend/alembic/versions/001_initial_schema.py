"""Initial schema — habits, habit_logs, tags, habit_tags.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "habits",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ongoing"),
        sa.Column("frequency_period", sa.String(20), nullable=False),
        sa.Column("frequency_times", sa.Integer, nullable=False),
        sa.Column("target_value", sa.Numeric(18, 6), nullable=True),
        sa.Column("target_unit", sa.String(20), nullable=True),
        sa.Column("milestones", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_completed_at_utc", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "habit_logs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "habit_id", UUID(as_uuid=True),
            sa.ForeignKey("habits.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("value", sa.Numeric(18, 6), nullable=False),
        sa.Column("logged_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_habit_logs_habit_id_logged_at_utc",
        "habit_logs", ["habit_id", "logged_at_utc"],
    )

    op.create_table(
        "tags",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at_utc", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "habit_tags",
        sa.Column(
            "habit_id", UUID(as_uuid=True),
            sa.ForeignKey("habits.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "tag_id", UUID(as_uuid=True),
            sa.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("habit_tags")
    op.drop_table("tags")
    op.drop_index("ix_habit_logs_habit_id_logged_at_utc", table_name="habit_logs")
    op.drop_table("habit_logs")
    op.drop_table("habits")
