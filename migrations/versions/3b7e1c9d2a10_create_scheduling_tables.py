"""create scheduling tables

Revision ID: 3b7e1c9d2a10
Revises:
Create Date: 2026-10-18

Creates branches with their weekly schedules, services, counters with the
services they offer, and appointments keyed by (user_id, branch_id, service_id).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3b7e1c9d2a10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

WEEK_DAYS = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")


def upgrade() -> None:
    """Create scheduling tables."""
    op.create_table(
        "branches",
        sa.Column("branch_id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=500), nullable=True),
    )

    op.create_table(
        "services",
        sa.Column("service_id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
    )

    op.create_table(
        "schedules",
        sa.Column("schedule_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "branch_id",
            sa.String(length=36),
            sa.ForeignKey("branches.branch_id", ondelete="CASCADE"),
            nullable=False,
        ),
        # Stored by member name, matching Enum(WeekDay, native_enum=False)
        sa.Column(
            "week_day",
            sa.Enum(*WEEK_DAYS, name="weekday", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("opening_time", sa.Time(), nullable=False),
        sa.Column("closing_time", sa.Time(), nullable=False),
    )
    op.create_index("ix_schedules_branch_week_day", "schedules", ["branch_id", "week_day"])

    op.create_table(
        "counters",
        sa.Column("counter_id", sa.String(length=36), primary_key=True),
        sa.Column(
            "branch_id",
            sa.String(length=36),
            sa.ForeignKey("branches.branch_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=100), nullable=False),
    )
    op.create_index(op.f("ix_counters_branch_id"), "counters", ["branch_id"])

    op.create_table(
        "counter_services",
        sa.Column(
            "counter_id",
            sa.String(length=36),
            sa.ForeignKey("counters.counter_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "service_id",
            sa.String(length=36),
            sa.ForeignKey("services.service_id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    op.create_table(
        "appointments",
        sa.Column("user_id", sa.String(length=36), primary_key=True),
        sa.Column(
            "branch_id",
            sa.String(length=36),
            sa.ForeignKey("branches.branch_id", ondelete="RESTRICT"),
            primary_key=True,
        ),
        sa.Column(
            "service_id",
            sa.String(length=36),
            sa.ForeignKey("services.service_id", ondelete="RESTRICT"),
            primary_key=True,
        ),
        sa.Column("arrival_date", sa.Date(), nullable=False),
        sa.Column("arrival_time", sa.Time(), nullable=False),
        # Text values follow STATUS_STORAGE_V1
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_appointments_slot",
        "appointments",
        ["branch_id", "service_id", "arrival_date", "arrival_time"],
    )


def downgrade() -> None:
    """Drop scheduling tables."""
    op.drop_index("ix_appointments_slot", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("counter_services")
    op.drop_index(op.f("ix_counters_branch_id"), table_name="counters")
    op.drop_table("counters")
    op.drop_index("ix_schedules_branch_week_day", table_name="schedules")
    op.drop_table("schedules")
    op.drop_table("services")
    op.drop_table("branches")
