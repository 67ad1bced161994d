"""create course status tables

Revision ID: 3b9e61c2d4a7
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b9e61c2d4a7"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

session_status = sa.Enum(
    "PENDING", "APPROVED", "PAID", "SCHEDULED", "COMPLETED", "CANCELLED", "REJECTED",
    name="session_status",
)
payment_status = sa.Enum("PENDING", "SUCCESS", "FAILED", "REFUNDED", name="payment_status")
schedule_status = sa.Enum("LOCKED", "UPCOMING", "COMPLETED", name="schedule_status")
course_status = sa.Enum("PAYMENT_PENDING", "ONGOING", "COMPLETED", name="course_status")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP(), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("mentor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("skill_name", sa.String(length=150), nullable=False),
        sa.Column("status", session_status, nullable=False),
        sa.Column("scheduled_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("sessions_per_week", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP(), nullable=True),
    )
    op.create_index("ix_sessions_id", "sessions", ["id"])
    op.create_index("ix_sessions_student_id", "sessions", ["student_id"])
    op.create_index("ix_sessions_mentor_id", "sessions", ["mentor_id"])
    op.create_index("ix_sessions_skill_name", "sessions", ["skill_name"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", payment_status, nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP(), nullable=True),
    )
    op.create_index("ix_payments_id", "payments", ["id"])
    op.create_index("ix_payments_session_id", "payments", ["session_id"])

    op.create_table(
        "session_schedule",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("scheduled_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("scheduled_time", sa.String(length=5), nullable=False),
        sa.Column("status", schedule_status, nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=True),
        sa.Column("session_number", sa.Integer(), nullable=True),
        sa.Column("topic_title", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP(), nullable=True),
    )
    op.create_index("ix_session_schedule_id", "session_schedule", ["id"])
    op.create_index("ix_session_schedule_session_id", "session_schedule", ["session_id"])

    op.create_table(
        "enrollment_statuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("mentor_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("skill_name", sa.String(length=150), nullable=False),
        sa.Column("course_status", course_status, nullable=False),
        sa.Column("last_status_calculated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.func.now()),
        sa.UniqueConstraint(
            "student_id", "mentor_id", "skill_name",
            name="uq_enrollment_student_mentor_skill",
        ),
    )
    op.create_index("ix_enrollment_statuses_id", "enrollment_statuses", ["id"])
    op.create_index("ix_enrollment_statuses_student_id", "enrollment_statuses", ["student_id"])
    op.create_index("ix_enrollment_statuses_mentor_id", "enrollment_statuses", ["mentor_id"])


def downgrade() -> None:
    op.drop_table("enrollment_statuses")
    op.drop_table("session_schedule")
    op.drop_table("payments")
    op.drop_table("sessions")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (course_status, schedule_status, payment_status, session_status):
        enum_type.drop(bind, checkfirst=True)
