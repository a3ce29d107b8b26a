"""Initial drip schema: content mirror, batches, enrollments, holidays.

Revision ID: 001_initial_drip
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision = "001_initial_drip"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── Enums ────────────────────────────────────────────────────────────
    op.execute("CREATE TYPE batch_status AS ENUM ('ACTIVE', 'UPCOMING', 'COMPLETED')")
    op.execute(
        "CREATE TYPE batch_enrollment_status AS ENUM ('ACTIVE', 'INACTIVE', 'COMPLETED')"
    )

    # ── Content hierarchy ────────────────────────────────────────────────
    op.create_table(
        "courses",
        sa.Column("course_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_courses_created_at", "courses", ["created_at"])

    op.create_table(
        "course_modules",
        sa.Column("module_id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "course_id", UUID(as_uuid=True),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("sort_order", sa.SmallInteger, nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_course_modules_course_id", "course_modules", ["course_id"])

    op.create_table(
        "topics",
        sa.Column("topic_id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "module_id", UUID(as_uuid=True),
            sa.ForeignKey("course_modules.module_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("sort_order", sa.SmallInteger, nullable=False),
        sa.Column("unlock_order", sa.Integer, nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "unlock_order IS NULL OR unlock_order > 0", name="ck_topics_unlock_order_positive",
        ),
    )
    op.create_index("ix_topics_module_id", "topics", ["module_id"])

    # ── Batches & enrollments ────────────────────────────────────────────
    op.create_table(
        "batches",
        sa.Column("batch_id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "course_id", UUID(as_uuid=True),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "UPCOMING", "COMPLETED", name="batch_status", create_type=False),
            nullable=False,
            server_default="ACTIVE",
        ),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_batches_course_id", "batches", ["course_id"])

    op.create_table(
        "batch_enrollments",
        sa.Column("enrollment_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("student_id", UUID(as_uuid=True), nullable=False),
        sa.Column(
            "course_id", UUID(as_uuid=True),
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "batch_id", UUID(as_uuid=True),
            sa.ForeignKey("batches.batch_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("enrollment_date", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "status",
            sa.Enum(
                "ACTIVE", "INACTIVE", "COMPLETED",
                name="batch_enrollment_status", create_type=False,
            ),
            nullable=False,
            server_default="ACTIVE",
        ),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("student_id", "course_id", name="uq_batch_enrollments_student_course"),
    )
    op.create_index("ix_batch_enrollments_batch_id", "batch_enrollments", ["batch_id"])
    op.create_index("ix_batch_enrollments_course_id", "batch_enrollments", ["course_id"])

    # ── Holidays ─────────────────────────────────────────────────────────
    op.create_table(
        "holidays",
        sa.Column("holiday_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("reason", sa.String(300), nullable=False, server_default=""),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("date", name="uq_holidays_date"),
    )


def downgrade() -> None:
    op.drop_table("holidays")
    op.drop_index("ix_batch_enrollments_course_id", table_name="batch_enrollments")
    op.drop_index("ix_batch_enrollments_batch_id", table_name="batch_enrollments")
    op.drop_table("batch_enrollments")
    op.drop_index("ix_batches_course_id", table_name="batches")
    op.drop_table("batches")
    op.drop_index("ix_topics_module_id", table_name="topics")
    op.drop_table("topics")
    op.drop_index("ix_course_modules_course_id", table_name="course_modules")
    op.drop_table("course_modules")
    op.drop_index("ix_courses_created_at", table_name="courses")
    op.drop_table("courses")
    op.execute("DROP TYPE IF EXISTS batch_enrollment_status")
    op.execute("DROP TYPE IF EXISTS batch_status")
