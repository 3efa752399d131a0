"""Initial schema — users, courses, prerequisites, offerings, schedules, enrollments.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

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
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.String(50), nullable=False, server_default="student"),
        sa.Column("student_id", sa.String(50), nullable=True, unique=True),
        sa.Column("branch", sa.String(100), nullable=True),
        sa.Column("graduating_year", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "courses",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("department", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("credits", sa.Integer, nullable=False),
        sa.Column("theory_credits", sa.Numeric(3, 1), nullable=True, server_default="0"),
        sa.Column("lab_credits", sa.Numeric(3, 1), nullable=True, server_default="0"),
        sa.Column("course_type", sa.String(50), nullable=True, server_default="core"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "prerequisites",
        sa.Column("course_id", sa.String(50), sa.ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("prerequisite_id", sa.String(50), sa.ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("min_grade", sa.String(5), nullable=True),
    )

    op.create_table(
        "course_offerings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("course_id", sa.String(50), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("professor_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("semester", sa.String(50), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("max_students", sa.Integer, nullable=False, server_default="50"),
        sa.Column("location", sa.String(100), nullable=True),
        sa.Column("registration_open", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "course_schedules",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("course_offering_id", UUID(as_uuid=True), sa.ForeignKey("course_offerings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.String(10), nullable=False),
        sa.Column("start_time", sa.Time, nullable=False),
        sa.Column("end_time", sa.Time, nullable=False),
        sa.Column("room_number", sa.String(50), nullable=True),
        sa.Column("schedule_type", sa.String(50), nullable=True, server_default="lecture"),
        sa.CheckConstraint("start_time < end_time", name="ck_course_schedules_time_range"),
    )

    op.create_table(
        "enrollments",
        sa.Column("student_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("course_offering_id", UUID(as_uuid=True), sa.ForeignKey("course_offerings.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="enrolled"),
        sa.Column("grade", sa.String(5), nullable=True),
        sa.Column("midterm_grade", sa.String(5), nullable=True),
        sa.Column("final_grade", sa.String(5), nullable=True),
        sa.Column("attendance_percentage", sa.Numeric(5, 2), nullable=True, server_default="0"),
        sa.Column("feedback", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_index("ix_course_offerings_course_id", "course_offerings", ["course_id"])
    op.create_index("ix_course_schedules_offering_id", "course_schedules", ["course_offering_id"])
    op.create_index("ix_enrollments_offering_status", "enrollments", ["course_offering_id", "status"])


def downgrade() -> None:
    op.drop_index("ix_enrollments_offering_status")
    op.drop_index("ix_course_schedules_offering_id")
    op.drop_index("ix_course_offerings_course_id")
    op.drop_table("enrollments")
    op.drop_table("course_schedules")
    op.drop_table("course_offerings")
    op.drop_table("prerequisites")
    op.drop_table("courses")
    op.drop_table("users")
