"""Enrollment ORM — a student's registration in one course offering.

Invariants:
    - (student_id, course_offering_id) is the primary key: at most one row per pair,
      so a second concurrent insert for the same pair fails with IntegrityError
    - status transitions: enrolled -> completed | dropped (both terminal)
    - grade is meaningful only once status is completed

Design Decisions:
    - Composite PK doubles as the uniqueness guard for registration
    - Re-taking a course creates a fresh row against the new offering
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from unierp.db.base import Base


class Enrollment(Base):
    __tablename__ = "enrollments"

    student_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    course_offering_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("course_offerings.id", ondelete="CASCADE"),
        primary_key=True,
    )
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="enrolled",
    )
    grade: Mapped[str | None] = mapped_column(String(5), nullable=True)
    midterm_grade: Mapped[str | None] = mapped_column(String(5), nullable=True)
    final_grade: Mapped[str | None] = mapped_column(String(5), nullable=True)
    attendance_percentage: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2), nullable=True, default=0,
    )
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    offering: Mapped["CourseOffering"] = relationship(
        "CourseOffering", back_populates="enrollments",
    )
