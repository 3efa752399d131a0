"""CourseOffering ORM — one semester/year delivery of a Course.

Invariants:
    - course_id references courses.id; credits are read from the Course
    - max_students is stored and displayed; enforced only when enforce_capacity is on
    - schedules cascade-delete with the offering

Design Decisions:
    - schedules loaded with selectin: async sessions cannot lazy-load on attribute access
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from unierp.db.base import Base


class CourseOffering(Base):
    __tablename__ = "course_offerings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    course_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    professor_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    semester: Mapped[str] = mapped_column(String(50), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    max_students: Mapped[int] = mapped_column(
        Integer, nullable=False, default=50,
    )
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    registration_open: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
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

    course: Mapped["Course"] = relationship(
        "Course", back_populates="offerings", lazy="selectin",
    )
    schedules: Mapped[list["CourseSchedule"]] = relationship(
        "CourseSchedule", back_populates="offering",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="CourseSchedule.start_time",
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        "Enrollment", back_populates="offering",
        cascade="all, delete-orphan", passive_deletes=True,
    )
