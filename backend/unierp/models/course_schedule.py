"""CourseSchedule ORM — one weekly meeting slot of an offering.

Invariants:
    - day_of_week holds the English weekday name ("Monday".."Sunday")
    - start_time < end_time (checked at the schema boundary)
"""

import uuid
from datetime import time

from sqlalchemy import String, Time, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from unierp.db.base import Base


class CourseSchedule(Base):
    __tablename__ = "course_schedules"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    course_offering_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("course_offerings.id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    room_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    schedule_type: Mapped[str | None] = mapped_column(
        String(50), nullable=True, default="lecture",
    )

    offering: Mapped["CourseOffering"] = relationship(
        "CourseOffering", back_populates="schedules",
    )
