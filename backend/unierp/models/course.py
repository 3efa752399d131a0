"""Course ORM — catalog entry, keyed by its department code.

Invariants:
    - id is the catalog code (e.g. "CS101"), not a UUID
    - credits is the credit count every offering of the course carries
    - deleting a course cascades to its offerings and prerequisite edges
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Text, Integer, Numeric, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from unierp.db.base import Base


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    credits: Mapped[int] = mapped_column(Integer, nullable=False)
    theory_credits: Mapped[Decimal | None] = mapped_column(
        Numeric(3, 1), nullable=True, default=0,
    )
    lab_credits: Mapped[Decimal | None] = mapped_column(
        Numeric(3, 1), nullable=True, default=0,
    )
    course_type: Mapped[str | None] = mapped_column(
        String(50), nullable=True, default="core",
    )
    is_active: Mapped[bool] = mapped_column(
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

    offerings: Mapped[list["CourseOffering"]] = relationship(
        "CourseOffering", back_populates="course",
        cascade="all, delete-orphan", lazy="selectin",
    )
    prerequisites: Mapped[list["Prerequisite"]] = relationship(
        "Prerequisite",
        foreign_keys="Prerequisite.course_id",
        cascade="all, delete-orphan", lazy="selectin",
    )
