"""User ORM — students, professors and admins share one table.

Invariants:
    - id is UUID primary key
    - email is unique; student_id (institutional number) unique when present
    - role is one of: student, professor, admin

Design Decisions:
    - Single users table with role column: enrollments and offerings reference it directly
    - Registration locks the student's row (SELECT ... FOR UPDATE) to serialize
      concurrent registrations by the same student
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from unierp.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(
        String(50), nullable=False, default="student",
    )
    student_id: Mapped[str | None] = mapped_column(
        String(50), nullable=True, unique=True,
    )
    branch: Mapped[str | None] = mapped_column(String(100), nullable=True)
    graduating_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
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
