"""Prerequisite ORM — directed edge course -> required course.

Invariants:
    - (course_id, prerequisite_id) is the primary key: one edge per pair
    - min_grade is optional; only evaluated in enforce_threshold mode
"""

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from unierp.db.base import Base


class Prerequisite(Base):
    __tablename__ = "prerequisites"

    course_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("courses.id", ondelete="CASCADE"),
        primary_key=True,
    )
    prerequisite_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("courses.id", ondelete="CASCADE"),
        primary_key=True,
    )
    min_grade: Mapped[str | None] = mapped_column(String(5), nullable=True)
