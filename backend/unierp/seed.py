"""Seed Data — creates the schema and a minimal demo catalog.

Usage:
    python -m unierp.seed

Invariants:
    - Idempotent: rows that already exist (by email / course code) are left alone
    - Demo offering CS101 Spring 2025 meets Monday 10:00:00-11:30:00 in LT-1 and
      carries a pinned welcome announcement
    - Registration is switched on system-wide
"""

import asyncio
import logging
from datetime import time

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from unierp.config import get_settings
from unierp.db.base import Base
from unierp.db.session import create_session_factory
from unierp.infrastructure.observability import setup_logging
from unierp.core.system_settings import REGISTRATION_OPEN
from unierp.models import (
    Announcement, Course, CourseOffering, CourseSchedule, Prerequisite,
    SystemSetting, User,
)

logger = logging.getLogger(__name__)

USERS = [
    {"name": "Admin User", "email": "admin@example.com", "role": "admin"},
    {"name": "Professor Smith", "email": "professor@example.com", "role": "professor"},
    {
        "name": "John Doe", "email": "student@example.com", "role": "student",
        "student_id": "2023A7PS0001", "branch": "Computer Science",
        "graduating_year": 2025,
    },
]

COURSES = [
    {
        "id": "CS101", "name": "Introduction to Programming",
        "department": "Computer Science", "credits": 4,
        "description": "An introductory course to programming concepts using Python",
    },
    {
        "id": "CS201", "name": "Data Structures and Algorithms",
        "department": "Computer Science", "credits": 4,
    },
    {
        "id": "MATH101", "name": "Calculus I", "department": "Mathematics",
        "credits": 4,
        "description": "Introduction to differential and integral calculus",
    },
]


async def _get_or_create_user(db: AsyncSession, data: dict) -> User:
    result = await db.execute(select(User).where(User.email == data["email"]))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(**data)
        db.add(user)
        await db.flush()
    return user


async def seed(db: AsyncSession) -> None:
    users = [await _get_or_create_user(db, data) for data in USERS]
    professor = users[1]

    for data in COURSES:
        if await db.get(Course, data["id"]) is None:
            db.add(Course(**data))
    await db.flush()

    if await db.get(Prerequisite, ("CS201", "CS101")) is None:
        db.add(Prerequisite(course_id="CS201", prerequisite_id="CS101", min_grade="C"))

    existing = await db.execute(
        select(CourseOffering.id)
        .where(CourseOffering.course_id == "CS101")
        .where(CourseOffering.semester == "Spring")
        .where(CourseOffering.year == 2025),
    )
    if existing.first() is None:
        offering = CourseOffering(
            course_id="CS101", professor_id=professor.id,
            semester="Spring", year=2025, max_students=50, location="LT-1",
            schedules=[CourseSchedule(
                day_of_week="Monday", start_time=time(10, 0),
                end_time=time(11, 30), room_number="LT-1",
            )],
        )
        db.add(offering)
        await db.flush()
        db.add(Announcement(
            course_offering_id=offering.id, created_by=professor.id,
            title="Welcome to CS101",
            content="Welcome to Introduction to Programming! Please review the syllabus.",
            is_pinned=True,
        ))

    setting = await db.execute(
        select(SystemSetting.id).where(SystemSetting.key == REGISTRATION_OPEN),
    )
    if setting.first() is None:
        db.add(SystemSetting(key=REGISTRATION_OPEN, value="true"))
    await db.commit()


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine, session_factory = create_session_factory(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with session_factory() as db:
        await seed(db)
    await engine.dispose()
    logger.info("Seed data loaded")


if __name__ == "__main__":
    asyncio.run(main())
