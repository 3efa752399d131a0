"""Service test fixtures — async DB, FastAPI test client and catalog seeding.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager replaced so readiness probes hit the test engine
    - Seeded rows are committed before the test body runs

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (SELECT ... FOR UPDATE is a no-op there; row locking is exercised on PostgreSQL only)
    - CatalogSeeder builds rows through the ORM so tests state only what they care about
"""

import uuid
from datetime import time

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from unierp.db.base import Base
from unierp.infrastructure.database import get_db, DatabaseSessionManager
import unierp.infrastructure.database as db_module
from unierp.main import app
from unierp.models import (
    Course, CourseOffering, CourseSchedule, Enrollment, Prerequisite,
    SystemSetting, User,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


class CatalogSeeder:
    """Inserts users, courses, offerings and enrollments, committing each."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _save(self, row):
        self.db.add(row)
        await self.db.commit()
        return row

    async def student(self, name: str = "John Doe") -> User:
        return await self._save(User(
            name=name,
            email=f"{uuid.uuid4().hex}@example.com",
            role="student",
            student_id=uuid.uuid4().hex[:12].upper(),
        ))

    async def professor(self, name: str = "Professor Smith") -> User:
        return await self._save(User(
            name=name, email=f"{uuid.uuid4().hex}@example.com", role="professor",
        ))

    async def admin(self, name: str = "Admin User") -> User:
        return await self._save(User(
            name=name, email=f"{uuid.uuid4().hex}@example.com", role="admin",
        ))

    async def setting(self, key: str, value: str) -> SystemSetting:
        return await self._save(SystemSetting(key=key, value=value))

    async def course(
        self, course_id: str, credits: int = 4, name: str | None = None,
    ) -> Course:
        return await self._save(Course(
            id=course_id,
            name=name or f"{course_id} Course",
            department="Computer Science",
            credits=credits,
        ))

    async def prerequisite(
        self, course_id: str, prerequisite_id: str, min_grade: str | None = None,
    ) -> Prerequisite:
        return await self._save(Prerequisite(
            course_id=course_id, prerequisite_id=prerequisite_id,
            min_grade=min_grade,
        ))

    async def offering(
        self,
        course_id: str,
        *slots: tuple[str, str, str],
        max_students: int = 50,
        semester: str = "Spring",
        year: int = 2025,
        professor: User | None = None,
        registration_open: bool = True,
    ) -> CourseOffering:
        """slots are (day, "HH:MM", "HH:MM") triples."""
        return await self._save(CourseOffering(
            course_id=course_id,
            registration_open=registration_open,
            professor_id=professor.id if professor else None,
            semester=semester,
            year=year,
            max_students=max_students,
            schedules=[
                CourseSchedule(
                    day_of_week=day,
                    start_time=time.fromisoformat(start),
                    end_time=time.fromisoformat(end),
                    room_number="LT-1",
                )
                for day, start, end in slots
            ],
        ))

    async def enrollment(
        self,
        student: User,
        offering: CourseOffering,
        status: str = "enrolled",
        grade: str | None = None,
    ) -> Enrollment:
        return await self._save(Enrollment(
            student_id=student.id,
            course_offering_id=offering.id,
            status=status,
            grade=grade,
        ))


@pytest.fixture
def seed(test_db) -> CatalogSeeder:
    return CatalogSeeder(test_db)
