"""Route Dependencies — per-request service construction.

Invariants:
    - Every service shares the request's AsyncSession from get_db
    - RegistrationValidator reads its rules (ceiling, strictness, capacity) from Settings
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from unierp.config import Settings, get_settings
from unierp.infrastructure.database import get_db
from unierp.services.announcement_service import AnnouncementService
from unierp.services.catalog_service import CatalogService
from unierp.services.coursework_service import CourseworkService
from unierp.services.enrollment_repository import SqlEnrollmentRepository
from unierp.services.enrollment_service import EnrollmentService
from unierp.services.registration_validator import RegistrationValidator
from unierp.services.system_service import SystemService
from unierp.services.user_service import UserService


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_enrollment_service(db: AsyncSession = Depends(get_db)) -> EnrollmentService:
    return EnrollmentService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_coursework_service(db: AsyncSession = Depends(get_db)) -> CourseworkService:
    return CourseworkService(db)


def get_announcement_service(
    db: AsyncSession = Depends(get_db),
) -> AnnouncementService:
    return AnnouncementService(db)


def get_system_service(db: AsyncSession = Depends(get_db)) -> SystemService:
    return SystemService(db)


def get_registration_validator(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RegistrationValidator:
    return RegistrationValidator(
        SqlEnrollmentRepository(db),
        max_credits=settings.max_credits,
        strictness=settings.prerequisite_strictness,
        enforce_capacity=settings.enforce_capacity,
    )
