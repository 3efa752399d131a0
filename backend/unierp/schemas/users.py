"""User Schemas — account records for students, professors and admins.

Invariants:
    - Emails are stored lower-cased
    - student_id (institutional number) and branch/graduating_year only mean
      something for students, but are accepted for any role
"""

from datetime import datetime
from typing import Annotated, ClassVar
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from unierp.core.domain_types import UserRole
from unierp.schemas.partial_update import PartialUpdate

Email = Annotated[
    str,
    AfterValidator(lambda v: v.lower()),
    Field(max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$"),
]


class UserCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1, max_length=255)
    email: Email
    role: UserRole = Field(UserRole.STUDENT, validate_default=True)
    student_id: str | None = Field(None, max_length=50)
    branch: str | None = Field(None, max_length=100)
    graduating_year: int | None = Field(None, ge=1900, le=2200)


class UserUpdate(PartialUpdate):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset({"name", "email", "role"})

    name: str | None = Field(None, min_length=1, max_length=255)
    email: Email | None = None
    role: UserRole | None = None
    student_id: str | None = Field(None, max_length=50)
    branch: str | None = Field(None, max_length=100)
    graduating_year: int | None = Field(None, ge=1900, le=2200)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: str
    student_id: str | None = None
    branch: str | None = None
    graduating_year: int | None = None
    created_at: datetime


class UserStatistics(BaseModel):
    total_users: int
    student_count: int
    professor_count: int
    admin_count: int
    recent_users: list[UserResponse]
