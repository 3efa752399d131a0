"""Catalog Schemas — courses, prerequisite edges, offerings and schedule slots.

Invariants:
    - Course credits are 0..25 (never more than the credit ceiling)
    - min_grade, when present, is a letter on the grade scale
    - ScheduleCreate.end_time > start_time; day_of_week is an English weekday name
    - Times serialize as zero-padded HH:MM:SS
"""

from datetime import time
from decimal import Decimal
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from unierp.core.domain_types import DayOfWeek
from unierp.core.grades import is_valid_grade
from unierp.schemas.partial_update import PartialUpdate


def _check_grade(v: str | None) -> str | None:
    if v is not None and not is_valid_grade(v):
        raise ValueError(f"'{v}' is not on the grade scale")
    return v


# --- Courses ------------------------------------------------------------------

class CourseCreate(BaseModel):
    id: str = Field(min_length=2, max_length=50, pattern=r"^[A-Za-z0-9_-]+$")
    name: str = Field(min_length=1, max_length=255)
    department: str = Field(min_length=1, max_length=100)
    description: str | None = None
    credits: int = Field(ge=0, le=25)
    theory_credits: Decimal | None = Field(None, ge=0)
    lab_credits: Decimal | None = Field(None, ge=0)
    course_type: str | None = Field("core", max_length=50)
    is_active: bool = True

    @field_validator("id")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()


class CourseUpdate(PartialUpdate):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset(
        {"name", "department", "credits", "is_active"},
    )

    name: str | None = Field(None, min_length=1, max_length=255)
    department: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    credits: int | None = Field(None, ge=0, le=25)
    theory_credits: Decimal | None = Field(None, ge=0)
    lab_credits: Decimal | None = Field(None, ge=0)
    course_type: str | None = Field(None, max_length=50)
    is_active: bool | None = None


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    department: str
    description: str | None = None
    credits: int
    theory_credits: Decimal | None = None
    lab_credits: Decimal | None = None
    course_type: str | None = None
    is_active: bool


# --- Prerequisites ------------------------------------------------------------

class PrerequisiteCreate(BaseModel):
    prerequisite_id: str = Field(min_length=2, max_length=50)
    min_grade: str | None = None

    @field_validator("prerequisite_id")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("min_grade")
    @classmethod
    def grade_on_scale(cls, v: str | None) -> str | None:
        return _check_grade(v)


class PrerequisiteResponse(BaseModel):
    course_id: str
    prerequisite_id: str
    prerequisite_name: str
    min_grade: str | None = None


# --- Schedule slots -----------------------------------------------------------

class ScheduleCreate(BaseModel):
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    room_number: str | None = Field(None, max_length=50)
    schedule_type: str | None = Field("lecture", max_length=50)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ScheduleUpdate(PartialUpdate):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset(
        {"day_of_week", "start_time", "end_time"},
    )

    day_of_week: DayOfWeek | None = None
    start_time: time | None = None
    end_time: time | None = None
    room_number: str | None = Field(None, max_length=50)
    schedule_type: str | None = Field(None, max_length=50)


class ScheduleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    course_offering_id: UUID
    day_of_week: str
    start_time: time
    end_time: time
    room_number: str | None = None
    schedule_type: str | None = None


# --- Offerings ----------------------------------------------------------------

class OfferingCreate(BaseModel):
    course_id: str = Field(min_length=2, max_length=50)
    professor_id: UUID | None = None
    semester: str = Field(min_length=1, max_length=50)
    year: int = Field(ge=1900, le=2200)
    max_students: int = Field(50, ge=1)
    location: str | None = Field(None, max_length=100)
    registration_open: bool = True
    schedules: list[ScheduleCreate] = Field(default_factory=list)

    @field_validator("course_id")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()


class OfferingUpdate(PartialUpdate):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset(
        {"semester", "year", "max_students", "registration_open"},
    )

    professor_id: UUID | None = None
    semester: str | None = Field(None, min_length=1, max_length=50)
    year: int | None = Field(None, ge=1900, le=2200)
    max_students: int | None = Field(None, ge=1)
    location: str | None = Field(None, max_length=100)
    registration_open: bool | None = None


class OfferingResponse(BaseModel):
    id: UUID
    course_id: str
    course_name: str
    credits: int
    professor_id: UUID | None = None
    semester: str
    year: int
    max_students: int
    location: str | None = None
    registration_open: bool
    enrolled_count: int = 0
    schedules: list[ScheduleResponse] = Field(default_factory=list)
