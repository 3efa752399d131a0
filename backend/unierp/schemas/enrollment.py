"""Enrollment Schemas — registration requests/results, check reports, grading, transcript.

Invariants:
    - RegistrationResponse mirrors RegistrationResult: {success, message}
    - Check responses keep the validator's field names (met/missing, has_conflicts/...)
    - EnrollmentUpdate grades must be on the grade scale; attendance is 0..100
"""

from datetime import time
from decimal import Decimal
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from unierp.core.domain_types import EnrollmentStatus
from unierp.core.grades import is_valid_grade
from unierp.schemas.partial_update import PartialUpdate


# --- Registration -------------------------------------------------------------

class RegistrationRequest(BaseModel):
    offering_id: UUID


class RegistrationResponse(BaseModel):
    success: bool
    message: str


class MissingPrerequisiteOut(BaseModel):
    id: str
    name: str


class PrerequisiteCheckResponse(BaseModel):
    met: bool
    missing: list[MissingPrerequisiteOut]


class ConflictingCourseOut(BaseModel):
    id: str
    name: str
    day: str
    time: str


class TimeConflictCheckResponse(BaseModel):
    has_conflicts: bool
    conflicting_courses: list[ConflictingCourseOut]


class CreditLimitCheckResponse(BaseModel):
    allowed: bool
    current: int
    adding: int
    max: int


class RegistrationChecksResponse(BaseModel):
    prerequisites: PrerequisiteCheckResponse
    credit_limit: CreditLimitCheckResponse
    time_conflicts: TimeConflictCheckResponse


# --- Grading ------------------------------------------------------------------

class EnrollmentUpdate(PartialUpdate):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset({"status"})

    status: EnrollmentStatus | None = None
    grade: str | None = None
    midterm_grade: str | None = None
    final_grade: str | None = None
    attendance_percentage: Decimal | None = Field(None, ge=0, le=100)
    feedback: str | None = Field(None, max_length=5000)

    @field_validator("grade", "midterm_grade", "final_grade")
    @classmethod
    def grade_on_scale(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_grade(v):
            raise ValueError(f"'{v}' is not on the grade scale")
        return v


# --- Listings -----------------------------------------------------------------

class EnrollmentResponse(BaseModel):
    student_id: UUID
    course_offering_id: UUID
    course_id: str
    course_name: str
    credits: int
    semester: str
    year: int
    status: str
    grade: str | None = None
    midterm_grade: str | None = None
    final_grade: str | None = None
    attendance_percentage: Decimal | None = None
    feedback: str | None = None


class HistoryEntry(EnrollmentResponse):
    instructor_name: str | None = None


class RosterEntry(BaseModel):
    student_id: UUID
    student_name: str
    student_number: str | None = None
    status: str
    grade: str | None = None
    attendance_percentage: Decimal | None = None


class GpaResponse(BaseModel):
    gpa: float
    total_credits: int
    completed_courses: int


# --- Timetable ----------------------------------------------------------------

class TimetableEntry(BaseModel):
    offering_id: UUID
    course_id: str
    course_name: str
    start_time: time
    end_time: time
    room_number: str | None = None
    schedule_type: str | None = None


class TimetableResponse(BaseModel):
    student_id: UUID
    days: dict[str, list[TimetableEntry]]
