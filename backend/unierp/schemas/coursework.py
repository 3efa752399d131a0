"""Coursework Schemas — assignments, submissions and submission grading.

Invariants:
    - A submission carries text, a file reference, or both
    - Grades are non-negative; the upper bound (max_points) is checked by the service
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from unierp.schemas.partial_update import PartialUpdate


# --- Assignments --------------------------------------------------------------

class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    due_date: datetime
    max_points: int = Field(100, ge=1)
    created_by: UUID | None = None
    is_active: bool = True


class AssignmentUpdate(PartialUpdate):
    NON_NULLABLE: ClassVar[frozenset[str]] = frozenset(
        {"title", "due_date", "max_points", "is_active"},
    )

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    due_date: datetime | None = None
    max_points: int | None = Field(None, ge=1)
    is_active: bool | None = None


class AssignmentResponse(BaseModel):
    id: UUID
    course_offering_id: UUID
    course_id: str
    course_name: str
    title: str
    description: str | None = None
    due_date: datetime
    max_points: int
    created_by: UUID | None = None
    creator_name: str | None = None
    is_active: bool
    created_at: datetime


# --- Submissions --------------------------------------------------------------

class SubmissionCreate(BaseModel):
    submission_text: str | None = None
    file_path: str | None = Field(None, max_length=500)
    file_name: str | None = Field(None, max_length=255)
    file_type: str | None = Field(None, max_length=100)

    @model_validator(mode="after")
    def has_content(self):
        if not (self.submission_text or self.file_path):
            raise ValueError("submission needs submission_text or file_path")
        return self


class SubmissionGrade(BaseModel):
    model_config = ConfigDict(extra="forbid")

    grade: Decimal = Field(ge=0)
    feedback: str | None = None


class SubmissionResponse(BaseModel):
    id: UUID
    assignment_id: UUID
    student_id: UUID
    student_name: str
    student_number: str | None = None
    submission_text: str | None = None
    file_path: str | None = None
    file_name: str | None = None
    file_type: str | None = None
    grade: Decimal | None = None
    feedback: str | None = None
    status: str
    submitted_at: datetime
    updated_at: datetime
