"""Assignment Routes — assignments per offering, submissions and grading.

Invariants:
    - Submitting is idempotent per (assignment, student): PUT creates or revises
    - Refused submissions (not enrolled, overdue, closed) and out-of-range grades -> 400
    - Unknown offering, assignment or submission -> 404
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from unierp.api.dependencies import get_coursework_service
from unierp.schemas.coursework import (
    AssignmentCreate, AssignmentResponse, AssignmentUpdate,
    SubmissionCreate, SubmissionGrade, SubmissionResponse,
)
from unierp.services.coursework_service import CourseworkService

router = APIRouter(prefix="/api/v1", tags=["assignments"])


@router.get(
    "/offerings/{offering_id}/assignments", response_model=list[AssignmentResponse],
)
async def list_assignments(
    offering_id: UUID,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    return await coursework.list_assignments(offering_id)


@router.post(
    "/offerings/{offering_id}/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_assignment(
    offering_id: UUID,
    body: AssignmentCreate,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    return await coursework.create_assignment(offering_id, body)


@router.get(
    "/students/{student_id}/assignments", response_model=list[AssignmentResponse],
)
async def student_assignments(
    student_id: UUID,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    """Open assignments across the student's current enrollments."""
    return await coursework.list_for_student(student_id)


@router.get("/assignments/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(
    assignment_id: UUID,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    return await coursework.get_assignment(assignment_id)


@router.patch("/assignments/{assignment_id}", response_model=AssignmentResponse)
async def update_assignment(
    assignment_id: UUID,
    body: AssignmentUpdate,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    return await coursework.update_assignment(assignment_id, body)


@router.delete(
    "/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_assignment(
    assignment_id: UUID,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    await coursework.delete_assignment(assignment_id)


@router.get(
    "/assignments/{assignment_id}/submissions",
    response_model=list[SubmissionResponse],
)
async def list_submissions(
    assignment_id: UUID,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    return await coursework.list_submissions(assignment_id)


@router.put(
    "/assignments/{assignment_id}/submissions/{student_id}",
    response_model=SubmissionResponse,
)
async def submit_assignment(
    assignment_id: UUID,
    student_id: UUID,
    body: SubmissionCreate,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    return await coursework.submit(assignment_id, student_id, body)


@router.get(
    "/assignments/{assignment_id}/submissions/{student_id}",
    response_model=SubmissionResponse,
)
async def get_submission(
    assignment_id: UUID,
    student_id: UUID,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    return await coursework.get_submission(assignment_id, student_id)


@router.post(
    "/assignments/{assignment_id}/submissions/{student_id}/grade",
    response_model=SubmissionResponse,
)
async def grade_submission(
    assignment_id: UUID,
    student_id: UUID,
    body: SubmissionGrade,
    coursework: CourseworkService = Depends(get_coursework_service),
):
    return await coursework.grade_submission(assignment_id, student_id, body)
