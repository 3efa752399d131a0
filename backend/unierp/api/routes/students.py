"""Student Routes — registration checks, register/drop, grading, history, GPA, timetable.

Invariants:
    - Register/drop always answer 200 with {success, message}; a denial is not an HTTP error
    - Unknown offering on register or any check -> 404 (ResourceNotFoundError)
    - The checks endpoint reports all three checks without short-circuiting
"""

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends

from unierp.api.dependencies import get_enrollment_service, get_registration_validator
from unierp.core.domain_types import OfferingId, StudentId
from unierp.schemas.enrollment import (
    EnrollmentResponse, EnrollmentUpdate, GpaResponse, HistoryEntry,
    RegistrationChecksResponse, RegistrationRequest, RegistrationResponse,
    TimetableEntry, TimetableResponse,
)
from unierp.services.enrollment_service import EnrollmentService
from unierp.services.registration_validator import RegistrationValidator

router = APIRouter(prefix="/api/v1/students", tags=["students"])


@router.get(
    "/{student_id}/offerings/{offering_id}/checks",
    response_model=RegistrationChecksResponse,
)
async def run_registration_checks(
    student_id: UUID,
    offering_id: UUID,
    validator: RegistrationValidator = Depends(get_registration_validator),
):
    """Preview every registration check for an offering."""
    sid, oid = StudentId(student_id), OfferingId(offering_id)
    prerequisites = await validator.check_prerequisites(sid, oid)
    credit_limit = await validator.check_credit_limit(sid, oid)
    time_conflicts = await validator.check_time_conflicts(sid, oid)
    return RegistrationChecksResponse(
        prerequisites=asdict(prerequisites),
        credit_limit=asdict(credit_limit),
        time_conflicts=asdict(time_conflicts),
    )


@router.post("/{student_id}/enrollments", response_model=RegistrationResponse)
async def register_for_course(
    student_id: UUID,
    body: RegistrationRequest,
    validator: RegistrationValidator = Depends(get_registration_validator),
):
    result = await validator.register_for_course(
        StudentId(student_id), OfferingId(body.offering_id),
    )
    return RegistrationResponse(success=result.success, message=result.message)


@router.delete(
    "/{student_id}/enrollments/{offering_id}", response_model=RegistrationResponse,
)
async def drop_course(
    student_id: UUID,
    offering_id: UUID,
    validator: RegistrationValidator = Depends(get_registration_validator),
):
    result = await validator.drop_course(
        StudentId(student_id), OfferingId(offering_id),
    )
    return RegistrationResponse(success=result.success, message=result.message)


@router.get(
    "/{student_id}/enrollments", response_model=list[EnrollmentResponse],
)
async def list_enrollments(
    student_id: UUID,
    enrollments: EnrollmentService = Depends(get_enrollment_service),
):
    return await enrollments.list_for_student(student_id)


@router.patch(
    "/{student_id}/enrollments/{offering_id}", response_model=EnrollmentResponse,
)
async def update_enrollment(
    student_id: UUID,
    offering_id: UUID,
    body: EnrollmentUpdate,
    enrollments: EnrollmentService = Depends(get_enrollment_service),
):
    """Record grades, attendance, feedback or a status change."""
    return await enrollments.update_enrollment(student_id, offering_id, body)


@router.get("/{student_id}/history", response_model=list[HistoryEntry])
async def course_history(
    student_id: UUID,
    enrollments: EnrollmentService = Depends(get_enrollment_service),
):
    return await enrollments.history(student_id)


@router.get("/{student_id}/gpa", response_model=GpaResponse)
async def gpa(
    student_id: UUID,
    enrollments: EnrollmentService = Depends(get_enrollment_service),
):
    summary = await enrollments.gpa(student_id)
    return GpaResponse(**asdict(summary))


@router.get("/{student_id}/timetable", response_model=TimetableResponse)
async def timetable(
    student_id: UUID,
    enrollments: EnrollmentService = Depends(get_enrollment_service),
):
    days = await enrollments.timetable(student_id)
    return TimetableResponse(
        student_id=student_id,
        days={
            day: [
                TimetableEntry(
                    offering_id=slot.offering_id,
                    course_id=slot.course_id,
                    course_name=slot.course_name,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    room_number=slot.room_number,
                    schedule_type=slot.schedule_type,
                )
                for slot in slots
            ]
            for day, slots in days.items()
        },
    )
