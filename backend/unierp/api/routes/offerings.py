"""Offering Routes — course offerings, their schedule slots and rosters.

Invariants:
    - Offering responses always carry course name, credits, enrolled_count and schedules
    - Schedule slot times exchanged as HH:MM:SS; weekdays as English names
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from unierp.api.dependencies import get_catalog_service, get_enrollment_service
from unierp.schemas.catalog import (
    OfferingCreate, OfferingResponse, OfferingUpdate,
    ScheduleCreate, ScheduleResponse, ScheduleUpdate,
)
from unierp.schemas.enrollment import RosterEntry
from unierp.services.catalog_service import CatalogService
from unierp.services.enrollment_service import EnrollmentService

router = APIRouter(prefix="/api/v1", tags=["offerings"])


@router.get("/offerings", response_model=list[OfferingResponse])
async def list_offerings(catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.list_offerings()


@router.post(
    "/offerings",
    response_model=OfferingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_offering(
    body: OfferingCreate, catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.create_offering(body)


@router.get("/offerings/{offering_id}", response_model=OfferingResponse)
async def get_offering(
    offering_id: UUID, catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.get_offering(offering_id)


@router.patch("/offerings/{offering_id}", response_model=OfferingResponse)
async def update_offering(
    offering_id: UUID,
    body: OfferingUpdate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.update_offering(offering_id, body)


@router.post(
    "/offerings/{offering_id}/schedules",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_schedule(
    offering_id: UUID,
    body: ScheduleCreate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.add_schedule(offering_id, body)


@router.patch("/schedules/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: UUID,
    body: ScheduleUpdate,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.update_schedule(schedule_id, body)


@router.delete(
    "/schedules/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_schedule(
    schedule_id: UUID, catalog: CatalogService = Depends(get_catalog_service),
):
    await catalog.delete_schedule(schedule_id)


@router.get(
    "/offerings/{offering_id}/roster", response_model=list[RosterEntry],
)
async def get_roster(
    offering_id: UUID,
    enrollments: EnrollmentService = Depends(get_enrollment_service),
):
    """Students in the offering, by name."""
    return await enrollments.roster(offering_id)
